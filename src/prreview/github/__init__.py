"""GitHub integration: pull request listing, file fetch and comments."""

from prreview.github.client import (
    AuthError,
    FetchError,
    GitHubClient,
    GitHubError,
    NotFoundError,
    PermissionDeniedError,
    PullRequestSource,
    is_binary_path,
    parse_repository,
)

__all__ = [
    "AuthError",
    "FetchError",
    "GitHubClient",
    "GitHubError",
    "NotFoundError",
    "PermissionDeniedError",
    "PullRequestSource",
    "is_binary_path",
    "parse_repository",
]

"""Async GitHub REST client.

Lists open pull requests, fetches changed files with their content, and posts
review comments. A missing token is allowed for reads of public repositories.
"""

import base64
import logging
import re
from typing import Any, Protocol

import httpx

from prreview.config import DEFAULT_GITHUB_API, GitHubConfig
from prreview.models.review import PullRequestFile, PullRequestSummary

logger = logging.getLogger(__name__)

MAX_CONTENT_BYTES = 1_000_000
CONTENT_RETRIEVAL_FAILED = "Content could not be retrieved"

BINARY_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp", ".bmp",
    ".pdf", ".zip", ".gz", ".tar", ".tgz", ".rar", ".7z",
    ".exe", ".dll", ".so", ".dylib",
    ".ttf", ".otf", ".woff", ".woff2",
    ".mp3", ".mp4", ".wav", ".avi", ".mov", ".webm",
    ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
})

_REPO_URL_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/([^/\s]+)/([^/\s#?]+)", re.IGNORECASE)


class GitHubError(Exception):
    """Base exception for GitHub API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchError(GitHubError):
    """Raised when pull request data cannot be retrieved."""


class AuthError(GitHubError):
    """Raised when the token is missing, invalid or expired."""


class PermissionDeniedError(GitHubError):
    """Raised when the token lacks the required scope."""


class NotFoundError(GitHubError):
    """Raised when the repository or pull request does not exist."""


class PullRequestSource(Protocol):
    """What the orchestrator needs from a hosting provider."""

    async def fetch_pr_files(
        self, owner: str, repo: str, pr_number: int
    ) -> list[PullRequestFile]: ...


def parse_repository(text: str) -> tuple[str, str] | None:
    """Parse "owner/repo" or a GitHub URL.

    Supports:
    - owner/repo
    - github.com/owner/repo
    - https://github.com/owner/repo(.git)

    Returns:
        Tuple of (owner, repo), or None if the input is not recognized
    """
    text = text.strip()
    match = _REPO_URL_RE.search(text)
    if match:
        owner, repo = match.group(1), match.group(2)
    else:
        parts = text.split("/")
        if len(parts) != 2 or not all(parts):
            return None
        owner, repo = parts

    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        return None
    return owner, repo


def is_binary_path(path: str) -> bool:
    """Guess from the extension whether a file is binary."""
    dot = path.rfind(".")
    if dot == -1:
        return False
    return path[dot:].lower() in BINARY_EXTENSIONS


def _error_for_status(status_code: int, action: str, owner: str, repo: str, pr_number: int) -> GitHubError:
    """Map an HTTP status to a typed error with guidance."""
    if status_code == 401:
        return AuthError(
            "Authentication failed. The GitHub token is invalid or expired. "
            "Generate a new token at https://github.com/settings/tokens/new",
            status_code,
        )
    if status_code == 403:
        return PermissionDeniedError(
            f"Permission denied while trying to {action}. "
            "Ensure the token has 'repo' or 'public_repo' scope.",
            status_code,
        )
    if status_code == 404:
        return NotFoundError(
            f"Repository '{owner}/{repo}' or PR #{pr_number} doesn't exist "
            "or you don't have access to it.",
            status_code,
        )
    return GitHubError(f"Failed to {action} (HTTP {status_code})", status_code)


def _json_list(response: httpx.Response, what: str) -> list[Any]:
    """Decode a JSON array body, raising FetchError for anything else."""
    try:
        data = response.json()
    except ValueError as e:
        raise FetchError(f"GitHub returned a non-JSON body for {what}", response.status_code) from e
    if not isinstance(data, list):
        raise FetchError(f"GitHub returned an unexpected body for {what}", response.status_code)
    return data


class GitHubClient:
    """Async GitHub REST API client.

    Usage:
        async with GitHubClient(config.github) as github:
            files = await github.fetch_pr_files("acme", "widgets", 7)
    """

    def __init__(
        self,
        config: GitHubConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: GitHub settings (token, API base, timeout)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.config = config or GitHubConfig()
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"

        self._client = httpx.AsyncClient(
            base_url=(self.config.api_base or DEFAULT_GITHUB_API) + "/",
            headers=headers,
            timeout=self.config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def has_token(self) -> bool:
        return bool(self.config.token)

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "open",
    ) -> list[PullRequestSummary]:
        """List pull requests of a repository.

        Raises:
            FetchError: If the request fails
        """
        try:
            response = await self._client.get(
                f"repos/{owner}/{repo}/pulls",
                params={"state": state, "per_page": 100},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Failed to fetch pull requests from GitHub: {e.response.status_code}",
                e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch pull requests from GitHub: {e}") from e

        items = _json_list(response, "pull requests")
        try:
            return [
                PullRequestSummary(
                    number=int(item["number"]),
                    title=item.get("title") or "",
                    user=(item.get("user") or {}).get("login"),
                    created_at=item.get("created_at"),
                    updated_at=item.get("updated_at"),
                )
                for item in items
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise FetchError(f"Malformed pull request listing from GitHub: {e!r}") from e

    async def fetch_pr_files(
        self,
        owner: str,
        repo: str,
        pr_number: int,
    ) -> list[PullRequestFile]:
        """Fetch the files changed in a pull request, with content.

        Content is None for removed files, files over 1 MB and binary files.
        A failed content fetch for one file does not fail the listing.

        Raises:
            FetchError: If the file listing cannot be retrieved
        """
        try:
            response = await self._client.get(
                f"repos/{owner}/{repo}/pulls/{pr_number}/files",
                params={"per_page": 100},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Failed to fetch PR files from GitHub: {e.response.status_code}",
                e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch PR files from GitHub: {e}") from e

        files: list[PullRequestFile] = []
        for entry in _json_list(response, "PR files"):
            try:
                filename = str(entry["filename"])
                status = entry.get("status") or "modified"
                size = int(entry.get("size") or 0)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise FetchError(f"Malformed PR file entry from GitHub: {e!r}") from e

            if (
                status == "removed"
                or size > MAX_CONTENT_BYTES
                or is_binary_path(filename)
            ):
                files.append(PullRequestFile(filename=filename, status=status, content=None))
                continue

            content = await self._fetch_content(owner, repo, entry)
            files.append(PullRequestFile(filename=filename, status=status, content=content))

        logger.debug("Fetched %d files for %s/%s#%d", len(files), owner, repo, pr_number)
        return files

    async def _fetch_content(self, owner: str, repo: str, entry: dict[str, Any]) -> str:
        """Fetch and decode one file's content."""
        filename = entry["filename"]
        url = entry.get("contents_url") or f"repos/{owner}/{repo}/contents/{filename}"

        try:
            response = await self._client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not fetch content for %s: %s", filename, e)
            return CONTENT_RETRIEVAL_FAILED

        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            return "Content not available"

        try:
            return base64.b64decode(data["content"]).decode("utf-8", errors="replace")
        except (ValueError, TypeError) as e:
            logger.warning("Could not decode content for %s: %s", filename, e)
            return CONTENT_RETRIEVAL_FAILED

    async def post_comment(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        body: str,
    ) -> None:
        """Post a comment on a pull request.

        Raises:
            AuthError: If no token is configured or it is rejected
            PermissionDeniedError: If the token lacks scope
            NotFoundError: If the repository or PR does not exist
            GitHubError: On any other failure
        """
        if not self.has_token:
            raise AuthError("GitHub token is required to post comments")

        try:
            response = await self._client.post(
                f"repos/{owner}/{repo}/issues/{pr_number}/comments",
                json={"body": body},
            )
        except httpx.HTTPError as e:
            raise GitHubError(f"Failed to post comment to GitHub: {e}") from e

        if response.is_error:
            raise _error_for_status(response.status_code, "post comment", owner, repo, pr_number)

        logger.info("Posted comment to %s/%s#%d", owner, repo, pr_number)

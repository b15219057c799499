"""PR Review Helper - automated pull request review.

Fetches changed files from GitHub, asks a hosted language model for a review,
and turns whatever comes back into a fixed result shape: summary, risky files,
complex functions, refactoring suggestions and security issues.

When live analysis is unavailable the review degrades to mock data instead of
failing, so the CLI and dashboard always have something to show.
"""

__version__ = "0.1.0"
__author__ = "PR Review Helper Contributors"

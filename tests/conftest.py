"""Shared pytest fixtures for PR Review Helper tests.

Fixtures are organized by category:
- Path fixtures: canned model responses on disk
- Configuration fixtures: config dicts and objects
- Doubles: in-memory pull request sources and model transports
"""

import logging
from pathlib import Path
from typing import Any

import pytest

from prreview.config import PrReviewConfig, load_config_from_dict
from prreview.github.client import FetchError
from prreview.llm.client import InvocationFailure
from prreview.models.review import PullRequestFile

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def responses_dir(fixtures_dir: Path) -> Path:
    """Return the path to canned model responses."""
    return fixtures_dir / "responses"


@pytest.fixture
def load_response(responses_dir: Path):
    """Return a loader for a canned model response by name."""

    def _load(name: str) -> str:
        return (responses_dir / f"{name}.txt").read_text()

    return _load


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep host credentials and config files out of tests."""
    for var in (
        "GITHUB_TOKEN",
        "AMAZON_Q_MODEL_ID",
        "AWS_REGION",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_PROFILE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by CLI runs so they don't outlive the test."""
    yield
    logger = logging.getLogger("prreview")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide dummy AWS credentials in the environment."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIATEST")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete configuration dict with all sections."""
    return {
        "github": {
            "token": "ghp_test",
            "api_base": "https://github.example.com/api/v3/",
            "timeout": 10,
        },
        "llm": {
            "provider": "bedrock",
            "model": "amazon.titan-code-express-v1",
            "fallback_models": ["amazon.titan-text-express-v1", "anthropic.claude-instant-v1"],
            "region": "eu-west-1",
            "temperature": 0.1,
            "max_tokens": 2048,
        },
        "analysis": {
            "max_files": 3,
            "max_file_chars": 500,
        },
        "server": {
            "host": "0.0.0.0",
            "port": 9000,
        },
    }


@pytest.fixture
def review_config() -> PrReviewConfig:
    """Configuration with three models and default limits."""
    return load_config_from_dict(
        {
            "llm": {
                "provider": "bedrock",
                "model": "model-a",
                "fallback_models": ["model-b", "model-c"],
            }
        }
    )


# =============================================================================
# Sample Pull Request Fixtures
# =============================================================================


@pytest.fixture
def sample_files() -> list[PullRequestFile]:
    """Return changed files for a pull request."""
    return [
        PullRequestFile("src/app.py", "modified", "def main():\n    return 1\n"),
        PullRequestFile("src/auth.py", "added", "TOKEN = 'x'\n"),
        PullRequestFile("docs/logo.png", "added", None),
        PullRequestFile("README.md", "modified", "# Title\n"),
    ]


class FakeSource:
    """In-memory pull request source."""

    def __init__(self, files: list[PullRequestFile] | None = None, fail: bool = False) -> None:
        self.files = files or []
        self.fail = fail
        self.calls: list[tuple[str, str, int]] = []

    async def fetch_pr_files(self, owner: str, repo: str, pr_number: int) -> list[PullRequestFile]:
        self.calls.append((owner, repo, pr_number))
        if self.fail:
            raise FetchError("Failed to fetch PR files from GitHub: 404", 404)
        return list(self.files)


class FakeTransport:
    """Model transport returning canned text per model.

    Models mapped to an Exception instance raise InvocationFailure.
    """

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.calls: list[str] = []
        self.prompts: list[str] = []

    async def invoke(self, model: str, prompt: str) -> str:
        self.calls.append(model)
        self.prompts.append(prompt)
        outcome = self.responses.get(model, Exception("model not available"))
        if isinstance(outcome, Exception):
            raise InvocationFailure(model, str(outcome))
        return outcome


@pytest.fixture
def fake_source(sample_files: list[PullRequestFile]) -> FakeSource:
    """Source that returns the sample files."""
    return FakeSource(sample_files)


@pytest.fixture
def failing_source() -> FakeSource:
    """Source whose file fetch always fails."""
    return FakeSource(fail=True)


@pytest.fixture
def make_transport() -> type[FakeTransport]:
    """Return the FakeTransport class for building per-test transports."""
    return FakeTransport


@pytest.fixture
def make_source() -> type[FakeSource]:
    """Return the FakeSource class for building per-test sources."""
    return FakeSource

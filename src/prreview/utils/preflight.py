"""Preflight validation of credentials and optional packages.

Unlike a hard preflight gate, a missing model credential does not abort a
review: the orchestrator degrades to mock data. The checks here report what is
available so the CLI can explain degraded mode up front.
"""

import importlib.util
import os
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as dist_version
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from prreview.models.llm_config import LLMConfig


class CredentialMissing(Exception):
    """Raised when a required secret for the model provider is absent."""

    pass


@dataclass
class ToolCheck:
    """Result of checking a single dependency.

    Attributes:
        name: Dependency name
        available: Whether it is available
        version: Version if known
        required: Whether it is required for live analysis
        message: Status message (human-readable context)
    """

    name: str
    available: bool
    version: str | None = None
    required: bool = True
    message: str = ""


@dataclass
class PreflightResult:
    """Result of preflight validation.

    Attributes:
        success: Whether all required checks passed
        checks: Individual check results
        errors: Messages for failed required checks
        warnings: Messages for failed optional checks
    """

    success: bool = True
    checks: list[ToolCheck] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_check(self, check: ToolCheck) -> None:
        """Add a check result."""
        self.checks.append(check)

        if not check.available:
            if check.required:
                self.success = False
                self.errors.append(f"{check.name}: {check.message}")
            else:
                self.warnings.append(f"{check.name}: {check.message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "checks": [
                {
                    "name": c.name,
                    "available": c.available,
                    "version": c.version,
                    "required": c.required,
                    "message": c.message,
                }
                for c in self.checks
            ],
            "errors": self.errors,
            "warnings": self.warnings,
        }


def _has_aws_credentials() -> tuple[bool, str]:
    """Check environment and shared-file AWS credentials.

    Returns:
        Tuple of (found, source description)
    """
    if os.environ.get("AWS_ACCESS_KEY_ID") and os.environ.get("AWS_SECRET_ACCESS_KEY"):
        return True, "env vars"

    aws_profile = os.environ.get("AWS_PROFILE")
    credentials_path = Path.home() / ".aws" / "credentials"
    if credentials_path.exists():
        try:
            content = credentials_path.read_text()
        except OSError:
            return False, ""
        if "[default]" in content or (aws_profile and f"[{aws_profile}]" in content):
            return True, f"profile: {aws_profile or 'default'}"

    return False, ""


class PreflightChecker:
    """Reports availability of credentials and packages.

    Usage:
        checker = PreflightChecker()
        result = checker.check_all(config.llm, github_token=config.github.token)
    """

    def check_litellm(self, required: bool = True) -> ToolCheck:
        """Check that the LiteLLM package is importable."""
        spec = importlib.util.find_spec("litellm")
        if spec is None:
            return ToolCheck(
                name="litellm",
                available=False,
                required=required,
                message="LiteLLM not installed. Install with: pip install litellm",
            )

        try:
            version = dist_version("litellm")
        except PackageNotFoundError:
            version = None

        return ToolCheck(
            name="litellm",
            available=True,
            version=version,
            required=required,
            message="Unified LLM interface",
        )

    def check_github_token(self, token: str | None) -> ToolCheck:
        """Check whether a GitHub token is configured.

        The token is optional: public repositories can be read without one,
        but posting comments requires it.
        """
        if token:
            return ToolCheck(
                name="github-token",
                available=True,
                required=False,
                message="GitHub token configured",
            )
        return ToolCheck(
            name="github-token",
            available=False,
            required=False,
            message=(
                "GITHUB_TOKEN not set. Create a token at "
                "https://github.com/settings/tokens with 'repo' scope "
                "(needed for private repositories and posting comments)"
            ),
        )

    def check_llm_credentials(self, config: LLMConfig) -> ToolCheck:
        """Check that the configured provider has credentials.

        No network call is made.
        """
        name = f"llm:{config.provider}"

        if not config.enabled:
            return ToolCheck(
                name=name,
                available=False,
                message="Live analysis disabled in configuration",
            )

        if config.provider == "bedrock":
            found, source = _has_aws_credentials()
            if found:
                return ToolCheck(
                    name=name,
                    available=True,
                    message=f"AWS credentials found (region: {config.region}, {source})",
                )
            return ToolCheck(
                name=name,
                available=False,
                message=(
                    "AWS credentials missing. Configure via:\n"
                    "  - Environment: AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_REGION\n"
                    "  - Credentials file: ~/.aws/credentials"
                ),
            )

        if config.provider in {"claude", "gemini"}:
            if config.api_key:
                return ToolCheck(name=name, available=True, message="API key configured")
            return ToolCheck(
                name=name,
                available=False,
                message=f"api_key is required for {config.provider}",
            )

        # ollama
        return ToolCheck(
            name=name,
            available=bool(config.api_base),
            message=f"Local server at {config.api_base}",
        )

    def check_all(
        self,
        llm_config: LLMConfig,
        github_token: str | None = None,
    ) -> PreflightResult:
        """Run all checks.

        Args:
            llm_config: Model provider configuration
            github_token: Configured GitHub token

        Returns:
            PreflightResult with all check results
        """
        result = PreflightResult()
        result.add_check(self.check_litellm(required=True))
        result.add_check(self.check_llm_credentials(llm_config))
        result.add_check(self.check_github_token(github_token))
        return result


def ensure_llm_credentials(config: LLMConfig) -> None:
    """Raise CredentialMissing if the provider cannot be called.

    Args:
        config: Model provider configuration

    Raises:
        CredentialMissing: If credentials are absent or analysis is disabled
    """
    check = PreflightChecker().check_llm_credentials(config)
    if not check.available:
        raise CredentialMissing(check.message)

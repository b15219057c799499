"""PR Review Helper configuration system.

Configuration is YAML-based with minimal CLI overrides (--token, --config).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.prreview/config.yaml
3. ./prreview.yaml

Values not set in the file fall back to the environment:
GITHUB_TOKEN, AMAZON_Q_MODEL_ID, AWS_REGION.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from prreview.models.llm_config import DEFAULT_MODEL, DEFAULT_REGION, LLMConfig

DEFAULT_GITHUB_API = "https://api.github.com"

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class GitHubConfig:
    """GitHub API configuration.

    Attributes:
        token: Personal access token (optional for public repositories)
        api_base: REST API base URL (override for GitHub Enterprise)
        timeout: HTTP timeout in seconds
    """

    token: str | None = None
    api_base: str = DEFAULT_GITHUB_API
    timeout: float = 30.0

    def __post_init__(self) -> None:
        """Validate GitHub configuration."""
        if self.timeout <= 0:
            raise ValueError(f"GitHub timeout must be positive (got {self.timeout})")
        self.api_base = self.api_base.rstrip("/")


@dataclass
class AnalysisConfig:
    """Limits applied when building the analysis prompt.

    Attributes:
        max_files: Maximum number of changed files sent to the model
        max_file_chars: Per-file content limit before truncation
    """

    max_files: int = 5
    max_file_chars: int = 10_000

    def __post_init__(self) -> None:
        """Validate analysis limits."""
        if self.max_files <= 0:
            raise ValueError(f"max_files must be positive (got {self.max_files})")
        if self.max_file_chars <= 0:
            raise ValueError(f"max_file_chars must be positive (got {self.max_file_chars})")


@dataclass
class ServerConfig:
    """Dashboard API server settings."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class PrReviewConfig:
    """Top-level configuration.

    Attributes:
        github: GitHub API settings
        llm: Model provider settings
        analysis: Prompt size limits
        server: Dashboard API settings
    """

    github: GitHubConfig = field(default_factory=GitHubConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${GITHUB_TOKEN} -> value of GITHUB_TOKEN

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.prreview/config.yaml
    2. ./prreview.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".prreview" / "config.yaml",
        start_path / "prreview.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> PrReviewConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        PrReviewConfig instance
    """
    data = substitute_env_vars(data)

    github_data = data.get("github") or {}
    llm_data = data.get("llm") or {}
    analysis_data = data.get("analysis") or {}
    server_data = data.get("server") or {}

    config = PrReviewConfig()

    config.github = GitHubConfig(
        token=github_data.get("token") or os.environ.get("GITHUB_TOKEN") or None,
        api_base=github_data.get("api_base", DEFAULT_GITHUB_API),
        timeout=float(github_data.get("timeout", 30.0)),
    )

    llm_values = dict(llm_data)
    llm_values.setdefault("model", os.environ.get("AMAZON_Q_MODEL_ID") or DEFAULT_MODEL)
    llm_values.setdefault("region", os.environ.get("AWS_REGION") or DEFAULT_REGION)
    config.llm = LLMConfig.from_dict(llm_values)

    config.analysis = AnalysisConfig(
        max_files=int(analysis_data.get("max_files", 5)),
        max_file_chars=int(analysis_data.get("max_file_chars", 10_000)),
    )

    config.server = ServerConfig(
        host=str(server_data.get("host", "127.0.0.1")),
        port=int(server_data.get("port", 8000)),
    )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> PrReviewConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        PrReviewConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        # Environment defaults still apply without a file
        config = load_config_from_dict({})

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return f'''# PR Review Helper Configuration

# GitHub settings
github:
  # token: "${{GITHUB_TOKEN}}"   # Required for private repos and posting comments
  api_base: "{DEFAULT_GITHUB_API}"
  timeout: 30

# Model settings (mock data is used when credentials are missing)
llm:
  provider: "bedrock"    # bedrock, claude, gemini, ollama
  model: "{DEFAULT_MODEL}"
  fallback_models:
    - "amazon.titan-text-express-v1"
    - "anthropic.claude-instant-v1"
  region: "{DEFAULT_REGION}"
  # api_key: "${{ANTHROPIC_API_KEY}}"  # Required for claude/gemini
  temperature: 0.2
  max_tokens: 4096

# Prompt size limits
analysis:
  max_files: 5
  max_file_chars: 10000

# Dashboard API server
server:
  host: "127.0.0.1"
  port: 8000
'''

"""LLM Configuration entity for PR Review Helper.

Defines the configuration for the model providers used for code analysis.
Supports multiple providers through LiteLLM: Bedrock, Claude, Gemini, and Ollama.
"""

from dataclasses import dataclass, field

# Valid LLM providers
VALID_PROVIDERS = frozenset({"bedrock", "claude", "gemini", "ollama"})

DEFAULT_MODEL = "amazon.titan-code-express-v1"
DEFAULT_FALLBACK_MODELS = (
    "amazon.titan-text-express-v1",
    "anthropic.claude-instant-v1",
)
DEFAULT_REGION = "us-east-1"


@dataclass
class LLMConfig:
    """Configuration for the model provider.

    Attributes:
        provider: LLM provider (bedrock, claude, gemini, ollama)
        model: Primary model identifier (e.g., "amazon.titan-code-express-v1")
        fallback_models: Model identifiers tried in order when the primary fails
        api_key: API key (Claude and Gemini only)
        api_base: API base URL (required for Ollama)
        region: AWS region for Bedrock
        temperature: Sampling temperature (0.0 - 1.0)
        max_tokens: Maximum response tokens
        timeout: Request timeout in seconds (None uses the LiteLLM default)
        enabled: Whether live analysis is enabled (mock data otherwise)
    """

    provider: str = "bedrock"
    model: str = DEFAULT_MODEL
    fallback_models: list[str] = field(default_factory=lambda: list(DEFAULT_FALLBACK_MODELS))
    api_key: str | None = None
    api_base: str | None = None
    region: str = DEFAULT_REGION
    temperature: float = 0.2
    max_tokens: int = 4096
    timeout: float | None = None
    enabled: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.provider = self.provider.lower().strip()

        if self.provider not in VALID_PROVIDERS:
            raise ValueError(
                f"Invalid provider '{self.provider}'. "
                f"Must be one of: {sorted(VALID_PROVIDERS)}"
            )

        if not self.model or not self.model.strip():
            raise ValueError("Model identifier cannot be empty")
        self.model = self.model.strip()

        self.fallback_models = [m.strip() for m in self.fallback_models if m and m.strip()]

        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1. Got: {self.temperature}")

        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive. Got: {self.max_tokens}")

        # Ollama always needs a server to talk to
        if self.provider == "ollama" and not self.api_base:
            self.api_base = "http://localhost:11434"

    @property
    def model_chain(self) -> list[str]:
        """Primary model followed by fallbacks, without duplicates."""
        chain: list[str] = []
        for model in [self.model, *self.fallback_models]:
            if model not in chain:
                chain.append(model)
        return chain

    def validate(self) -> list[str]:
        """Validate configuration and return warnings.

        Returns:
            List of warning messages (empty if no warnings)
        """
        warnings: list[str] = []

        if self.max_tokens < 1000:
            warnings.append(
                f"max_tokens is set to {self.max_tokens}, which may truncate responses"
            )

        if not self.fallback_models:
            warnings.append("No fallback models configured")

        if (
            self.provider == "ollama"
            and self.api_base
            and not self.api_base.startswith(("http://", "https://"))
        ):
            warnings.append(
                f"api_base '{self.api_base}' does not start with http:// or https://"
            )

        return warnings

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization.

        The API key is masked.
        """
        return {
            "provider": self.provider,
            "model": self.model,
            "fallback_models": list(self.fallback_models),
            "api_key": "***" if self.api_key else None,
            "api_base": self.api_base,
            "region": self.region,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LLMConfig":
        """Create LLMConfig from dictionary.

        Args:
            data: Dictionary with configuration values

        Returns:
            LLMConfig instance
        """
        fallbacks = data.get("fallback_models")
        if fallbacks is None:
            fallbacks = list(DEFAULT_FALLBACK_MODELS)
        elif isinstance(fallbacks, str):
            fallbacks = [m.strip() for m in fallbacks.split(",")]

        timeout = data.get("timeout")
        return cls(
            provider=str(data.get("provider", "bedrock")),
            model=str(data.get("model", DEFAULT_MODEL)),
            fallback_models=list(fallbacks),  # type: ignore[arg-type]
            api_key=data.get("api_key") if data.get("api_key") else None,  # type: ignore[arg-type]
            api_base=data.get("api_base") if data.get("api_base") else None,  # type: ignore[arg-type]
            region=str(data.get("region") or DEFAULT_REGION),
            temperature=float(data.get("temperature", 0.2)),  # type: ignore[arg-type]
            max_tokens=int(data.get("max_tokens", 4096)),  # type: ignore[arg-type]
            timeout=float(timeout) if timeout is not None else None,  # type: ignore[arg-type]
            enabled=bool(data.get("enabled", True)),
        )

    def get_litellm_model_name(self, model: str | None = None) -> str:
        """Get a model name in LiteLLM format.

        Args:
            model: Model identifier (defaults to the primary model)

        Returns:
            Model name formatted for LiteLLM
        """
        model = model or self.model
        if self.provider == "ollama":
            return f"ollama/{model}"
        elif self.provider == "bedrock":
            return f"bedrock/{model}"
        elif self.provider == "gemini":
            return f"gemini/{model}"
        else:
            return f"anthropic/{model}"

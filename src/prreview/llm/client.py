"""Model invocation transport using LiteLLM.

Provides a consistent async interface over the supported providers. The
transport knows nothing about fallbacks: it invokes exactly one model
identifier per call and raises InvocationFailure on any provider error.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import litellm

from prreview.llm.prompts import ANALYSIS_SYSTEM_PROMPT
from prreview.models.llm_config import LLMConfig

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Base exception for model-related errors."""

    pass


class InvocationFailure(LLMError):
    """Raised when a single model identifier fails."""

    def __init__(self, model: str, reason: str) -> None:
        super().__init__(f"{model}: {reason}")
        self.model = model
        self.reason = reason


class AllModelsExhausted(LLMError):
    """Raised when every configured model identifier failed.

    Only the last attempted model's failure is retained; earlier failures are
    logged.
    """

    def __init__(self, model: str, reason: str) -> None:
        super().__init__(f"All models failed; last was {model}: {reason}")
        self.model = model
        self.reason = reason


class ModelTransport(Protocol):
    """Anything that can turn (model, prompt) into raw text."""

    async def invoke(self, model: str, prompt: str) -> str: ...


@dataclass
class LLMResponse:
    """Response from a completion.

    Attributes:
        content: Generated text content
        model: Model that generated the response
        usage: Token usage statistics
        finish_reason: Reason for completion (stop, length, etc.)
    """

    content: str
    model: str
    usage: dict[str, int]
    finish_reason: str | None = None


def _describe_error(error: Exception) -> str:
    """Map provider errors to actionable messages."""
    text = str(error)
    if isinstance(error, litellm.exceptions.AuthenticationError):
        return f"Authentication failed: {text}"
    if isinstance(error, litellm.exceptions.RateLimitError):
        return f"Rate limit or quota exceeded: {text}"
    if isinstance(error, litellm.exceptions.APIConnectionError):
        return f"Connection failed: {text}"
    if "AccessDeniedException" in text:
        return "Access denied to Amazon Bedrock. Check IAM permissions and model access."
    if "ValidationException" in text:
        return "Invalid request parameters. The model ID may be incorrect or not enabled."
    if "ServiceQuotaExceededException" in text:
        return "Service quota exceeded for Amazon Bedrock."
    if "ThrottlingException" in text:
        return "Request throttled. Try again later."
    return text or error.__class__.__name__


class LLMClient:
    """Async model client using LiteLLM.

    Supports multiple providers through a single interface:
    - Bedrock (AWS)
    - Claude (Anthropic)
    - Gemini (Google)
    - Ollama (local)
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize client with configuration.

        Args:
            config: Provider, credentials and sampling settings
        """
        self.config = config

    async def complete(
        self,
        prompt: str,
        model: str | None = None,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a completion from one model.

        Args:
            prompt: User prompt
            model: Model identifier (defaults to the configured primary)
            system_prompt: Optional system prompt
            max_tokens: Override max_tokens from config

        Returns:
            LLMResponse with generated content

        Raises:
            InvocationFailure: If the completion fails
        """
        model = model or self.config.model
        messages: list[dict[str, str]] = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        completion_kwargs: dict = {
            "model": self.config.get_litellm_model_name(model),
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": max_tokens or self.config.max_tokens,
        }

        if self.config.api_key:
            completion_kwargs["api_key"] = self.config.api_key
        if self.config.api_base:
            completion_kwargs["api_base"] = self.config.api_base
        if self.config.provider == "bedrock":
            completion_kwargs["aws_region_name"] = self.config.region
        if self.config.timeout is not None:
            completion_kwargs["timeout"] = self.config.timeout

        try:
            response = await litellm.acompletion(**completion_kwargs)
        except Exception as e:
            raise InvocationFailure(model, _describe_error(e)) from e

        try:
            choice = response.choices[0]
            content = choice.message.content or ""
        except (AttributeError, IndexError, TypeError) as e:
            raise InvocationFailure(model, f"Malformed response: {e}") from e

        usage = {}
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.prompt_tokens or 0,
                "completion_tokens": response.usage.completion_tokens or 0,
                "total_tokens": response.usage.total_tokens or 0,
            }

        return LLMResponse(
            content=content,
            model=response.model or model,
            usage=usage,
            finish_reason=choice.finish_reason,
        )

    async def invoke(self, model: str, prompt: str) -> str:
        """Invoke one model and return its raw text.

        Raises:
            InvocationFailure: If the call fails or returns no text
        """
        response = await self.complete(
            prompt,
            model=model,
            system_prompt=ANALYSIS_SYSTEM_PROMPT,
        )
        if not response.content.strip():
            raise InvocationFailure(model, "Empty response")

        logger.debug(
            "Model %s returned %d chars (%d tokens)",
            model,
            len(response.content),
            response.usage.get("total_tokens", 0),
        )
        return response.content


def create_client(config: LLMConfig) -> LLMClient:
    """Create an LLM client from configuration.

    Args:
        config: LLM configuration

    Returns:
        Configured LLMClient instance

    Raises:
        ValueError: If live analysis is disabled in config
    """
    if not config.enabled:
        raise ValueError("LLM is disabled in configuration")

    return LLMClient(config)

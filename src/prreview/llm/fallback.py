"""Sequential model fallback.

Models are tried strictly in order, one await at a time. The first success
wins; there is no racing, retrying or backoff between identifiers.
"""

from prreview.llm.client import AllModelsExhausted, InvocationFailure, ModelTransport
from prreview.models.review import FallbackResult, ModelAttempt
from prreview.utils.logging import get_logger, log_model_attempt

logger = get_logger(__name__)


def dedupe_models(models: list[str]) -> list[str]:
    """Drop repeated identifiers, keeping first occurrences in order."""
    seen: list[str] = []
    for model in models:
        if model and model not in seen:
            seen.append(model)
    return seen


async def invoke_with_fallback(
    transport: ModelTransport,
    prompt: str,
    models: list[str],
) -> FallbackResult:
    """Invoke models in order until one returns text.

    Args:
        transport: Model transport (e.g. LLMClient)
        prompt: Prompt text
        models: Ordered identifiers, primary first

    Returns:
        FallbackResult with the winning text, model and every attempt

    Raises:
        ValueError: If no model identifiers are given
        AllModelsExhausted: If every model fails
    """
    chain = dedupe_models(models)
    if not chain:
        raise ValueError("At least one model identifier is required")

    attempts: list[ModelAttempt] = []

    for position, model in enumerate(chain):
        logger.debug("Invoking model %s (%d of %d)", model, position + 1, len(chain))

        try:
            text = await transport.invoke(model, prompt)
        except InvocationFailure as e:
            attempts.append(ModelAttempt(model=model, error=e.reason))
            log_model_attempt(logger, model, position, error=e.reason)
            continue

        attempts.append(ModelAttempt(model=model, text=text))
        log_model_attempt(logger, model, position)
        return FallbackResult(text=text, model=model, attempts=attempts)

    last = attempts[-1]
    raise AllModelsExhausted(last.model, last.error or "unknown error")

"""LLM integration module.

Provides the LiteLLM-backed transport, sequential model fallback and prompt
construction for pull request analysis.
"""

from prreview.llm.client import (
    AllModelsExhausted,
    InvocationFailure,
    LLMClient,
    LLMError,
    LLMResponse,
    ModelTransport,
    create_client,
)
from prreview.llm.fallback import dedupe_models, invoke_with_fallback
from prreview.llm.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    TRUNCATION_MARKER,
    PromptContext,
    build_analysis_prompt,
    select_files,
    truncate_content,
)

__all__ = [
    "ANALYSIS_SYSTEM_PROMPT",
    "AllModelsExhausted",
    "InvocationFailure",
    "LLMClient",
    "LLMError",
    "LLMResponse",
    "ModelTransport",
    "PromptContext",
    "TRUNCATION_MARKER",
    "build_analysis_prompt",
    "create_client",
    "dedupe_models",
    "invoke_with_fallback",
    "select_files",
    "truncate_content",
]

"""Integration tests for LLMClient with mocked LiteLLM responses.

Verifies request construction and error mapping without making API calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from prreview.llm.client import (
    InvocationFailure,
    LLMClient,
    LLMResponse,
    create_client,
)
from prreview.llm.prompts import ANALYSIS_SYSTEM_PROMPT
from prreview.models.llm_config import LLMConfig


def _litellm_response(content: str | None = "Test response content") -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content), finish_reason="stop")]
    response.model = "bedrock/amazon.titan-code-express-v1"
    response.usage = MagicMock(prompt_tokens=10, completion_tokens=20, total_tokens=30)
    return response


class TestCreateClient:
    """Tests for client creation."""

    def test_create_client(self) -> None:
        client = create_client(LLMConfig())

        assert client.config.provider == "bedrock"

    def test_disabled_raises(self) -> None:
        with pytest.raises(ValueError, match="LLM is disabled"):
            create_client(LLMConfig(enabled=False))


class TestComplete:
    """Tests for LLMClient.complete."""

    @pytest.mark.asyncio
    async def test_bedrock_request(self) -> None:
        config = LLMConfig(region="eu-central-1", timeout=30)

        with patch("litellm.acompletion", new=AsyncMock(return_value=_litellm_response())) as mock:
            response = await LLMClient(config).complete("Hello", system_prompt="Be brief")

        assert isinstance(response, LLMResponse)
        assert response.content == "Test response content"
        assert response.usage["total_tokens"] == 30
        assert response.finish_reason == "stop"

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "bedrock/amazon.titan-code-express-v1"
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "Hello"},
        ]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 4096
        assert kwargs["aws_region_name"] == "eu-central-1"
        assert kwargs["timeout"] == 30
        assert "api_key" not in kwargs

    @pytest.mark.asyncio
    async def test_claude_request(self) -> None:
        config = LLMConfig(provider="claude", model="claude-3-haiku", api_key="sk-test")

        with patch("litellm.acompletion", new=AsyncMock(return_value=_litellm_response())) as mock:
            await LLMClient(config).complete("Hello", max_tokens=100)

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "anthropic/claude-3-haiku"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["max_tokens"] == 100
        assert "aws_region_name" not in kwargs

    @pytest.mark.asyncio
    async def test_provider_error_becomes_invocation_failure(self) -> None:
        error = Exception("An error occurred (AccessDeniedException) when calling InvokeModel")

        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(InvocationFailure) as exc_info:
                await LLMClient(LLMConfig()).complete("Hello")

        assert exc_info.value.model == "amazon.titan-code-express-v1"
        assert "Access denied to Amazon Bedrock" in exc_info.value.reason


    @pytest.mark.asyncio
    @pytest.mark.parametrize("choices", [[], None])
    async def test_malformed_response_becomes_invocation_failure(self, choices) -> None:
        response = MagicMock(choices=choices)

        with patch("litellm.acompletion", new=AsyncMock(return_value=response)):
            with pytest.raises(InvocationFailure, match="Malformed response"):
                await LLMClient(LLMConfig()).complete("Hello")


class TestInvoke:
    """Tests for the transport interface used by the fallback chain."""

    @pytest.mark.asyncio
    async def test_invoke_uses_requested_model(self) -> None:
        with patch("litellm.acompletion", new=AsyncMock(return_value=_litellm_response())) as mock:
            text = await LLMClient(LLMConfig()).invoke("anthropic.claude-instant-v1", "prompt")

        assert text == "Test response content"
        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "bedrock/anthropic.claude-instant-v1"
        assert kwargs["messages"][0] == {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   \n"])
    async def test_empty_response_is_failure(self, content) -> None:
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=_litellm_response(content))
        ):
            with pytest.raises(InvocationFailure, match="Empty response"):
                await LLMClient(LLMConfig()).invoke("m", "prompt")

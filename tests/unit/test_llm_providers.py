"""Unit tests for the Gemini LLM provider adapter."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.providers.llm.gemini_provider import GeminiLLMProvider, build_prompt
from src.utils.errors import LLMError


def _settings(**overrides) -> Settings:
    return Settings(**{"_env_file": None, "gemini_api_key": "gemini-test", **overrides})


def _mock_client(text: str | None = "The chip rules tighten exports.") -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=MagicMock(text=text))
    client.aio.aclose = AsyncMock()
    return client


class TestBuildPrompt:
    def test_prompt_layout(self) -> None:
        assert build_prompt("ctx line", "What?") == "Context:\nctx line\n\nUser: What?\nBot:"

    def test_empty_context_still_has_sections(self) -> None:
        prompt = build_prompt("", "What?")
        assert prompt.startswith("Context:\n\n")
        assert prompt.endswith("User: What?\nBot:")


class TestGeminiLLMProvider:
    @pytest.mark.asyncio
    async def test_generate_returns_text(self) -> None:
        client = _mock_client()
        provider = GeminiLLMProvider(_settings(), client=client)

        answer = await provider.generate("Export rules changed.", "What changed?")

        assert answer == "The chip rules tighten exports."
        call = client.aio.models.generate_content.call_args
        assert call.kwargs["model"] == "gemini-2.0-flash-001"
        assert call.kwargs["contents"] == build_prompt("Export rules changed.", "What changed?")

    @pytest.mark.asyncio
    async def test_empty_text_gets_placeholder(self) -> None:
        provider = GeminiLLMProvider(_settings(), client=_mock_client(text=""))

        assert await provider.generate("", "Anything?") == "No response generated"

    @pytest.mark.asyncio
    async def test_api_failure_raises_llm_error(self) -> None:
        client = _mock_client()
        client.aio.models.generate_content.side_effect = RuntimeError("quota exceeded")
        provider = GeminiLLMProvider(_settings(), client=client)

        with pytest.raises(LLMError) as exc_info:
            await provider.generate("ctx", "q")

        assert exc_info.value.provider_name == "gemini"
        assert "quota exceeded" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_aclose_closes_async_client(self) -> None:
        client = _mock_client()
        provider = GeminiLLMProvider(_settings(), client=client)

        await provider.aclose()

        client.aio.aclose.assert_awaited_once()

    def test_availability_follows_key(self) -> None:
        assert GeminiLLMProvider(_settings(), client=_mock_client()).is_available() is True
        assert (
            GeminiLLMProvider(_settings(gemini_api_key=""), client=_mock_client()).is_available()
            is False
        )

    def test_custom_model(self) -> None:
        provider = GeminiLLMProvider(_settings(gemini_model="gemini-2.5-flash"), client=_mock_client())
        assert provider.get_provider_name() == "gemini"

"""Google Gemini LLM provider adapter.

Wraps the ``google-genai`` async client to implement :class:`ILLMProvider`.
Retrieved context and the user's question are folded into a single
plain-text prompt; the model's text reply is the answer.
"""

from __future__ import annotations

from typing import Any

import structlog
from google import genai

from src.config.settings import Settings
from src.interfaces.llm_provider import ILLMProvider
from src.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)

_EMPTY_ANSWER = "No response generated"


def build_prompt(context: str, query: str) -> str:
    """Return the chat prompt for *context* and *query*."""
    return f"Context:\n{context}\n\nUser: {query}\nBot:"


class GeminiLLMProvider(ILLMProvider):
    """LLM provider backed by Google Gemini (``gemini-2.0-flash-001`` by default)."""

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self._api_key = settings.gemini_api_key
        self._model = settings.gemini_model
        self._client = client or genai.Client(api_key=self._api_key)

    async def generate(self, context: str, query: str) -> str:
        prompt = build_prompt(context, query)
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
            )
        except Exception as exc:
            logger.error("gemini_generate_failed", model=self._model, error=str(exc))
            raise LLMError(
                message=f"Gemini API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        text = getattr(response, "text", None)
        if not text:
            logger.warning("gemini_empty_response", model=self._model)
            return _EMPTY_ANSWER

        logger.info(
            "gemini_generate",
            model=self._model,
            context_length=len(context),
            answer_length=len(text),
        )
        return text

    def get_provider_name(self) -> str:
        return "gemini"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def aclose(self) -> None:
        await self._client.aio.aclose()

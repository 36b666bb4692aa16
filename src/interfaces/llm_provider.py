"""Abstract base class for answer-generation (LLM) providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: GeminiLLMProvider (src/providers/llm/)
class ILLMProvider(ABC):
    """Contract for the generation step of the chat flow."""

    @abstractmethod
    async def generate(self, context: str, query: str) -> str:
        """Answer *query* using *context* as grounding.

        Parameters
        ----------
        context:
            Retrieved chunk text, newline-joined.  May be empty; the
            provider must still produce a best-effort answer.
        query:
            The user's question.

        Returns
        -------
        str
            The answer text.

        Raises
        ------
        src.utils.errors.LLMError
            If the API call fails.  This is not recovered below the HTTP
            layer.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"gemini"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has credentials configured."""

    async def aclose(self) -> None:
        """Release any network resources.  Default: nothing to release."""

"""LLM provider adapters.

GeminiLLMProvider implements ILLMProvider (src/interfaces/llm_provider.py).
main.py constructs it from GEMINI_API_KEY and hands it to the retrieval
service; the rest of the app never imports google-genai directly.
"""

from src.providers.llm.gemini_provider import GeminiLLMProvider

__all__ = ["GeminiLLMProvider"]

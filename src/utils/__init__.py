"""Utility modules for newsrag.

- **errors** -- Exception hierarchy rooted at NewsRAGError.
- **result** -- ``Result[T]`` / ``FailureReason`` for operations that
  report failure instead of raising (fetch, extract, embed).
- **concurrency** -- bounded worker pool used by ingestion.
- **logging** -- structlog setup: coloured console output in development,
  structured JSON in production.
"""

from src.utils.errors import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    FetchError,
    LLMError,
    NewsRAGError,
    RAGError,
    SessionStoreError,
)
from src.utils.result import FailureReason, Result

__all__ = [
    "ConfigurationError",
    "EmbeddingError",
    "ExtractionError",
    "FailureReason",
    "FetchError",
    "LLMError",
    "NewsRAGError",
    "RAGError",
    "Result",
    "SessionStoreError",
]

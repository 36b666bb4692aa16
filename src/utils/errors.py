"""Custom exception hierarchy for newsrag.

All application exceptions inherit from :class:`NewsRAGError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "jina", "gemini", "chromadb") caused the failure.

The hierarchy is organized by pipeline stage:

    NewsRAGError  (base -- catch-all for any newsrag error)
    +-- FetchError            (article feed / page download)
    +-- ExtractionError       (HTML -> text reduction)
    +-- EmbeddingError        (embedding API call or response shape)
    +-- RAGError              (vector-store failure)
    +-- LLMError              (generation API call failure)
    +-- SessionStoreError     (chat history persistence)
    +-- ConfigurationError    (startup / missing credentials)

Fetch, extraction and embedding failures are normally reported through
:class:`~src.utils.result.Result` rather than raised; the exception types
exist so adapters can describe the failure and so callers that prefer
exceptions can call :meth:`Result.unwrap`.
"""


class NewsRAGError(Exception):
    """Base exception for all newsrag errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  ``__str__`` prefixes the provider name in brackets for
    structured log output, e.g. ``[gemini] Gemini API error: quota``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Ingestion-side errors (normally carried inside a failed Result)
# ---------------------------------------------------------------------------

class FetchError(NewsRAGError):
    """Raised when an article feed or page download fails."""

    def __init__(
        self,
        message: str = "Fetch failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ExtractionError(NewsRAGError):
    """Raised when a fetched page yields no usable article text."""

    def __init__(
        self,
        message: str = "Content extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmbeddingError(NewsRAGError):
    """Raised when the embedding API fails or returns an unexpected shape."""

    def __init__(
        self,
        message: str = "Embedding request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Storage / generation errors (propagated to the request boundary)
# ---------------------------------------------------------------------------

class RAGError(NewsRAGError):
    """Raised when a vector-store operation fails."""

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(NewsRAGError):
    """Raised when the generation API call fails.

    There is no meaningful fallback answer, so this is never swallowed
    below the HTTP layer.
    """

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SessionStoreError(NewsRAGError):
    """Raised when chat history cannot be read or written."""

    def __init__(
        self,
        message: str = "Session store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(NewsRAGError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)

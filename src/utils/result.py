"""Explicit success-or-failure result for operations that must not raise.

Fetching, extracting, and embedding are allowed to fail per document
without aborting an ingestion run.  Instead of returning an empty list
or ``None`` (which a caller can mistake for "nothing to do"), those
adapters return a :class:`Result` that either holds a value or names a
:class:`FailureReason` together with the typed error that would have
been raised.  Callers branch on :attr:`Result.ok` and decide what
degraded behaviour is appropriate; callers that would rather raise use
:meth:`Result.unwrap`.

Usage::

    result = await embedder.embed(texts, EmbeddingTask.PASSAGE)
    if not result.ok:
        logger.warning("embedding_skipped", reason=result.reason, detail=result.detail)
        return
    vectors = result.value
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from src.utils.errors import NewsRAGError

T = TypeVar("T")


class FailureReason(str, Enum):
    """Why an operation produced no value."""

    TRANSPORT = "transport"  # network error, timeout, or HTTP status >= 400
    MALFORMED = "malformed"  # upstream answered with an unexpected shape
    NOT_HTML = "not_html"
    EMPTY = "empty"  # request was fine but nothing usable came back
    UPSTREAM_STATUS = "upstream_status"  # API-level error status in a 200 body


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either ``value`` (when :attr:`ok`) or ``reason`` + ``error``.

    Build instances with :meth:`success` and :meth:`failure` rather than
    the constructor.
    """

    value: T | None = None
    reason: FailureReason | None = None
    error: NewsRAGError | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, reason: FailureReason, error: NewsRAGError | str = "") -> Result[T]:
        if isinstance(error, str):
            error = NewsRAGError(message=error or reason.value)
        return cls(reason=reason, error=error)

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def detail(self) -> str:
        return self.error.message if self.error is not None else ""

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.reason is not None:
            raise self.error or NewsRAGError(message=self.reason.value)
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        if self.reason is not None:
            return default
        return self.value  # type: ignore[return-value]

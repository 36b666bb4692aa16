"""Abstract base class for article-extraction service providers.

Defines the contract for reducing a web page to clean article text.
The adapter pattern keeps the ingestion layer independent of the
underlying fetch and parse engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from src.utils.result import Result


@dataclass(frozen=True)
class ArticleContent:
    """Extracted content from a web article.

    Attributes
    ----------
    url:
        The source URL the content was extracted from.
    text:
        The qualifying text blocks joined with single spaces.
    blocks:
        The qualifying text blocks in document order (headline,
        sub-headings, paragraphs).
    title:
        The first ``<h1>`` text, or ``""`` when the page has none.
    """

    url: str
    text: str
    blocks: tuple[str, ...] = field(default_factory=tuple)
    title: str = ""


class IArticleProvider(ABC):
    """Contract for services that extract readable content from web URLs."""

    @abstractmethod
    async def extract_content(self, url: str) -> Result[ArticleContent]:
        """Fetch *url* and extract its readable content.

        Parameters
        ----------
        url:
            The web page URL to extract content from.

        Returns
        -------
        Result[ArticleContent]
            The extracted content, or a failure whose reason is
            ``TRANSPORT`` (network/HTTP error), ``NOT_HTML`` (non-HTML
            response), or ``EMPTY`` (no qualifying text).  Implementations
            must not raise for these cases so one bad page never aborts an
            ingestion run.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider can currently be used."""

"""Abstract base class for article-feed providers.

An article feed answers "which articles exist for this topic?" with a
bounded list of :class:`~src.models.rag.Document` records.  It does not
download the articles themselves; that is the job of an
:class:`~src.interfaces.article_provider.IArticleProvider`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.rag import Document
from src.utils.result import Result


# Concrete implementation: NewsAPIFeedProvider (src/providers/feed/)
class IArticleFeedProvider(ABC):
    """Contract for topic-based article listing services."""

    @abstractmethod
    async def fetch_articles(self, query: str, page_size: int = 50) -> Result[list[Document]]:
        """Return candidate documents for *query*.

        Parameters
        ----------
        query:
            Topic search string.
        page_size:
            Upper bound on the number of documents returned.

        Returns
        -------
        Result[list[Document]]
            A successful result holding zero or more documents, or a
            failure naming why the feed could not be read.  Never raises
            for transport or upstream errors.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"newsapi"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has the credentials it needs."""

"""Public interface definitions for all external service providers.

Every external API or service the pipeline talks to is accessed through
the abstract base classes defined in this package.  Concrete adapters
implement these interfaces and are constructed in ``src/main.py``
(``build_components``), then passed into the services that need them.
Tests substitute fakes for any of them.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementation (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    IArticleFeedProvider       →  NewsAPIFeedProvider
    IArticleProvider           →  WebScraperProvider
    IEmbeddingProvider         →  JinaEmbeddingProvider
    IVectorStoreProvider       →  ChromaDBProvider
    ILLMProvider               →  GeminiLLMProvider
    ISessionStore              →  SQLiteSessionStore
"""

from src.interfaces.article_feed_provider import IArticleFeedProvider
from src.interfaces.article_provider import ArticleContent, IArticleProvider
from src.interfaces.embedding_provider import EmbeddingTask, IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.session_store import ISessionStore
from src.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "ArticleContent",
    "EmbeddingTask",
    "IArticleFeedProvider",
    "IArticleProvider",
    "IEmbeddingProvider",
    "ILLMProvider",
    "ISessionStore",
    "IVectorStoreProvider",
]

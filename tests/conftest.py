"""Shared pytest fixtures for the newsrag test suite."""

from __future__ import annotations

import hashlib
import math
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.interfaces.article_feed_provider import IArticleFeedProvider
from src.interfaces.article_provider import ArticleContent, IArticleProvider
from src.interfaces.embedding_provider import EmbeddingTask, IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import Document, IndexedPoint, SearchHit
from src.utils.errors import EmbeddingError
from src.utils.result import FailureReason, Result

# ---------------------------------------------------------------------------
# Deterministic embeddings + in-memory vector store
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 1024


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic unit vector by hashing *text*.

    SHA-256 digests are chained until there are *dim* bytes; each byte is
    centred on zero.  Same text always produces the same vector.
    """
    raw = hashlib.sha256(text.encode("utf-8")).digest()
    while len(raw) < dim:
        raw += hashlib.sha256(raw).digest()
    values = [(b - 127.5) / 127.5 for b in raw[:dim]]
    magnitude = max(math.sqrt(sum(v * v for v in values)), 1e-10)
    return [v / magnitude for v in values]


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class MockEmbeddingProvider(IEmbeddingProvider):
    """In-memory deterministic embedding provider for tests.

    Set ``fail_with`` to make every call return that failure reason.
    """

    def __init__(self) -> None:
        self.fail_with: FailureReason | None = None
        self.calls: list[tuple[list[str], EmbeddingTask]] = []

    async def embed(self, texts: list[str], task: EmbeddingTask) -> Result[list[list[float]]]:
        self.calls.append((list(texts), task))
        if self.fail_with is not None:
            return Result.failure(
                self.fail_with, EmbeddingError("mock failure", provider_name="mock-embedding")
            )
        return Result.success([_hash_to_vector(t) for t in texts])

    def get_dimension(self) -> int:
        return _EMBEDDING_DIM

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class MockVectorStore(IVectorStoreProvider):
    """In-memory cosine store keyed by point id.

    ``upsert_calls`` records every batch passed to :meth:`upsert`.
    """

    def __init__(self) -> None:
        self.points: dict[str, IndexedPoint] = {}
        self.upsert_calls: list[list[IndexedPoint]] = []
        self.ensured_dimension: int | None = None

    async def ensure_collection(self, dimension: int) -> None:
        self.ensured_dimension = dimension

    async def upsert(self, points: list[IndexedPoint]) -> int:
        self.upsert_calls.append(list(points))
        for point in points:
            self.points[point.id] = point
        return len(points)

    async def search(self, vector: list[float], k: int = 5) -> list[SearchHit]:
        scored = sorted(
            self.points.values(),
            key=lambda p: _cosine(vector, p.vector),
            reverse=True,
        )
        return [
            SearchHit(
                id=p.id,
                payload=p.payload,
                similarity_score=max(0.0, min(1.0, _cosine(vector, p.vector))),
            )
            for p in scored[:k]
        ]

    async def count(self) -> int:
        return len(self.points)

    def get_provider_name(self) -> str:
        return "mock-vector-store"

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Feed / scraper / LLM fakes
# ---------------------------------------------------------------------------


class FakeFeed(IArticleFeedProvider):
    """Returns a fixed document list and records the queries it was asked."""

    def __init__(self, documents: list[Document] | None = None) -> None:
        self.documents = documents or []
        self.queries: list[str] = []
        self.failure: FailureReason | None = None

    async def fetch_articles(self, query: str, page_size: int = 50) -> Result[list[Document]]:
        self.queries.append(query)
        if self.failure is not None:
            return Result.failure(self.failure, "feed down")
        return Result.success(self.documents[:page_size])

    def get_provider_name(self) -> str:
        return "fake-feed"

    def is_available(self) -> bool:
        return True


class FakeScraper(IArticleProvider):
    """Serves article text from a dict; URLs in ``raising`` blow up."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = pages or {}
        self.raising: set[str] = set()

    async def extract_content(self, url: str) -> Result[ArticleContent]:
        if url in self.raising:
            raise RuntimeError(f"boom: {url}")
        text = self.pages.get(url)
        if text is None:
            return Result.failure(FailureReason.TRANSPORT, f"HTTP 404 for {url}")
        return Result.success(ArticleContent(url=url, text=text, blocks=(text,)))

    def get_provider_name(self) -> str:
        return "fake-scraper"

    def is_available(self) -> bool:
        return True


@pytest.fixture
def mock_embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def mock_vector_store() -> MockVectorStore:
    return MockVectorStore()


@pytest.fixture
def mock_llm_provider() -> ILLMProvider:
    """Return a MagicMock(spec=ILLMProvider) whose generate echoes a fixed answer."""
    mock = MagicMock(spec=ILLMProvider)
    mock.generate = AsyncMock(return_value="Mock answer.")
    mock.get_provider_name.return_value = "mock-llm"
    mock.is_available.return_value = True
    mock.aclose = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def sample_article_text() -> str:
    """A multi-paragraph news article long enough to produce several chunks."""
    paragraphs = [
        "Regulators in Brussels approved a new framework for artificial intelligence "
        "on Tuesday, ending two years of negotiation between member states.",
        "The rules classify systems by risk. High-risk uses such as hiring and credit "
        "scoring face audits, while chatbots must disclose that users are talking to "
        "a machine.",
        "Industry groups said the compliance timeline was too short. Several large "
        "companies warned that some products might not launch in Europe at all.",
        "Consumer advocates welcomed the decision but argued that enforcement budgets "
        "were far too small to police thousands of deployed systems.",
        "Officials said the first obligations take effect next spring. Fines can reach "
        "seven percent of global turnover for the most serious violations.",
    ]
    return " ".join(paragraphs * 4)


@pytest.fixture
def app_settings(tmp_path: Path) -> Settings:
    """Settings with dummy credentials and storage under *tmp_path*."""
    return Settings(
        _env_file=None,
        gemini_api_key="test-gemini-key",
        news_api_key="test-news-key",
        jina_api_key="test-jina-key",
        chromadb_persist_dir=str(tmp_path / "chromadb"),
        session_db_path=str(tmp_path / "sessions.db"),
        app_env="test",
    )


def make_http_response(
    *,
    status_code: int = 200,
    json_data: Any = None,
    text: str = "",
    headers: dict[str, str] | None = None,
) -> MagicMock:
    """Build a MagicMock shaped like an ``httpx.Response``."""
    import httpx

    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.headers = headers or {}
    if json_data is None:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        request = httpx.Request("GET", "https://example.test")
        real = httpx.Response(status_code, request=request)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}", request=request, response=real
        )
    else:
        response.raise_for_status.return_value = None
    return response


"""Integration tests for the ingestion pipeline.

Runs :class:`IngestionService` end to end with the real chunker and
identity code, an in-memory vector store, and deterministic fakes for
the feed, scraper and embedder.
"""

from __future__ import annotations

import pytest

from src.models.rag import Document
from src.services.ingestion.chunker import TextChunker
from src.services.ingestion.identity import point_id
from src.services.ingestion.ingestion_service import IngestionService
from src.utils.errors import RAGError
from src.utils.result import FailureReason
from tests.conftest import FakeFeed, FakeScraper, MockEmbeddingProvider, MockVectorStore

_URLS = [f"https://news.example.com/story-{i}" for i in range(1, 4)]


def _build(
    feed: FakeFeed,
    scraper: FakeScraper,
    embedder: MockEmbeddingProvider,
    store: MockVectorStore,
    concurrency: int = 1,
) -> IngestionService:
    return IngestionService(
        feed=feed,
        article_scraper=scraper,
        chunker=TextChunker(chunk_size=300, overlap=60),
        embedding_provider=embedder,
        vector_store=store,
        default_query="technology",
        page_size=50,
        concurrency=concurrency,
    )


@pytest.fixture
def feed() -> FakeFeed:
    return FakeFeed([Document(url=url, title=f"Story {i}") for i, url in enumerate(_URLS, 1)])


@pytest.fixture
def scraper(sample_article_text: str) -> FakeScraper:
    return FakeScraper({url: f"{url} reports. {sample_article_text}" for url in _URLS})


class TestIngestionPipeline:
    @pytest.mark.asyncio
    async def test_all_documents_ingested(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        result = await service.ingest_articles("ai regulation")

        assert result.documents_seen == 3
        assert result.documents_processed == 3
        assert result.documents_skipped == 0
        assert result.points_upserted == len(mock_vector_store.points)
        assert mock_vector_store.ensured_dimension == 1024
        assert len(mock_vector_store.upsert_calls) == 1

    @pytest.mark.asyncio
    async def test_partial_failure_skips_only_bad_document(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        scraper.raising.add(_URLS[1])
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        result = await service.ingest_articles("ai regulation")

        assert result.documents_processed == 2
        assert result.documents_skipped == 1
        assert len(mock_vector_store.upsert_calls) == 1
        urls = {p.payload.source_url for p in mock_vector_store.upsert_calls[0]}
        assert urls == {_URLS[0], _URLS[2]}

    @pytest.mark.asyncio
    async def test_points_keep_feed_and_chunk_order(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store, concurrency=3)

        await service.ingest_articles("ai")

        batch = mock_vector_store.upsert_calls[0]
        keys = [(_URLS.index(p.payload.source_url), p.payload.chunk_index) for p in batch]
        assert keys == sorted(keys)
        assert batch[0].id == point_id(_URLS[0], 0)

    @pytest.mark.asyncio
    async def test_reingestion_converges(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        first = await service.ingest_articles("ai")
        count_after_first = await mock_vector_store.count()
        second = await service.ingest_articles("ai")

        assert await mock_vector_store.count() == count_after_first
        assert first.points_upserted == second.points_upserted
        assert {p.id for p in mock_vector_store.upsert_calls[0]} == {
            p.id for p in mock_vector_store.upsert_calls[1]
        }

    @pytest.mark.asyncio
    async def test_documents_without_url_are_skipped(
        self, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        feed = FakeFeed([Document(url="", title="No link"), Document(url=_URLS[0], title="ok")])
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        result = await service.ingest_articles("ai")

        assert result.documents_processed == 1
        assert result.documents_skipped == 1

    @pytest.mark.asyncio
    async def test_extraction_failure_is_skipped(
        self, feed, mock_embedding_provider, mock_vector_store, sample_article_text
    ) -> None:
        scraper = FakeScraper({_URLS[0]: sample_article_text})
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        result = await service.ingest_articles("ai")

        assert result.documents_processed == 1
        assert result.documents_skipped == 2

    @pytest.mark.asyncio
    async def test_embedding_failure_writes_nothing(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        mock_embedding_provider.fail_with = FailureReason.TRANSPORT
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        result = await service.ingest_articles("ai")

        assert result.documents_processed == 0
        assert result.documents_skipped == 3
        assert mock_vector_store.upsert_calls == []

    @pytest.mark.asyncio
    async def test_passages_use_passage_task(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        await service.ingest_articles("ai")

        assert {task.value for _, task in mock_embedding_provider.calls} == {"retrieval.passage"}

    @pytest.mark.asyncio
    async def test_feed_failure_gives_empty_run(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        feed.failure = FailureReason.UPSTREAM_STATUS
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        result = await service.ingest_articles("ai")

        assert result.documents_seen == 0
        assert result.documents_processed == 0
        assert mock_vector_store.upsert_calls == []

    @pytest.mark.asyncio
    async def test_query_reaches_feed(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        await service.ingest_articles("  semiconductor exports ")
        await service.ingest_articles(None)

        assert feed.queries == ["semiconductor exports", "technology"]

    @pytest.mark.asyncio
    async def test_upsert_failure_propagates(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        async def _broken_upsert(points):
            raise RAGError("disk full", provider_name="mock-vector-store")

        mock_vector_store.upsert = _broken_upsert
        service = _build(feed, scraper, mock_embedding_provider, mock_vector_store)

        with pytest.raises(RAGError):
            await service.ingest_articles("ai")

    def test_rejects_bad_concurrency(
        self, feed, scraper, mock_embedding_provider, mock_vector_store
    ) -> None:
        with pytest.raises(ValueError):
            _build(feed, scraper, mock_embedding_provider, mock_vector_store, concurrency=0)

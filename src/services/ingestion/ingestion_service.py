"""Orchestrator for the news ingestion pipeline.

Pipeline stages: **list -> extract -> chunk -> embed -> identify -> store**.

The :class:`IngestionService` coordinates five collaborators (article
feed, content extractor, chunker, embedding provider, vector store)
without any of them knowing about each other.  One run moves through:

    INIT -> COLLECTION_READY -> FETCH_LIST
         -> PER_DOCUMENT (extract, chunk, embed, identify, accumulate) x N
         -> BULK_UPSERT -> DONE

A bad document (no URL, failed fetch, nothing extracted, failed
embedding) is logged and skipped; it never aborts the run.  Points are
accumulated in memory and written with a single upsert at the end, so a
store failure there raises :class:`~src.utils.errors.RAGError` and the
run writes nothing.

Documents are processed one at a time unless ``concurrency`` > 1, in
which case a bounded pool of that size is used.  Either way the
accumulated points keep feed order.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from src.interfaces.embedding_provider import EmbeddingTask
from src.models.rag import Document, IndexedPoint, IngestionResult
from src.services.ingestion.chunker import TextChunker
from src.services.ingestion.identity import build_chunks, build_points
from src.utils.concurrency import throttled_gather

if TYPE_CHECKING:
    from src.interfaces.article_feed_provider import IArticleFeedProvider
    from src.interfaces.article_provider import IArticleProvider
    from src.interfaces.embedding_provider import IEmbeddingProvider
    from src.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)


class IngestionState(str, Enum):
    INIT = "init"
    COLLECTION_READY = "collection_ready"
    FETCH_LIST = "fetch_list"
    PER_DOCUMENT = "per_document"
    BULK_UPSERT = "bulk_upsert"
    DONE = "done"


@dataclass(frozen=True)
class _DocumentOutcome:
    """Per-document result: points on success, a skip reason otherwise."""

    url: str
    points: tuple[IndexedPoint, ...] = ()
    skipped_reason: str | None = None


class IngestionService:
    """Orchestrates one ingestion run from topic query to stored points.

    Parameters
    ----------
    feed:
        Lists candidate articles for a topic query.
    article_scraper:
        Reduces each article URL to clean text.
    chunker:
        Splits article text into bounded windows.
    embedding_provider:
        Embeds each article's chunks in one batch.
    vector_store:
        Receives the accumulated points.
    default_query:
        Topic used when a run is started without one.
    page_size:
        Maximum number of articles requested from the feed.
    concurrency:
        Maximum documents processed at once (1 = strictly sequential).
    """

    def __init__(
        self,
        feed: IArticleFeedProvider,
        article_scraper: IArticleProvider,
        chunker: TextChunker,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        default_query: str = "technology",
        page_size: int = 50,
        concurrency: int = 1,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self._feed = feed
        self._article_scraper = article_scraper
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._default_query = default_query
        self._page_size = page_size
        self._concurrency = concurrency

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest_articles(
        self,
        query: str | None = None,
        concurrency: int | None = None,
    ) -> IngestionResult:
        """Run the full pipeline for *query* (or the default topic).

        Returns
        -------
        IngestionResult
            ``documents_processed`` counts documents whose points were
            stored, not chunks.

        Raises
        ------
        src.utils.errors.RAGError
            If the collection cannot be prepared or the final upsert fails.
        """
        start = time.monotonic()
        topic = (query or "").strip() or self._default_query
        limit = concurrency or self._concurrency
        if limit < 1:
            raise ValueError(f"concurrency must be >= 1, got {limit}")
        log = logger.bind(query=topic)
        log.info("ingestion_state", state=IngestionState.INIT.value, concurrency=limit)

        await self._vector_store.ensure_collection(self._embedding_provider.get_dimension())
        log.info("ingestion_state", state=IngestionState.COLLECTION_READY.value)

        documents = await self._fetch_documents(topic)
        log.info("ingestion_state", state=IngestionState.FETCH_LIST.value, documents=len(documents))

        log.info("ingestion_state", state=IngestionState.PER_DOCUMENT.value)
        raw = await throttled_gather(
            [lambda doc=doc: self._process_document(doc) for doc in documents],
            limit=limit,
            return_exceptions=True,
        )

        accumulated: list[IndexedPoint] = []
        processed = 0
        skipped = 0
        for doc, outcome in zip(documents, raw):
            if isinstance(outcome, BaseException):
                # Unexpected failure inside one document still only skips it.
                log.error(
                    "document_failed",
                    url=doc.url,
                    error_type=type(outcome).__name__,
                    error=str(outcome),
                )
                skipped += 1
                continue
            if outcome.skipped_reason is not None:
                skipped += 1
                continue
            accumulated.extend(outcome.points)
            processed += 1

        log.info("ingestion_state", state=IngestionState.BULK_UPSERT.value, points=len(accumulated))
        upserted = await self._vector_store.upsert(accumulated) if accumulated else 0

        result = IngestionResult(
            query=topic,
            documents_seen=len(documents),
            documents_processed=processed,
            documents_skipped=skipped,
            points_upserted=upserted,
            ingestion_time=round(time.monotonic() - start, 3),
        )
        log.info(
            "ingestion_state",
            state=IngestionState.DONE.value,
            documents_processed=result.documents_processed,
            documents_skipped=result.documents_skipped,
            points_upserted=result.points_upserted,
            elapsed_s=result.ingestion_time,
        )
        return result

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _fetch_documents(self, topic: str) -> list[Document]:
        result = await self._feed.fetch_articles(topic, self._page_size)
        if not result.ok:
            logger.warning(
                "article_feed_unavailable",
                query=topic,
                reason=result.reason.value if result.reason else None,
                detail=result.detail,
            )
            return []
        return list(result.value or [])

    async def _process_document(self, document: Document) -> _DocumentOutcome:
        """Extract, chunk, embed and identify one document."""
        url = document.url.strip()
        if not url:
            logger.info("document_skipped", reason="missing_url", title=document.title)
            return _DocumentOutcome(url="", skipped_reason="missing_url")

        extracted = await self._article_scraper.extract_content(url)
        if not extracted.ok:
            logger.warning(
                "document_skipped",
                url=url,
                reason=f"extract_{extracted.reason.value}" if extracted.reason else "extract",
                detail=extracted.detail,
            )
            return _DocumentOutcome(url=url, skipped_reason="extract")

        texts = self._chunker.chunk(extracted.value.text)  # type: ignore[union-attr]
        if not texts:
            logger.warning("document_skipped", url=url, reason="no_chunks")
            return _DocumentOutcome(url=url, skipped_reason="no_chunks")

        embedded = await self._embedding_provider.embed(texts, EmbeddingTask.PASSAGE)
        if not embedded.ok:
            logger.warning(
                "document_skipped",
                url=url,
                reason=f"embed_{embedded.reason.value}" if embedded.reason else "embed",
                detail=embedded.detail,
            )
            return _DocumentOutcome(url=url, skipped_reason="embed")

        chunks = build_chunks(url, texts)
        points = build_points(document, chunks, embedded.value)  # type: ignore[arg-type]
        logger.info("document_processed", url=url, chunks=len(points))
        return _DocumentOutcome(url=url, points=tuple(points))

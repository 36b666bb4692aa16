"""ChromaDB vector store provider adapter.

Wraps a ChromaDB client to implement :class:`IVectorStoreProvider`.
The collection uses cosine distance, and points are written with
``upsert`` keyed by their deterministic id, so re-ingesting an article
overwrites its earlier chunks instead of duplicating them.

ChromaDB's client is synchronous; every call is pushed to a worker
thread with ``asyncio.to_thread`` so the event loop is not blocked.
"""

from __future__ import annotations

import asyncio
import os
from typing import Any

# Must be set before chromadb is imported to keep telemetry off.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog
from pydantic import ValidationError

from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import ChunkPayload, IndexedPoint, SearchHit
from src.utils.errors import RAGError

logger = structlog.get_logger(logger_name=__name__)


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Embedding function that refuses to run.

    All vectors come from the Jina provider; without this ChromaDB would
    load its default ONNX model on collection creation.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError(
            "newsrag uses pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        return "noop_precomputed"


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by ChromaDB.

    Parameters
    ----------
    persist_directory:
        On-disk location for a ``PersistentClient``.  Ignored when
        *client* is given.
    collection_name:
        Fixed collection for this corpus.
    client:
        Optional pre-built ChromaDB client (e.g. ``chromadb.EphemeralClient()``
        in tests).
    """

    def __init__(
        self,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "news_articles",
        client: Any | None = None,
        upsert_batch_size: int = 500,
    ) -> None:
        self._persist_directory = persist_directory
        self._collection_name = collection_name
        self._upsert_batch_size = upsert_batch_size
        self._client = client or chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        self._collection: Any | None = None

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def ensure_collection(self, dimension: int) -> None:
        """Open or create the cosine collection and check its dimension."""
        try:
            self._collection = await asyncio.to_thread(self._get_or_create)
            stored_dim = await asyncio.to_thread(self._stored_dimension)
            existing_points = await asyncio.to_thread(self._collection.count)
        except Exception as exc:
            raise RAGError(
                message=f"ChromaDB ensure_collection failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if stored_dim is not None and stored_dim != dimension:
            logger.error(
                "embedding_dimension_mismatch",
                collection=self._collection_name,
                stored_dim=stored_dim,
                expected_dim=dimension,
            )
            raise RAGError(
                message=(
                    f"Collection '{self._collection_name}' holds {stored_dim}-dim vectors "
                    f"but the embedding provider produces {dimension}-dim vectors."
                ),
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "chromadb_collection_ready",
            collection=self._collection_name,
            dimension=dimension,
            existing_points=existing_points,
        )

    async def upsert(self, points: list[IndexedPoint]) -> int:
        """Upsert *points* in batches of ``upsert_batch_size``."""
        if not points:
            return 0
        collection = self._require_collection()

        try:
            for start in range(0, len(points), self._upsert_batch_size):
                batch = points[start : start + self._upsert_batch_size]
                await asyncio.to_thread(
                    collection.upsert,
                    ids=[p.id for p in batch],
                    embeddings=[p.vector for p in batch],
                    documents=[p.payload.chunk_text for p in batch],
                    metadatas=[p.payload.to_metadata() for p in batch],
                )
        except Exception as exc:
            raise RAGError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info(
            "chromadb_upsert",
            count=len(points),
            batches=(len(points) + self._upsert_batch_size - 1) // self._upsert_batch_size,
        )
        return len(points)

    async def search(self, vector: list[float], k: int = 5) -> list[SearchHit]:
        """Return at most *k* nearest points, best first."""
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        collection = self._require_collection()

        try:
            total = await asyncio.to_thread(collection.count)
            if total == 0:
                return []
            results = await asyncio.to_thread(
                collection.query,
                query_embeddings=[vector],
                n_results=min(k, total),
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            raise RAGError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        ids = results["ids"][0] if results.get("ids") else []
        documents = results["documents"][0] if results.get("documents") else [""] * len(ids)
        metadatas = results["metadatas"][0] if results.get("metadatas") else [{}] * len(ids)
        distances = results["distances"][0] if results.get("distances") else [1.0] * len(ids)

        hits: list[SearchHit] = []
        for point_id, doc_text, meta, distance in zip(ids, documents, metadatas, distances, strict=True):
            payload = self._metadata_to_payload(meta or {}, doc_text or "")
            if payload is None:
                logger.warning("chromadb_payload_unreadable", point_id=point_id)
                continue
            hits.append(
                SearchHit(
                    id=point_id,
                    payload=payload,
                    similarity_score=max(0.0, min(1.0, 1.0 - distance)),
                )
            )

        logger.info(
            "chromadb_query",
            k=k,
            results_count=len(hits),
            top_score=hits[0].similarity_score if hits else 0.0,
        )
        return hits[:k]

    async def count(self) -> int:
        collection = self._require_collection()
        try:
            return await asyncio.to_thread(collection.count)
        except Exception as exc:
            raise RAGError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        """Return ``True`` if the ChromaDB collection is accessible."""
        if self._collection is None:
            return False
        try:
            self._collection.count()
            return True
        except Exception:
            return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_or_create(self) -> Any:
        # Collections created by older ChromaDB versions reject a different
        # embedding function; fall back to the persisted one.
        try:
            return self._client.get_or_create_collection(
                name=self._collection_name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            return self._client.get_or_create_collection(
                name=self._collection_name,
                metadata={"hnsw:space": "cosine"},
            )

    def _stored_dimension(self) -> int | None:
        """Dimension of one stored vector, or ``None`` for an empty collection."""
        if self._collection is None or self._collection.count() == 0:
            return None
        sample = self._collection.peek(limit=1)
        embeddings = sample.get("embeddings") if sample else None
        if embeddings is None or len(embeddings) == 0:
            return None
        return len(embeddings[0])

    def _require_collection(self) -> Any:
        if self._collection is None:
            raise RAGError(
                message="Collection not ready; call ensure_collection() first",
                provider_name=self.get_provider_name(),
            )
        return self._collection

    @staticmethod
    def _metadata_to_payload(meta: dict[str, Any], text: str) -> ChunkPayload | None:
        data = dict(meta)
        data.setdefault("chunkText", text)
        try:
            return ChunkPayload.model_validate(data)
        except ValidationError:
            return None

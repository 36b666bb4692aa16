"""RAG pipeline data models for the news corpus.

Defines Pydantic v2 models for the objects that flow through ingestion
and retrieval.  All value models use frozen config so a chunk or point
cannot be mutated after it has been built.

Flow overview:

    1. FEED: :class:`Document` records (url + title) come from the
       article feed for a topic query.
    2. EXTRACT + CHUNK: each page is reduced to text and split into
       :class:`Chunk` objects whose ``index`` order is significant.
    3. EMBED + IDENTIFY: every chunk gets a 1024-dim vector and a
       deterministic id, producing an :class:`IndexedPoint`.
    4. STORE: points are upserted to ChromaDB; same id overwrites.
    5. RETRIEVE: a query vector returns :class:`SearchHit` objects whose
       payload text becomes the context string in
       :class:`RetrievalContext`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A candidate article from the external feed.

    ``url`` may be empty when the feed returns a record without a link;
    the ingestion pipeline skips such documents.
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    title: str = ""


class Chunk(BaseModel):
    """A bounded segment of one document's extracted text."""

    model_config = ConfigDict(frozen=True)

    source_url: str
    index: int = Field(ge=0, description="Zero-based position within the document.")
    text: str


# ---------------------------------------------------------------------------
# ChunkPayload: what is stored next to each vector.
# ---------------------------------------------------------------------------
class ChunkPayload(BaseModel):
    """Metadata stored alongside each vector.

    Field aliases are the stored (camelCase) keys.  ``uid`` is a display label
    (``"{url}-{index + 1}"``) and is never used as a storage key.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_url: str = Field(alias="sourceUrl")
    title: str = ""
    chunk_index: int = Field(alias="chunkIndex", ge=0)
    chunk_text: str = Field(alias="chunkText")
    uid: str = ""

    def to_metadata(self) -> dict[str, Any]:
        """Return the payload as a flat dict keyed by the stored names."""
        return self.model_dump(by_alias=True)


class IndexedPoint(BaseModel):
    """A chunk ready for upsert: deterministic id, vector, and payload."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Name-based UUID derived from (source_url, chunk_index).")
    vector: list[float]
    payload: ChunkPayload


class SearchHit(BaseModel):
    """One nearest-neighbour result from the vector store."""

    model_config = ConfigDict(frozen=True)

    id: str
    payload: ChunkPayload
    similarity_score: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Cosine similarity clamped to [0, 1] (1 - cosine distance).",
    )


# ---------------------------------------------------------------------------
# Pipeline outcomes
# ---------------------------------------------------------------------------
class IngestionResult(BaseModel):
    """Outcome of one ingestion run.

    ``documents_processed`` counts documents whose points were accumulated,
    not chunks.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    documents_seen: int = Field(default=0, ge=0)
    documents_processed: int = Field(default=0, ge=0)
    documents_skipped: int = Field(default=0, ge=0)
    points_upserted: int = Field(default=0, ge=0)
    ingestion_time: float = Field(default=0.0, ge=0.0, description="Wall-clock seconds.")


class RetrievalContext(BaseModel):
    """Context window assembled for one query.

    ``context`` is the newline-joined chunk text of ``hits`` in the
    index's similarity order.  When retrieval degraded (embedding failure,
    search failure, or no hits) ``context`` is empty and
    ``degraded_reason`` says why.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    context: str = ""
    hits: list[SearchHit] = Field(default_factory=list)
    degraded_reason: str | None = None


class ChatAnswer(BaseModel):
    """A generated answer plus the context that informed it."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    query: str
    answer: str
    context_chunks: int = Field(default=0, ge=0)

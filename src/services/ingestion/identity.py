"""Deterministic point identity for idempotent re-ingestion.

A point's id is a name-based (version 5) UUID of ``"{url}-{index}"``
under a fixed namespace, so the same chunk position of the same article
always maps to the same id across runs and processes.  Upserting by that
id overwrites the earlier point instead of adding a duplicate.

``uid`` (``"{url}-{index + 1}"``) is a human-readable label stored in the
payload.  It is not guaranteed unique (a URL ending in ``-1`` can collide)
and must never be used as a storage key.
"""

from __future__ import annotations

import uuid

from src.models.rag import Chunk, ChunkPayload, Document, IndexedPoint

# Fixed namespace for point ids; equal to uuid.NAMESPACE_DNS.  Changing it
# would orphan every point already in the corpus.
POINT_ID_NAMESPACE = uuid.UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8")


def point_id(url: str, index: int) -> str:
    """Return the storage id for chunk *index* of *url*."""
    if index < 0:
        raise ValueError(f"chunk index must be >= 0, got {index}")
    return str(uuid.uuid5(POINT_ID_NAMESPACE, f"{url}-{index}"))


def display_uid(url: str, index: int) -> str:
    """Return the one-based display label for chunk *index* of *url*."""
    return f"{url}-{index + 1}"


def build_chunks(url: str, texts: list[str]) -> list[Chunk]:
    return [Chunk(source_url=url, index=i, text=t) for i, t in enumerate(texts)]


def build_points(
    document: Document,
    chunks: list[Chunk],
    vectors: list[list[float]],
) -> list[IndexedPoint]:
    """Pair each chunk with its vector, id and payload.

    Raises
    ------
    ValueError
        If *chunks* and *vectors* differ in length.
    """
    if len(chunks) != len(vectors):
        raise ValueError(
            f"chunks and vectors length mismatch: {len(chunks)} != {len(vectors)}"
        )

    return [
        IndexedPoint(
            id=point_id(chunk.source_url, chunk.index),
            vector=vector,
            payload=ChunkPayload(
                source_url=chunk.source_url,
                title=document.title,
                chunk_index=chunk.index,
                chunk_text=chunk.text,
                uid=display_uid(chunk.source_url, chunk.index),
            ),
        )
        for chunk, vector in zip(chunks, vectors)
    ]

"""Abstract base class for vector-store service providers.

Defines the contract for storing and searching embedded chunks.  The
collection name is fixed per provider instance (from configuration), so
methods do not take it as an argument.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.rag import IndexedPoint, SearchHit


# Concrete implementation: ChromaDBProvider (src/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for vector-store services used by the RAG pipeline.

    All methods are async to support network-backed stores without
    blocking the event loop.
    """

    @abstractmethod
    async def ensure_collection(self, dimension: int) -> None:
        """Make sure the collection exists with cosine distance.

        Idempotent: an existing collection is left unmodified.

        Parameters
        ----------
        dimension:
            Expected vector dimensionality.

        Raises
        ------
        src.utils.errors.RAGError
            If the collection cannot be created or already holds vectors
            of a different dimension.
        """

    @abstractmethod
    async def upsert(self, points: list[IndexedPoint]) -> int:
        """Insert or overwrite *points* by id.

        Returns
        -------
        int
            Number of points written.

        Raises
        ------
        src.utils.errors.RAGError
            If the write fails.
        """

    @abstractmethod
    async def search(self, vector: list[float], k: int = 5) -> list[SearchHit]:
        """Return at most *k* nearest points by cosine similarity.

        Results are in the store's native similarity order (best first).

        Raises
        ------
        src.utils.errors.RAGError
            If the query fails.
        """

    @abstractmethod
    async def count(self) -> int:
        """Return the number of points in the collection."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"chromadb"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store is reachable."""

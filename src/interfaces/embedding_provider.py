"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text.  Callers
say whether the texts are user questions or corpus passages via
:class:`EmbeddingTask`; asymmetric models (e.g. ``jina-embeddings-v3``)
embed the two differently so that questions land near their answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from src.utils.errors import EmbeddingError
from src.utils.result import FailureReason, Result


class EmbeddingTask(str, Enum):
    """Task hint sent with every embedding request."""

    QUERY = "retrieval.query"
    PASSAGE = "retrieval.passage"


# Concrete implementation: JinaEmbeddingProvider (src/providers/embedding/)
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the RAG pipeline.

    Embeddings are consumed by
    :class:`~src.interfaces.vector_store_provider.IVectorStoreProvider` for
    indexing and query-time similarity search.
    """

    @abstractmethod
    async def embed(self, texts: list[str], task: EmbeddingTask) -> Result[list[list[float]]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.
        task:
            Whether the texts are queries or passages.

        Returns
        -------
        Result[list[list[float]]]
            On success, one vector per input text in input order, each of
            length :meth:`get_dimension`.  On transport errors or a
            malformed response, a failed result; implementations must not
            raise for these.
        """

    async def embed_single(self, text: str, task: EmbeddingTask) -> Result[list[float]]:
        """Embed one text; convenience wrapper around :meth:`embed`.

        A successful batch call that returns no vectors is reported as an
        ``EMPTY`` failure.
        """
        result = await self.embed([text], task)
        if not result.ok:
            return Result.failure(result.reason, result.error or result.detail)  # type: ignore[arg-type]
        if not result.value:
            return Result.failure(
                FailureReason.EMPTY,
                EmbeddingError("no vector returned", provider_name=self.get_provider_name()),
            )
        return Result.success(result.value[0])  # type: ignore[index]

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        Must match the dimension the vector store collection was created
        with (``1024`` for ``jina-embeddings-v3``).
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (credentials present)."""

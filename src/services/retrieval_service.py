"""Retrieval pipeline: query -> context window -> generated answer.

Data flow:
  1. EMBED    -- the question is embedded with the ``retrieval.query``
                 task.
  2. SEARCH   -- the vector store returns the ``k`` nearest chunks by
                 cosine similarity, in its own order.  No re-ranking.
  3. CONTEXT  -- the ``chunkText`` of each hit, newline-joined.
  4. GENERATE -- context and question go to the LLM provider.

Retrieval never fails a request on its own: an embedding failure, a
search failure, or zero hits all yield an empty context (with
``degraded_reason`` set) and generation still runs.  Generation errors
are not caught here; they propagate as
:class:`~src.utils.errors.LLMError`.
"""

from __future__ import annotations

import structlog

from src.interfaces.embedding_provider import EmbeddingTask, IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import RetrievalContext
from src.utils.errors import RAGError
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class RetrievalService:
    """Builds context windows for queries and asks the LLM to answer them."""

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        llm_provider: ILLMProvider,
        default_k: int = 5,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._llm = llm_provider
        self._default_k = default_k

    async def retrieve(self, query: str, k: int | None = None) -> RetrievalContext:
        """Return the context window for *query* using the *k* nearest chunks."""
        k = self._default_k if k is None else k
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")

        embedded = await self._embedding_provider.embed_single(query, EmbeddingTask.QUERY)
        if not embedded.ok:
            logger.warning(
                "retrieval_degraded",
                reason="embedding_failed",
                failure=embedded.reason.value if embedded.reason else None,
                detail=embedded.detail,
            )
            return RetrievalContext(query=query, degraded_reason="embedding_failed")

        try:
            hits = await self._vector_store.search(embedded.value, k)  # type: ignore[arg-type]
        except RAGError as exc:
            logger.error("retrieval_degraded", reason="search_failed", error=str(exc))
            return RetrievalContext(query=query, degraded_reason="search_failed")

        hits = hits[:k]
        if not hits:
            logger.info("retrieval_degraded", reason="no_hits", k=k)
            return RetrievalContext(query=query, degraded_reason="no_hits")

        context = "\n".join(hit.payload.chunk_text for hit in hits)
        logger.info("retrieval_complete", k=k, hits=len(hits), context_length=len(context))
        return RetrievalContext(query=query, context=context, hits=hits)

    async def answer(self, query: str, k: int | None = None) -> tuple[str, RetrievalContext]:
        """Retrieve context for *query* and generate an answer.

        Raises
        ------
        src.utils.errors.LLMError
            If generation fails.
        """
        retrieved = await self.retrieve(query, k)
        answer = await self._llm.generate(retrieved.context, query)
        return answer, retrieved

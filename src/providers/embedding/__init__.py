"""Embedding provider implementations.

Embeddings convert text into numeric vectors that capture semantic meaning.
These vectors are stored in ChromaDB and used for similarity search.

JinaEmbeddingProvider — ``jina-embeddings-v3`` (1024 dims) over HTTP,
with separate query/passage task adapters.
"""

from src.providers.embedding.jina_embedding_provider import JinaEmbeddingProvider

__all__ = ["JinaEmbeddingProvider"]

"""Vector store provider implementations.

ChromaDB is the sole vector store implementation. It stores chunk
embeddings on disk (persistent) in a single cosine collection and
supports nearest-neighbour search. Data persists at CHROMADB_PERSIST_DIR
(default: ./data/chromadb).

To swap ChromaDB for another vector database, create a new class
implementing IVectorStoreProvider and construct it in main.py.
"""

from src.providers.vector_store.chromadb_provider import ChromaDBProvider

__all__ = ["ChromaDBProvider"]

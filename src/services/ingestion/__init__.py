"""News ingestion pipeline.

Orchestrates: **list -> extract -> chunk -> embed -> identify -> store**.

1. **List** (IArticleFeedProvider) -- candidate article URLs for a topic.
2. **Extract** (IArticleProvider) -- headline, sub-headings and prose
   paragraphs of each page.
3. **Chunk** (chunker.py / TextChunker) -- bounded, overlapping windows.
4. **Embed** (IEmbeddingProvider) -- one batch call per article.
5. **Identify** (identity.py) -- name-based UUID per (url, chunk index).
6. **Store** (IVectorStoreProvider) -- one bulk upsert per run.
"""

from src.services.ingestion.chunker import TextChunker
from src.services.ingestion.ingestion_service import IngestionService, IngestionState

__all__ = ["IngestionService", "IngestionState", "TextChunker"]

"""Jina embedding provider adapter.

Calls the Jina ``/v1/embeddings`` endpoint with ``jina-embeddings-v3``
(1024 dimensions).  The model is task-aware: queries and passages are
embedded with different adapters, selected by the ``task`` field.

Failures are returned as :class:`~src.utils.result.Result` failures and
logged; nothing here raises to the caller.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.config.settings import Settings
from src.interfaces.embedding_provider import EmbeddingTask, IEmbeddingProvider
from src.utils.errors import EmbeddingError
from src.utils.result import FailureReason, Result

logger = structlog.get_logger(logger_name=__name__)

_JINA_BATCH_LIMIT = 512
_PROVIDER_NAME = "jina_embedding"


def _failure(reason: FailureReason, message: str) -> Result[list[list[float]]]:
    return Result.failure(reason, EmbeddingError(message, provider_name=_PROVIDER_NAME))


class JinaEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by the Jina AI embeddings API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._api_key = settings.jina_api_key
        self._endpoint = f"{settings.jina_base_url.rstrip('/')}/embeddings"
        self._model = settings.jina_model
        self._dimension = settings.embedding_dimension
        self._client = http_client

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str], task: EmbeddingTask) -> Result[list[list[float]]]:
        """Embed *texts*, splitting into batches of 512 per request."""
        if not texts:
            return _failure(FailureReason.EMPTY, "No texts to embed")

        all_embeddings: list[list[float]] = []
        for start in range(0, len(texts), _JINA_BATCH_LIMIT):
            batch = texts[start : start + _JINA_BATCH_LIMIT]
            result = await self._embed_batch(batch, task)
            if not result.ok:
                return result
            all_embeddings.extend(result.value)  # type: ignore[arg-type]

        return Result.success(all_embeddings)

    async def _embed_batch(
        self, batch: list[str], task: EmbeddingTask
    ) -> Result[list[list[float]]]:
        payload = {"model": self._model, "task": task.value, "input": batch}
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._client.post(self._endpoint, json=payload, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "jina_embedding_http_status",
                status=exc.response.status_code,
                batch_size=len(batch),
            )
            return _failure(
                FailureReason.TRANSPORT, f"Jina HTTP {exc.response.status_code}"
            )
        except httpx.HTTPError as exc:
            logger.error("jina_embedding_request_failed", error=str(exc), batch_size=len(batch))
            return _failure(FailureReason.TRANSPORT, str(exc))
        except ValueError as exc:
            logger.error("jina_embedding_invalid_json", error=str(exc))
            return _failure(FailureReason.MALFORMED, "Invalid JSON from Jina")

        vectors = self._parse_vectors(body)
        if vectors is None or len(vectors) != len(batch):
            logger.error(
                "jina_embedding_malformed_response",
                expected=len(batch),
                received=None if vectors is None else len(vectors),
            )
            return _failure(FailureReason.MALFORMED, "Unexpected embedding response shape")

        bad_dims = {len(v) for v in vectors if len(v) != self._dimension}
        if bad_dims:
            logger.error(
                "jina_embedding_dimension_mismatch",
                expected=self._dimension,
                received=sorted(bad_dims),
            )
            return _failure(
                FailureReason.MALFORMED,
                f"Expected {self._dimension}-dim vectors, got {sorted(bad_dims)}",
            )

        logger.info("jina_embedding_batch", model=self._model, task=task.value, batch_size=len(batch))
        return Result.success(vectors)

    @staticmethod
    def _parse_vectors(body: Any) -> list[list[float]] | None:
        """Pull ``data[].embedding`` out of *body*, or ``None`` if malformed."""
        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            return None

        items = body["data"]
        # Jina tags each item with its input index; honour it when present.
        if all(isinstance(item, dict) and isinstance(item.get("index"), int) for item in items):
            items = sorted(items, key=lambda item: item["index"])

        vectors: list[list[float]] = []
        for item in items:
            embedding = item.get("embedding") if isinstance(item, dict) else None
            if not isinstance(embedding, list):
                return None
            try:
                vectors.append([float(x) for x in embedding])
            except (TypeError, ValueError):
                return None
        return vectors

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        return bool(self._api_key)

"""NewsAPI article feed provider.

Lists articles for a topic query via the ``/v2/everything`` endpoint.
Only ``url`` and ``title`` are kept from each record; the article body is
fetched later by the scraper because NewsAPI truncates ``content``.
"""

from __future__ import annotations

import httpx
import structlog

from src.config.settings import Settings
from src.interfaces.article_feed_provider import IArticleFeedProvider
from src.models.rag import Document
from src.utils.errors import FetchError
from src.utils.result import FailureReason, Result

logger = structlog.get_logger(logger_name=__name__)

_MAX_PAGE_SIZE = 100  # NewsAPI rejects larger pages


def _failure(reason: FailureReason, message: str) -> Result[list[Document]]:
    return Result.failure(reason, FetchError(message, provider_name="newsapi"))


class NewsAPIFeedProvider(IArticleFeedProvider):
    """Article feed backed by newsapi.org."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._api_key = settings.news_api_key
        self._base_url = settings.news_api_base_url.rstrip("/")
        self._language = settings.news_language
        self._client = http_client

    async def fetch_articles(self, query: str, page_size: int = 50) -> Result[list[Document]]:
        """Return up to *page_size* documents matching *query*.

        Errors never raise: transport failures, non-2xx responses and a
        body ``status`` other than ``"ok"`` all produce a failed result.
        """
        page_size = max(1, min(page_size, _MAX_PAGE_SIZE))
        params = {
            "q": query,
            "pageSize": page_size,
            "language": self._language,
            "apiKey": self._api_key,
        }
        try:
            response = await self._client.get(f"{self._base_url}/everything", params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("newsapi_http_status", query=query, status=exc.response.status_code)
            return _failure(
                FailureReason.TRANSPORT, f"NewsAPI HTTP {exc.response.status_code}"
            )
        except httpx.HTTPError as exc:
            logger.error("newsapi_request_failed", query=query, error=str(exc))
            return _failure(FailureReason.TRANSPORT, str(exc))
        except ValueError as exc:
            logger.error("newsapi_invalid_json", query=query, error=str(exc))
            return _failure(FailureReason.MALFORMED, "NewsAPI returned invalid JSON")

        if not isinstance(body, dict) or body.get("status") != "ok":
            message = body.get("message", "") if isinstance(body, dict) else ""
            logger.error("newsapi_error_status", query=query, message=message)
            return _failure(FailureReason.UPSTREAM_STATUS, message or "status != ok")

        articles = body.get("articles") or []
        documents = [
            Document(url=article.get("url") or "", title=article.get("title") or "")
            for article in articles[:page_size]
            if isinstance(article, dict)
        ]

        logger.info("newsapi_articles_fetched", query=query, count=len(documents))
        return Result.success(documents)

    def get_provider_name(self) -> str:
        return "newsapi"

    def is_available(self) -> bool:
        return bool(self._api_key)

"""Unit tests for the NewsAPI article feed provider."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.config.settings import Settings
from src.models.rag import Document
from src.providers.feed.newsapi_provider import NewsAPIFeedProvider
from src.utils.errors import FetchError
from src.utils.result import FailureReason
from tests.conftest import make_http_response


def _provider(response: MagicMock | None = None, side_effect: Exception | None = None, **overrides):
    settings = Settings(**{"_env_file": None, "news_api_key": "news-test", **overrides})
    client = MagicMock(spec=httpx.AsyncClient)
    client.get = AsyncMock(return_value=response, side_effect=side_effect)
    return NewsAPIFeedProvider(settings, http_client=client), client


class TestNewsAPIFeedProvider:
    @pytest.mark.asyncio
    async def test_fetch_articles_maps_url_and_title(self) -> None:
        body = {
            "status": "ok",
            "articles": [
                {"url": "https://a.example/1", "title": "First", "content": "truncated…"},
                {"url": None, "title": "No link"},
                {"url": "https://a.example/3", "title": None},
            ],
        }
        provider, client = _provider(make_http_response(json_data=body))

        result = await provider.fetch_articles("climate", page_size=10)

        assert result.ok
        assert result.value == [
            Document(url="https://a.example/1", title="First"),
            Document(url="", title="No link"),
            Document(url="https://a.example/3", title=""),
        ]
        call = client.get.call_args
        assert call.args[0] == "https://newsapi.org/v2/everything"
        assert call.kwargs["params"]["q"] == "climate"
        assert call.kwargs["params"]["pageSize"] == 10
        assert call.kwargs["params"]["apiKey"] == "news-test"

    @pytest.mark.asyncio
    async def test_page_size_is_clamped(self) -> None:
        provider, client = _provider(make_http_response(json_data={"status": "ok", "articles": []}))

        await provider.fetch_articles("ai", page_size=500)

        assert client.get.call_args.kwargs["params"]["pageSize"] == 100

    @pytest.mark.asyncio
    async def test_error_status_in_body(self) -> None:
        body = {"status": "error", "code": "apiKeyInvalid", "message": "Your API key is invalid."}
        provider, _ = _provider(make_http_response(json_data=body))

        result = await provider.fetch_articles("ai")

        assert result.reason is FailureReason.UPSTREAM_STATUS
        assert result.detail == "Your API key is invalid."
        assert isinstance(result.error, FetchError)

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        provider, _ = _provider(make_http_response(status_code=500))

        result = await provider.fetch_articles("ai")

        assert result.reason is FailureReason.TRANSPORT

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        provider, _ = _provider(side_effect=httpx.ConnectError("dns"))

        result = await provider.fetch_articles("ai")

        assert result.reason is FailureReason.TRANSPORT

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        provider, _ = _provider(make_http_response(json_data=None))

        result = await provider.fetch_articles("ai")

        assert result.reason is FailureReason.MALFORMED

    def test_is_available_requires_key(self) -> None:
        assert _provider()[0].is_available() is True
        assert _provider(news_api_key="")[0].is_available() is False

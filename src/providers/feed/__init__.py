"""Article feed providers (topic query -> candidate article URLs)."""

from src.providers.feed.newsapi_provider import NewsAPIFeedProvider

__all__ = ["NewsAPIFeedProvider"]

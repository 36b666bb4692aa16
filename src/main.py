"""newsrag FastAPI application entry point.

Wires together all providers and services via dependency injection.
Nothing here is a module-level singleton: :func:`build_components`
constructs every collaborator from a :class:`Settings` instance, the
lifespan opens them at startup and closes them at shutdown, and routes
read them from ``app.state``.

Run with ``python -m src.main`` (uvicorn) or point any ASGI server at
``src.main:create_app`` with ``--factory``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware, configure_cors
from src.api.routes import APP_VERSION
from src.api.routes import router as api_router
from src.config.settings import Settings
from src.providers.article.web_scraper_provider import WebScraperProvider
from src.providers.embedding.jina_embedding_provider import JinaEmbeddingProvider
from src.providers.feed.newsapi_provider import NewsAPIFeedProvider
from src.providers.llm.gemini_provider import GeminiLLMProvider
from src.providers.session.sqlite_session_store import SQLiteSessionStore
from src.providers.vector_store.chromadb_provider import ChromaDBProvider
from src.services.chat_service import ChatService
from src.services.ingestion.chunker import TextChunker
from src.services.ingestion.ingestion_service import IngestionService
from src.services.retrieval_service import RetrievalService
from src.utils.errors import ConfigurationError
from src.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component construction
# ---------------------------------------------------------------------------


def build_components(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.

    Raises
    ------
    src.utils.errors.ConfigurationError
        If a required credential is missing.
    """
    app_settings.validate_required()

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.http_timeout, follow_redirects=True)

    # -- Providers --
    feed = NewsAPIFeedProvider(settings=app_settings, http_client=http_client)
    scraper = WebScraperProvider(http_client=http_client)
    embedding_provider = JinaEmbeddingProvider(settings=app_settings, http_client=http_client)
    vector_store = ChromaDBProvider(
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
    )
    llm_provider = GeminiLLMProvider(settings=app_settings)
    session_store = SQLiteSessionStore(
        db_path=app_settings.session_db_path,
        ttl_hours=app_settings.session_ttl_hours,
    )

    # -- Services --
    chunker = TextChunker(chunk_size=app_settings.chunk_size, overlap=app_settings.chunk_overlap)
    ingestion_service = IngestionService(
        feed=feed,
        article_scraper=scraper,
        chunker=chunker,
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        default_query=app_settings.default_news_query,
        page_size=app_settings.news_page_size,
        concurrency=app_settings.ingest_concurrency,
    )
    retrieval_service = RetrievalService(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        llm_provider=llm_provider,
        default_k=app_settings.retrieval_top_k,
    )
    chat_service = ChatService(retrieval_service=retrieval_service, session_store=session_store)

    provider_registry = {
        "feed": feed.is_available(),
        "scraper": scraper.is_available(),
        "embedding": embedding_provider.is_available(),
        "llm": llm_provider.is_available(),
    }

    return {
        "settings": app_settings,
        "http_client": http_client,
        "feed": feed,
        "scraper": scraper,
        "embedding_provider": embedding_provider,
        "vector_store": vector_store,
        "llm_provider": llm_provider,
        "session_store": session_store,
        "ingestion_service": ingestion_service,
        "retrieval_service": retrieval_service,
        "chat_service": chat_service,
        "provider_registry": provider_registry,
    }


async def open_components(components: dict[str, Any]) -> None:
    """Run startup I/O: session tables and the vector collection."""
    app_settings: Settings = components["settings"]
    await components["session_store"].initialize()
    await components["vector_store"].ensure_collection(app_settings.embedding_dimension)


async def close_components(components: dict[str, Any]) -> None:
    """Release network resources held by *components*."""
    await components["session_store"].aclose()
    await components["llm_provider"].aclose()
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Components are constructed in the lifespan, so importing this module
    or calling this function performs no I/O and needs no credentials.
    """
    resolved_settings = app_settings or Settings()

    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        components = build_components(resolved_settings)
        try:
            await open_components(components)
        except Exception:
            await close_components(components)
            raise

        for key, value in components.items():
            setattr(application.state, key, value)

        _logger.info(
            "app_startup",
            version=APP_VERSION,
            environment=resolved_settings.app_env,
            providers=components["provider_registry"],
        )

        yield

        await close_components(components)
        _logger.info("app_shutdown", message="Clients closed")

    application = FastAPI(
        title="newsrag API",
        version=APP_VERSION,
        description=(
            "Retrieval-augmented chat over news articles: ingest articles for a "
            "topic, then ask questions answered from the retrieved passages."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()
    configure_logging(
        log_level=settings.log_level,
        json_output=(settings.app_env == "production"),
    )
    # Fail before binding the port rather than on the first request.
    try:
        settings.validate_required()
    except ConfigurationError as exc:
        _logger.error("startup_aborted", error=exc.message)
        raise SystemExit(1) from exc
    uvicorn.run(
        create_app(settings),
        host=settings.app_host,
        port=settings.app_port,
    )


if __name__ == "__main__":
    main()

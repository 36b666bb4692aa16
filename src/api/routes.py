"""FastAPI routes for the newsrag chat backend.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern; ``app.state`` is populated
at startup by ``main.py``'s lifespan.

# ─── ROUTE MAP ─────────────────────────────────────────────────────────
#
# Endpoint                  Method  Description
# ─────────────────────────────────────────────────────────────────────
# /                         GET     Liveness status
# /health                   GET     Provider availability + corpus size
# /session                  POST    Create a chat session (24h expiry)
# /chat                     POST    Answer a question within a session
# /history/{session_id}     GET     Full session history
# /history/{session_id}     DELETE  Clear a session
# /ingest                   POST    Run one ingestion for a topic query
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.api.schemas import (
    ChatRequest,
    ChatResponse,
    CreateSessionResponse,
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    IngestRequest,
    IngestResponse,
    StatusResponse,
)
from src.interfaces.session_store import ISessionStore
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.services.chat_service import ChatService
from src.services.ingestion.ingestion_service import IngestionService
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

APP_VERSION = "0.1.0"

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies (read from app.state)
# ---------------------------------------------------------------------------


def _get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def _get_session_store(request: Request) -> ISessionStore:
    return request.app.state.session_store


def _get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion_service


def _get_vector_store(request: Request) -> IVectorStoreProvider:
    return request.app.state.vector_store


ChatServiceDep = Annotated[ChatService, Depends(_get_chat_service)]
SessionStoreDep = Annotated[ISessionStore, Depends(_get_session_store)]
IngestionServiceDep = Annotated[IngestionService, Depends(_get_ingestion_service)]
VectorStoreDep = Annotated[IVectorStoreProvider, Depends(_get_vector_store)]


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get("/", response_model=StatusResponse, summary="Liveness status")
async def root() -> StatusResponse:
    return StatusResponse(status="Backend is running 🚀", service="newsrag")


@router.get("/health", response_model=HealthResponse, summary="Application health check")
async def health_check(request: Request, vector_store: VectorStoreDep) -> HealthResponse:
    """Return provider availability and the number of stored points."""
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))

    try:
        providers["corpus_points"] = await vector_store.count()
        providers["vector_store"] = True
    except Exception as exc:
        _logger.warning("health_vector_store_unavailable", error=str(exc))
        providers["corpus_points"] = 0
        providers["vector_store"] = False

    critical = ("embedding", "llm", "vector_store")
    status = "healthy" if all(providers.get(name, False) for name in critical) else "degraded"
    return HealthResponse(status=status, version=APP_VERSION, providers=providers)


# ---------------------------------------------------------------------------
# Sessions & chat
# ---------------------------------------------------------------------------


@router.post(
    "/session",
    response_model=CreateSessionResponse,
    status_code=201,
    summary="Create a chat session",
)
async def create_session(session_store: SessionStoreDep) -> CreateSessionResponse:
    session_id = await session_store.create_session()
    return CreateSessionResponse(session_id=session_id)


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Answer a question using the news corpus",
)
async def chat(body: ChatRequest, chat_service: ChatServiceDep) -> ChatResponse | JSONResponse:
    session_id = (body.session_id or "").strip()
    query = (body.query or "").strip()
    if not session_id or not query:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Missing sessionId or query").model_dump(
                exclude_none=True
            ),
        )

    result = await chat_service.ask(session_id, query)
    return ChatResponse(response=result.answer, context_chunks=result.context_chunks)


@router.get(
    "/history/{session_id}",
    response_model=HistoryResponse,
    summary="Get a session's message history",
)
async def get_history(session_id: str, session_store: SessionStoreDep) -> HistoryResponse:
    history = await session_store.read_all(session_id)
    return HistoryResponse(history=history)


@router.delete(
    "/history/{session_id}",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Clear a session's history",
)
async def clear_history(session_id: str, session_store: SessionStoreDep) -> StatusResponse:
    await session_store.clear(session_id)
    return StatusResponse(status="History cleared")


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


@router.post("/ingest", response_model=IngestResponse, summary="Ingest articles for a topic")
async def ingest(
    ingestion_service: IngestionServiceDep,
    body: IngestRequest | None = None,
) -> IngestResponse:
    """Run one ingestion; the request's ``query`` is passed through to the feed."""
    query = body.query if body is not None else None
    result = await ingestion_service.ingest_articles(query=query)
    return IngestResponse(
        status=f"Ingested {result.documents_processed} articles",
        result=result.model_dump(),
    )

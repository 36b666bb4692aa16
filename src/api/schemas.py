"""Pydantic request/response schemas for the newsrag API.

Response bodies keep the keys existing chat clients read (``status``,
``response``, ``sessionId``, ``history``); anything else, such as
``contextChunks`` or the ingestion ``result``, is an extra key next to them.
Wire names are camelCase and Python attribute names stay snake_case via
``Field(alias=...)``.

Request bodies keep ``sessionId``/``query`` optional at the schema level
so the route can answer a missing field with the documented 400 instead
of FastAPI's generic 422.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.session import SessionMessage


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class StatusResponse(BaseModel):
    status: str
    service: str | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class CreateSessionResponse(_CamelModel):
    session_id: str = Field(alias="sessionId")


class ChatRequest(_CamelModel):
    session_id: str | None = Field(default=None, alias="sessionId")
    query: str | None = None


class ChatResponse(_CamelModel):
    response: str
    context_chunks: int = Field(default=0, alias="contextChunks")


class HistoryResponse(BaseModel):
    history: list[SessionMessage]


class IngestRequest(BaseModel):
    query: str | None = Field(default=None, max_length=500)


class IngestResponse(BaseModel):
    status: str
    result: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None

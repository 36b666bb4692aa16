"""newsrag API layer — routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router
from src.api.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    IngestRequest,
    IngestResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "HistoryResponse",
    "IngestRequest",
    "IngestResponse",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
]

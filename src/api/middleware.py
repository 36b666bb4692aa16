"""API middleware — CORS, request logging, and error handling.

Starlette middleware is a stack (last added, first executed).  In
``main.py`` ErrorHandlingMiddleware is added before RequestLoggingMiddleware,
so the logging middleware is outermost and records the final status code
even when an error was converted to a 500 body.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import NewsRAGError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

INTERNAL_ERROR = "Internal server error"


def internal_error_response() -> JSONResponse:
    """Return the uniform 500 body used for every unhandled failure."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=INTERNAL_ERROR).model_dump(exclude_none=True),
    )


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware; defaults to ``["*"]`` for development."""
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn any uncaught error into a uniform ``500 Internal server error``.

    Whatever step failed (generation, vector store, session store), the
    client sees the same body.  Details go to the server log only.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except NewsRAGError as exc:
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
            )
            return internal_error_response()
        except Exception as exc:
            _logger.exception(
                "unhandled_error",
                error_type=type(exc).__name__,
                path=str(request.url.path),
            )
            return internal_error_response()

"""Structured logging setup using structlog.

One processor chain (context vars, level, ISO timestamp, stack info)
ends in either a coloured ConsoleRenderer for development or a
JSONRenderer for production.  ``APP_ENV=production`` selects JSON; so
does ``json_output=True``.

Records emitted through the standard library (uvicorn, chromadb,
google-genai) are passed through the same chain via
``ProcessorFormatter`` so every line in the process has one shape.
"""

import logging
import os
import sys

import structlog

# Client libraries that log each request at INFO; our providers already
# emit one event per call.
_NOISY_LOGGERS = ("httpx", "httpcore", "chromadb", "google_genai")


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR.
        json_output: Force JSON rendering regardless of ``APP_ENV``.

    Returns:
        A configured structlog BoundLogger.
    """
    level = log_level.upper()
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    # contextvars first so request-scoped bindings land before level/timestamp.
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a named structlog logger, applying default configuration once."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)

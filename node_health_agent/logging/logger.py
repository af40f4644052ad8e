"""
Structured logging for the agent.

Each record is one JSON object (or a console line with LOG_FORMAT=console)
carrying timestamp, level, logger, event_type and the keyword fields of the
call. Modules log snake_case event names:

    logger = get_logger(__name__)
    logger.warning("chain_height_reference_failed", node_url=url, error=str(e))

This module imports nothing from node_health_agent so every other module can
import it first.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_FORMAT_JSON = "json"
LOG_FORMAT_CONSOLE = "console"


def resolve_level(name: str | None) -> int:
    """LOG_LEVEL name -> stdlib level number; unknown names fall back to INFO."""
    return getattr(logging, (name or "INFO").strip().upper(), logging.INFO)


def _mirror_message(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """level/fmt default to LOG_LEVEL / LOG_FORMAT from the environment."""
    fmt = (fmt or os.getenv("LOG_FORMAT") or LOG_FORMAT_JSON).strip().lower()
    if fmt == LOG_FORMAT_CONSOLE:
        renderer: Any = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("event_type"),
            _mirror_message,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            resolve_level(level or os.getenv("LOG_LEVEL"))
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a module; the name is bound as the 'logger' field."""
    return structlog.get_logger(name).bind(logger=name)


def bind_source(logger: structlog.BoundLogger, source_name: str) -> structlog.BoundLogger:
    """Logger with source bound to all subsequent calls."""
    return logger.bind(source=source_name)

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import Any, Iterator, cast

import structlog
from structlog.dev import ConsoleRenderer
from structlog.stdlib import BoundLogger
from structlog.types import Processor

try:
    from tagtree import __version__ as TAGTREE_VERSION
except Exception:
    TAGTREE_VERSION = os.getenv("APP_VERSION", "unknown")


def _coerce_level(level: str | int) -> int:
    """Translate a string/int level into the numeric logging level."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, str):
            raise ValueError(f"Invalid log level: {level}")
        return int(resolved)
    return int(level)


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_logging(level: str | int = "INFO", json_output: bool = False) -> None:
    """Route structlog through stdlib logging, rendered to stderr.

    stdout is left to command output (``tagtree dump`` prints JSON there).
    """
    numeric_level = _coerce_level(level)
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_shared_processors(),
        )
    )
    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger with service metadata bound.

    The logger stays a lazy proxy until first use, so module-level loggers
    pick up ``configure_logging`` even when it runs after import.
    """
    service_name = os.getenv("SERVICE_NAME", "tagtree")
    return cast(
        BoundLogger,
        structlog.get_logger(
            name,
            service_name=service_name,
            version=os.getenv("APP_VERSION", TAGTREE_VERSION),
        ),
    )


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind contextual data (e.g. the file being processed) for a block."""
    if not kwargs:
        yield
        return

    tokens = structlog.contextvars.bind_contextvars(**kwargs)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)

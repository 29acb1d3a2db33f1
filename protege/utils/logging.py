"""Structured logging setup using structlog.

Two renderers share one processor chain: a coloured console renderer for
local development and a JSON renderer for production.  ``APP_ENV=production``
(or ``json_output=True``) selects JSON.

Standard-library ``logging`` is routed through the same chain so records
from httpx, aiosqlite and the openai client come out in the same format.
Those libraries log every request at INFO/DEBUG, so they are held at
WARNING unless the application itself runs at DEBUG.

Pipeline runs bind their identifiers with :func:`pipeline_context`; every
event logged inside the block carries them, including events emitted by
providers that never see the session id.
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator

import structlog

_CHATTY_LIBRARIES = ("httpx", "httpcore", "openai", "aiosqlite")


def _shared_processors() -> list[structlog.types.Processor]:
    # contextvars first so pipeline bindings appear on every event.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _renderer(use_json: bool) -> structlog.types.Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _route_stdlib(level: str, processors: list[structlog.types.Processor]) -> None:
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *processors],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    library_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the stdlib bridge.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output regardless of ``APP_ENV``.

    Returns:
        The root structlog logger.
    """
    level = log_level.upper()
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    shared = _shared_processors()
    renderer = _renderer(use_json)

    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _route_stdlib(level, [*shared, renderer])

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)


@contextmanager
def pipeline_context(**bindings: object) -> Iterator[None]:
    """Bind *bindings* (``pipeline=...``, ``session_id=...``) for the block.

    ``None`` values are dropped so optional identifiers don't clutter
    events.
    """
    present = {key: value for key, value in bindings.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**present):
        yield

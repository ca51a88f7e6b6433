"""Logging for groupcart: structlog on top of the stdlib ``logging`` tree.

Services log either through ``logging.getLogger(__name__)`` or
``structlog.get_logger(__name__)``; both end up in one stderr handler
rendered by structlog, as console lines or as JSON objects (``--log-json``).
stdout stays reserved for command results.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Libraries whose INFO/DEBUG chatter is never useful to a groupcart user.
_LIBRARY_LOGGERS = ("alembic", "sqlalchemy.engine", "sqlalchemy.pool")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all log records to stderr; safe to call more than once.

    The ``groupcart`` logger tree logs at DEBUG when *verbose*, WARNING
    otherwise. Third-party loggers stay at WARNING either way.
    """
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("groupcart").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

# Core Module - Structured Logging
#
# One place that wires structlog over the stdlib ``logging`` module.
# Modules keep using ``logging.getLogger(__name__)`` or
# ``structlog.get_logger(__name__)``; records from both pass through the
# same processor chain and renderer on a single root handler.

import logging
import sys
from typing import Optional

import structlog

_handler: Optional[logging.Handler] = None

# Applied to structlog events and to foreign (stdlib) records alike
_SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def build_formatter(json_logs: bool = True) -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering every record as JSON or console text."""
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog + stdlib logging. Safe to call more than once."""
    global _handler

    structlog.configure(
        processors=_SHARED_PROCESSORS + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        root_logger.addHandler(_handler)
    _handler.setFormatter(build_formatter(json_logs))


def get_logger(name: str):
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)

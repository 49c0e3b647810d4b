"""Structured logging for sprintsnap.

Events are JSON lines on stderr; stdout belongs to the CLI's command output
(reconstructed state, pending changes, burndown totals).  Every event carries
the emitting ``component`` and, once a command has resolved its
configuration, the ``sprint`` it is working on.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from sprintsnap.models.config import LogConfig

_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # resolved per logger so redirected stderr (tests, CliRunner) is honoured
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(config: LogConfig | str = "info") -> None:
    """Configure structlog from a ``LogConfig`` or a bare level name."""
    level = config.level if isinstance(config, LogConfig) else config
    threshold = _LEVELS.get(level.lower(), logging.INFO)

    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def bind_sprint(sprint_name: str) -> None:
    """Attach ``sprint`` to every event logged from here on."""
    structlog.contextvars.bind_contextvars(sprint=sprint_name)


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

structlog events are handed to the standard library so that library
modules using logging.getLogger(__name__) and structlog callers share
one set of handlers. Output is colored console text in development and
JSON elsewhere.

Audit events have their own stream: the "emotutor.audit" logger gets a
dedicated handler and level and does not propagate to the root logger.
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from emotutor.core.config.settings import Settings

AUDIT_LOGGER_NAME = "emotutor.audit"

# Loggers that are noisy at INFO
_QUIET_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "LiteLLM",
    "sqlalchemy.engine",
    "asyncio",
)


def _render_processors(settings: "Settings") -> list[Processor]:
    if settings.is_development or settings.debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def _install_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    # Replace only handlers installed by an earlier setup_logging() call
    for existing in list(logger.handlers):
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            logger.removeHandler(existing)
            existing.close()
    logger.addHandler(handler)


def setup_logging(settings: "Settings") -> None:
    """Configure structlog and the standard library logging tree.

    Safe to call more than once; handlers from a previous call are replaced.

    Args:
        settings: Application settings. Uses log_level, audit_log_level,
            audit_log_file, debug and the environment.
    """
    log_level = logging.getLevelName(settings.log_level)
    audit_level = logging.getLevelName(settings.audit_log_level)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_render_processors(settings),
        ],
    )

    app_handler = logging.StreamHandler(sys.stdout)
    app_handler.setFormatter(formatter)
    root = logging.getLogger()
    _install_handler(root, app_handler)
    root.setLevel(log_level)

    if settings.audit_log_file:
        audit_handler: logging.Handler = logging.FileHandler(
            settings.audit_log_file, encoding="utf-8"
        )
    else:
        audit_handler = logging.StreamHandler(sys.stdout)
    audit_handler.setFormatter(formatter)
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    _install_handler(audit_logger, audit_handler)
    audit_logger.setLevel(audit_level)
    audit_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("emotutor").setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given name."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind request-scoped values (request_id, learner_id) to later log calls."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()

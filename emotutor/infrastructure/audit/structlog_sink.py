# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Audit sink that writes events as structured log lines.

Used when no database is configured. Events go to the "emotutor.audit"
logger, which setup_logging() routes and levels separately.
"""

from typing import Any

from emotutor.utils.logging import AUDIT_LOGGER_NAME, get_logger

_SEVERITY_METHODS = {
    "debug": "debug",
    "info": "info",
    "warning": "warning",
    "error": "error",
    "critical": "critical",
}


class StructlogAuditSink:
    """Writes audit events through structlog."""

    def __init__(self, logger_name: str = AUDIT_LOGGER_NAME):
        self._logger = get_logger(logger_name)

    async def log_event(
        self,
        kind: str,
        description: str,
        severity: str,
        metadata: dict[str, Any],
    ) -> None:
        method = getattr(self._logger, _SEVERITY_METHODS.get(severity.lower(), "info"))
        method(description, audit_kind=kind, severity=severity, metadata=metadata)

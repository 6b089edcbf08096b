# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Audit sinks."""

from emotutor.infrastructure.audit.structlog_sink import StructlogAuditSink

__all__ = ["StructlogAuditSink"]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure: async SQLAlchemy connection and ORM models."""

from emotutor.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_session,
    init_database,
)
from emotutor.infrastructure.database.models import Base

__all__ = [
    "Base",
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "get_session",
    "init_database",
]

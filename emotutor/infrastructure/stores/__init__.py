# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner history stores.

Both stores implement LearnerStore, SessionSink and AuditSink.
"""

from emotutor.infrastructure.stores.memory import AuditEvent, InMemoryLearnerStore
from emotutor.infrastructure.stores.sqlalchemy_store import SqlAlchemyLearnerStore

__all__ = [
    "AuditEvent",
    "InMemoryLearnerStore",
    "SqlAlchemyLearnerStore",
]

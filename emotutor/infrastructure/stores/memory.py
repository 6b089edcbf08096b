# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory learner store.

Implements the LearnerStore, SessionSink and AuditSink ports with plain
dictionaries. Used for local development when no database is configured
and as the store in tests.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from emotutor.models.learner import (
    LearnerIdentity,
    MasteryRecord,
    ProgressRecord,
    SessionSummary,
)
from emotutor.models.tutoring import ConversationTurn, SessionRecord
from emotutor.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class AuditEvent:
    """An audit event as recorded by the in-memory store."""

    kind: str
    description: str
    severity: str
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)


class InMemoryLearnerStore:
    """Dictionary-backed learner store.

    Sessions are kept in append order and returned most recent first.

    Example:
        >>> store = InMemoryLearnerStore()
        >>> store.add_learner(LearnerIdentity(learner_id="l-1", learning_style="auditory"))
        >>> await store.fetch_learner("l-1")
    """

    def __init__(self) -> None:
        self.learners: dict[str, LearnerIdentity] = {}
        self.sessions: dict[str, list[SessionRecord]] = defaultdict(list)
        self.extra_summaries: dict[str, list[SessionSummary]] = defaultdict(list)
        self.progress: dict[str, list[ProgressRecord]] = defaultdict(list)
        self.mastery: dict[str, list[MasteryRecord]] = defaultdict(list)
        self.cognitive_profiles: dict[str, dict[str, Any]] = {}
        self.audit_events: list[AuditEvent] = []

    # ========== Seeding ==========

    def add_learner(self, identity: LearnerIdentity) -> None:
        self.learners[identity.learner_id] = identity

    def add_session_summary(self, learner_id: str, summary: SessionSummary) -> None:
        """Seed a past session that has no full record."""
        self.extra_summaries[learner_id].append(summary)

    def add_progress(self, learner_id: str, *records: ProgressRecord) -> None:
        self.progress[learner_id].extend(records)

    def add_mastery(self, learner_id: str, *records: MasteryRecord) -> None:
        self.mastery[learner_id].extend(records)

    def set_cognitive_profile(self, learner_id: str, profile: dict[str, Any]) -> None:
        self.cognitive_profiles[learner_id] = dict(profile)

    # ========== LearnerStore ==========

    async def fetch_learner(self, learner_id: str) -> LearnerIdentity | None:
        return self.learners.get(learner_id)

    async def fetch_recent_sessions(self, learner_id: str, limit: int) -> list[SessionSummary]:
        summaries = [record.to_summary() for record in self.sessions.get(learner_id, [])]
        summaries.extend(self.extra_summaries.get(learner_id, []))
        summaries.sort(key=lambda s: s.created_at, reverse=True)
        return summaries[:limit]

    async def fetch_progress_records(self, learner_id: str, limit: int) -> list[ProgressRecord]:
        records = sorted(
            self.progress.get(learner_id, []),
            key=lambda r: r.timestamp,
            reverse=True,
        )
        return records[:limit]

    async def fetch_mastery_records(self, learner_id: str) -> list[MasteryRecord]:
        return list(self.mastery.get(learner_id, []))

    async def fetch_cognitive_profile(self, learner_id: str) -> dict[str, Any] | None:
        profile = self.cognitive_profiles.get(learner_id)
        return dict(profile) if profile is not None else None

    async def fetch_recent_turns(self, learner_id: str, limit: int) -> list[ConversationTurn]:
        records = self.sessions.get(learner_id)
        if not records or limit <= 0:
            return []
        return records[-1].conversation_tail()[-limit:]

    # ========== SessionSink ==========

    async def append_session(self, record: SessionRecord) -> None:
        self.sessions[record.learner_id].append(record)
        logger.debug(
            "Session stored in memory for learner %s (%d total)",
            record.learner_id,
            len(self.sessions[record.learner_id]),
        )

    # ========== AuditSink ==========

    async def log_event(
        self,
        kind: str,
        description: str,
        severity: str,
        metadata: dict[str, Any],
    ) -> None:
        self.audit_events.append(
            AuditEvent(kind=kind, description=description, severity=severity, metadata=dict(metadata))
        )

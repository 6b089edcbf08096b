# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy-backed learner store.

Implements the LearnerStore, SessionSink and AuditSink ports over the
ORM tables in emotutor.infrastructure.database.models.

Example:
    store = SqlAlchemyLearnerStore()
    sessions = await store.fetch_recent_sessions("learner-42", limit=25)
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from emotutor.core.emotional.constants import EmotionalState
from emotutor.infrastructure.database.connection import get_session
from emotutor.infrastructure.database.models import (
    AuditEventRow,
    CognitiveProfileRow,
    LearnerRow,
    MasteryRecordRow,
    ProgressRecordRow,
    TutorSessionRow,
)
from emotutor.models.learner import (
    LearnerIdentity,
    MasteryRecord,
    ProgressRecord,
    SessionSummary,
)
from emotutor.models.tutoring import ConversationTurn, SessionRecord
from emotutor.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _parse_emotion(value: str | None) -> EmotionalState | None:
    if value is None:
        return None
    try:
        return EmotionalState(value)
    except ValueError:
        return None


class SqlAlchemyLearnerStore:
    """Learner store over an async SQLAlchemy session.

    Attributes:
        session_factory: Callable returning an async session context
            manager. Defaults to the application-wide get_session().
    """

    def __init__(self, session_factory: SessionFactory = get_session):
        self._session_factory = session_factory

    # ========== LearnerStore ==========

    async def fetch_learner(self, learner_id: str) -> LearnerIdentity | None:
        async with self._session_factory() as session:
            row = await session.get(LearnerRow, learner_id)

        if row is None:
            return None

        return LearnerIdentity(
            learner_id=row.id,
            display_name=row.display_name,
            age=row.age,
            experience_level=row.experience_level or "intermediate",
            learning_style=row.learning_style or "visual",
            difficulty_preference=row.difficulty_preference or "medium",
        )

    async def fetch_recent_sessions(self, learner_id: str, limit: int) -> list[SessionSummary]:
        query = (
            select(TutorSessionRow)
            .where(TutorSessionRow.learner_id == learner_id)
            .order_by(TutorSessionRow.created_at.desc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            rows = result.scalars().all()

        return [
            SessionSummary(
                session_kind=row.session_kind,
                subject=row.subject,
                emotion_detected=_parse_emotion(row.emotion_detected),
                emotional_tone=row.emotional_tone,
                teaching_approach=row.teaching_approach,
                confidence_score=row.confidence_score,
                created_at=ensure_utc(row.created_at),
            )
            for row in rows
        ]

    async def fetch_progress_records(self, learner_id: str, limit: int) -> list[ProgressRecord]:
        query = (
            select(ProgressRecordRow)
            .where(ProgressRecordRow.learner_id == learner_id)
            .order_by(ProgressRecordRow.timestamp.desc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            rows = result.scalars().all()

        return [
            ProgressRecord(
                kind=row.kind,
                value=row.value,
                percentage=row.percentage,
                topic=row.topic,
                timestamp=ensure_utc(row.timestamp),
            )
            for row in rows
        ]

    async def fetch_mastery_records(self, learner_id: str) -> list[MasteryRecord]:
        query = select(MasteryRecordRow).where(MasteryRecordRow.learner_id == learner_id)
        async with self._session_factory() as session:
            result = await session.execute(query)
            rows = result.scalars().all()

        return [MasteryRecord(topic=row.topic, mastery_level=row.mastery_level) for row in rows]

    async def fetch_cognitive_profile(self, learner_id: str) -> dict[str, Any] | None:
        async with self._session_factory() as session:
            row = await session.get(CognitiveProfileRow, learner_id)
        return dict(row.profile) if row is not None and row.profile is not None else None

    async def fetch_recent_turns(self, learner_id: str, limit: int) -> list[ConversationTurn]:
        query = (
            select(TutorSessionRow)
            .where(TutorSessionRow.learner_id == learner_id)
            .order_by(TutorSessionRow.created_at.desc())
            .limit(1)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            row = result.scalars().first()

        if row is None or limit <= 0:
            return []

        raw_turns = (row.context_data or {}).get("conversation_history") or []
        return [ConversationTurn.model_validate(turn) for turn in raw_turns[-limit:]]

    # ========== SessionSink ==========

    async def append_session(self, record: SessionRecord) -> None:
        row = TutorSessionRow(
            learner_id=record.learner_id,
            session_kind=record.session_kind.value,
            subject=record.subject,
            message=record.message,
            reply_text=record.reply_text,
            emotion_detected=record.emotion_detected.value,
            emotional_tone=record.emotional_tone.value,
            confidence_score=record.confidence_score,
            teaching_approach=record.teaching_approach.value,
            encouragement_level=record.encouragement_level,
            response_source=record.response_source.value,
            context_data=record.context_data,
            created_at=record.created_at,
        )
        async with self._session_factory() as session:
            session.add(row)

        logger.debug("Session persisted for learner %s", record.learner_id)

    # ========== AuditSink ==========

    async def log_event(
        self,
        kind: str,
        description: str,
        severity: str,
        metadata: dict[str, Any],
    ) -> None:
        row = AuditEventRow(
            kind=kind,
            description=description,
            severity=severity,
            learner_id=metadata.get("learner_id"),
            event_metadata=metadata,
        )
        async with self._session_factory() as session:
            session.add(row)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models for the learner history store.

Tables:
- learners: Identity and demographic fields
- tutor_sessions: Completed tutoring exchanges (request/response pairs)
- progress_records: Lesson completions, quiz scores, ...
- mastery_records: Per-topic mastery levels (0-100)
- cognitive_profiles: Opaque cognitive profile per learner
- audit_events: Audit trail written by the tutoring engine
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from emotutor.utils.datetime import utc_now


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class TimestampMixin:
    """Adds a created_at column."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )


class LearnerRow(Base, TimestampMixin):
    __tablename__ = "learners"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(200))
    age: Mapped[Optional[int]] = mapped_column(Integer)
    experience_level: Mapped[str] = mapped_column(String(50), default="intermediate")
    learning_style: Mapped[str] = mapped_column(String(50), default="visual")
    difficulty_preference: Mapped[str] = mapped_column(String(50), default="medium")


class TutorSessionRow(Base, TimestampMixin):
    """A persisted tutoring exchange.

    context_data holds the caller's context merged with reasoning steps,
    learning insights and the bounded conversation tail.
    """

    __tablename__ = "tutor_sessions"
    __table_args__ = (Index("ix_tutor_sessions_learner_created", "learner_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    learner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    session_kind: Mapped[str] = mapped_column(String(50), nullable=False)
    subject: Mapped[Optional[str]] = mapped_column(String(100))
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reply_text: Mapped[str] = mapped_column(Text, nullable=False)
    emotion_detected: Mapped[Optional[str]] = mapped_column(String(30))
    emotional_tone: Mapped[Optional[str]] = mapped_column(String(50))
    confidence_score: Mapped[Optional[int]] = mapped_column(Integer)
    teaching_approach: Mapped[Optional[str]] = mapped_column(String(50))
    encouragement_level: Mapped[Optional[int]] = mapped_column(Integer)
    response_source: Mapped[Optional[str]] = mapped_column(String(20))
    context_data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)


class ProgressRecordRow(Base):
    __tablename__ = "progress_records"
    __table_args__ = (Index("ix_progress_records_learner_ts", "learner_id", "timestamp"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    learner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[Optional[float]] = mapped_column(Float)
    percentage: Mapped[Optional[float]] = mapped_column(Float)
    topic: Mapped[Optional[str]] = mapped_column(String(200))
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )


class MasteryRecordRow(Base):
    __tablename__ = "mastery_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    learner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    topic: Mapped[str] = mapped_column(String(200), nullable=False)
    mastery_level: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class CognitiveProfileRow(Base):
    __tablename__ = "cognitive_profiles"

    learner_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    profile: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)


class AuditEventRow(Base, TimestampMixin):
    __tablename__ = "audit_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    kind: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False, default="info")
    learner_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    event_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, default=dict)

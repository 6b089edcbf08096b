# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner profile models.

A LearnerProfile is a read-only snapshot assembled per request from the
learner store. The core never mutates it and never caches it across
requests.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from emotutor.core.emotional.constants import EmotionalState
from emotutor.utils.datetime import utc_now


class LearnerIdentity(BaseModel):
    """Identity and demographic fields of a learner.

    Attributes:
        learner_id: Learner identifier.
        display_name: Name shown to tutors.
        age: Learner age if known.
        experience_level: Self-reported experience level.
        learning_style: Preferred learning style.
        difficulty_preference: Preferred difficulty.
    """

    model_config = ConfigDict(frozen=True)

    learner_id: str
    display_name: str | None = None
    age: int | None = None
    experience_level: str = "intermediate"
    learning_style: str = "visual"
    difficulty_preference: str = "medium"


class ProgressRecord(BaseModel):
    """A single progress event (lesson completion, quiz score, ...)."""

    model_config = ConfigDict(frozen=True)

    kind: str
    value: float | None = None
    percentage: float | None = None
    topic: str | None = None
    timestamp: datetime = Field(default_factory=utc_now)


class MasteryRecord(BaseModel):
    """Mastery level (0-100) of a learner on one topic."""

    model_config = ConfigDict(frozen=True)

    topic: str
    mastery_level: float = Field(ge=0, le=100)


class SessionSummary(BaseModel):
    """Summary of a past tutoring exchange, as read back from the store."""

    model_config = ConfigDict(frozen=True)

    session_kind: str
    subject: str | None = None
    emotion_detected: EmotionalState | None = None
    emotional_tone: str | None = None
    teaching_approach: str | None = None
    confidence_score: int | None = None
    created_at: datetime = Field(default_factory=utc_now)


class LearnerProfile(BaseModel):
    """Read-only learner snapshot used to personalize a reply.

    Attributes:
        identity: Identity and demographic fields.
        recent_sessions: Past session summaries, most recent first.
        progress_records: Progress events, most recent first.
        mastery_records: Per-topic mastery levels.
        cognitive_profile: Opaque cognitive-profile record, if any.
    """

    model_config = ConfigDict(frozen=True)

    identity: LearnerIdentity
    recent_sessions: tuple[SessionSummary, ...] = ()
    progress_records: tuple[ProgressRecord, ...] = ()
    mastery_records: tuple[MasteryRecord, ...] = ()
    cognitive_profile: dict[str, Any] | None = None

    @property
    def learner_id(self) -> str:
        """Identifier of the learner this profile describes."""
        return self.identity.learner_id

    def low_mastery_topics(self, threshold: float = 70) -> list[str]:
        """Topics whose mastery level is strictly below the threshold."""
        return [r.topic for r in self.mastery_records if r.mastery_level < threshold]

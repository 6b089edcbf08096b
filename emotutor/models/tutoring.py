# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring request/response schemas.

Wire format is camelCase (``learnerId``, ``replyText``, ...); Python code
uses snake_case attribute names. Requests and responses are immutable once
built.

Example:
    POST /api/v1/tutor/respond
    {
        "learnerId": "learner-42",
        "message": "this is so confusing, I don't understand the formula",
        "sessionKind": "instruction",
        "subject": "mathematics",
        "conversationHistory": [
            {"role": "tutor", "content": "Let's look at slopes.", "timestamp": "2025-01-01T10:00:00Z"}
        ]
    }
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from emotutor.core.emotional.constants import EmotionalState
from emotutor.models.common import (
    EmotionalTone,
    ResponseSource,
    SessionKind,
    Speaker,
    TeachingApproach,
)
from emotutor.models.learner import SessionSummary
from emotutor.utils.datetime import ensure_utc, utc_now


class ConversationTurn(BaseModel):
    """One turn of the conversation.

    Attributes:
        speaker: Who spoke (wire name ``role``).
        text: What was said (wire name ``content``).
        timestamp: When the turn happened (ISO-8601 on the wire).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    speaker: Speaker = Field(alias="role")
    text: str = Field(alias="content")
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class TutorRequest(BaseModel):
    """Incoming tutoring request.

    Attributes:
        learner_id: Learner identifier (required).
        message: The learner's message (required, may be empty).
        session_kind: Activity type of the exchange (required).
        subject: Subject identifier, e.g. "mathematics".
        explicit_emotion: Emotion supplied by the caller; skips classification.
        auxiliary_context: Free-form caller context, persisted with the session.
        conversation_history: Recent turns in chronological order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    learner_id: str = Field(alias="learnerId", min_length=1)
    message: str
    session_kind: SessionKind = Field(alias="sessionKind")
    subject: str | None = None
    explicit_emotion: EmotionalState | None = Field(default=None, alias="detectedEmotion")
    auxiliary_context: dict[str, Any] = Field(default_factory=dict, alias="contextData")
    conversation_history: tuple[ConversationTurn, ...] = Field(
        default=(),
        alias="conversationHistory",
    )

    @field_validator("learner_id")
    @classmethod
    def _learner_id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("learnerId must not be blank")
        return value

    @field_validator("subject")
    @classmethod
    def _normalize_subject(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None

    @field_validator("auxiliary_context", mode="before")
    @classmethod
    def _context_default(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("conversation_history", mode="before")
    @classmethod
    def _history_default(cls, value: Any) -> Any:
        return () if value is None else value

    def history_tail(self, turns: int) -> tuple[ConversationTurn, ...]:
        """Return the most recent turns, in original order."""
        if turns <= 0:
            return ()
        return self.conversation_history[-turns:]


class LearningInsights(BaseModel):
    """Structured learning insights attached to a reply.

    Attributes:
        strengths_identified: What the learner is doing well.
        areas_for_improvement: Where the learner needs work.
        learning_patterns: Short description of observed patterns.
        recommended_focus: What to focus on next.
        signals: Emotion-specific structured detail (difficulty areas,
            confusion sources, learning gaps, readiness flags, ...).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    strengths_identified: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    learning_patterns: str = ""
    recommended_focus: str = ""
    signals: dict[str, Any] = Field(default_factory=dict)


class TutorResponse(BaseModel):
    """Final tutoring response returned to the caller and persisted.

    The field set is identical regardless of which generation path
    produced the reply. ``confidence_score`` is on the 0-100 scale.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    reply_text: str = Field(min_length=1)
    emotional_tone: EmotionalTone
    confidence_score: int = Field(ge=0, le=100)
    teaching_approach: TeachingApproach
    encouragement_level: int = Field(ge=1, le=10)
    follow_up_questions: list[str] = Field(min_length=2, max_length=4)
    reasoning_steps: list[str] = Field(default_factory=list)
    learning_insights: LearningInsights = Field(default_factory=LearningInsights)
    suggested_actions: list[str] = Field(default_factory=list)
    session_metadata: dict[str, Any] = Field(default_factory=dict)


class SessionRecord(BaseModel):
    """A request/response pair as written to the session sink.

    Attributes:
        context_data: Caller context merged with reasoning steps, learning
            insights and the bounded conversation tail.
    """

    model_config = ConfigDict(frozen=True)

    learner_id: str
    session_kind: SessionKind
    subject: str | None = None
    message: str
    reply_text: str
    emotion_detected: EmotionalState
    emotional_tone: EmotionalTone
    confidence_score: int
    teaching_approach: TeachingApproach
    encouragement_level: int
    response_source: ResponseSource
    context_data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)

    def to_summary(self) -> SessionSummary:
        """Project the record onto the summary read back by later requests."""
        return SessionSummary(
            session_kind=self.session_kind.value,
            subject=self.subject,
            emotion_detected=self.emotion_detected,
            emotional_tone=self.emotional_tone.value,
            teaching_approach=self.teaching_approach.value,
            confidence_score=self.confidence_score,
            created_at=self.created_at,
        )

    def conversation_tail(self) -> list[ConversationTurn]:
        """Conversation turns persisted with this session, in original order."""
        raw = self.context_data.get("conversation_history") or []
        return [ConversationTurn.model_validate(turn) for turn in raw]

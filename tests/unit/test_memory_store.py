# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the in-memory learner store."""

from datetime import timedelta

import pytest

from emotutor.core.emotional import EmotionalState
from emotutor.core.tutoring import LearnerStore, fetch_learner_profile
from emotutor.infrastructure.stores import InMemoryLearnerStore
from emotutor.models.common import (
    EmotionalTone,
    ResponseSource,
    SessionKind,
    TeachingApproach,
)
from emotutor.models.learner import LearnerIdentity, MasteryRecord, SessionSummary
from emotutor.models.tutoring import SessionRecord
from emotutor.utils.datetime import utc_now


def make_record(minutes_ago: int, emotion: EmotionalState = EmotionalState.NEUTRAL, turns=()) -> SessionRecord:
    return SessionRecord(
        learner_id="learner-42",
        session_kind=SessionKind.PRACTICE,
        subject="science",
        message="hello",
        reply_text="hi there",
        emotion_detected=emotion,
        emotional_tone=EmotionalTone.FRIENDLY_ADAPTIVE,
        confidence_score=85,
        teaching_approach=TeachingApproach.CONVERSATIONAL_GUIDANCE,
        encouragement_level=5,
        response_source=ResponseSource.FALLBACK,
        context_data={
            "conversation_history": [t.model_dump(mode="json", by_alias=True) for t in turns]
        },
        created_at=utc_now() - timedelta(minutes=minutes_ago),
    )


class TestInMemoryLearnerStore:
    """Tests for InMemoryLearnerStore."""

    def test_implements_ports(self, memory_store) -> None:
        assert isinstance(memory_store, LearnerStore)

    @pytest.mark.asyncio
    async def test_unknown_learner(self, memory_store) -> None:
        """Test an unknown learner reads as empty history."""
        assert await memory_store.fetch_learner("nobody") is None
        assert await memory_store.fetch_recent_sessions("nobody", 25) == []
        assert await memory_store.fetch_recent_turns("nobody", 5) == []
        assert await memory_store.fetch_cognitive_profile("nobody") is None

    @pytest.mark.asyncio
    async def test_sessions_most_recent_first_and_limited(self, memory_store) -> None:
        await memory_store.append_session(make_record(30, EmotionalState.BORED))
        await memory_store.append_session(make_record(10, EmotionalState.EXCITED))
        memory_store.add_session_summary(
            "learner-42",
            SessionSummary(
                session_kind="assessment",
                emotion_detected=EmotionalState.ANXIOUS,
                created_at=utc_now() - timedelta(minutes=20),
            ),
        )

        sessions = await memory_store.fetch_recent_sessions("learner-42", 2)

        assert [s.emotion_detected for s in sessions] == [
            EmotionalState.EXCITED,
            EmotionalState.ANXIOUS,
        ]

    @pytest.mark.asyncio
    async def test_progress_most_recent_first(self, memory_store, make_progress) -> None:
        memory_store.add_progress(
            "learner-42",
            make_progress("quiz_score", value=50, minutes_ago=60),
            make_progress("quiz_score", value=70, minutes_ago=5),
            make_progress("quiz_score", value=60, minutes_ago=30),
        )

        records = await memory_store.fetch_progress_records("learner-42", 2)

        assert [r.value for r in records] == [70, 60]

    @pytest.mark.asyncio
    async def test_recent_turns_from_latest_session(self, memory_store, make_turns) -> None:
        turns = make_turns(4)
        await memory_store.append_session(make_record(5, turns=turns))

        recent = await memory_store.fetch_recent_turns("learner-42", 3)

        assert [t.text for t in recent] == ["turn 1", "turn 2", "turn 3"]
        assert recent[0].speaker.value == "tutor"

    @pytest.mark.asyncio
    async def test_cognitive_profile_is_copied(self, memory_store) -> None:
        memory_store.set_cognitive_profile("learner-42", {"working_memory": "high"})

        profile = await memory_store.fetch_cognitive_profile("learner-42")
        profile["working_memory"] = "low"

        assert (await memory_store.fetch_cognitive_profile("learner-42")) == {
            "working_memory": "high"
        }

    @pytest.mark.asyncio
    async def test_audit_events_recorded(self, memory_store) -> None:
        await memory_store.log_event("ai_interaction", "desc", "info", {"learner_id": "learner-42"})

        [event] = memory_store.audit_events
        assert event.kind == "ai_interaction"
        assert event.metadata == {"learner_id": "learner-42"}


class TestFetchLearnerProfile:
    """Tests for assembling the learner profile."""

    @pytest.mark.asyncio
    async def test_assembles_profile(self, memory_store, make_progress) -> None:
        memory_store.add_learner(LearnerIdentity(learner_id="learner-42", age=12))
        memory_store.add_mastery("learner-42", MasteryRecord(topic="ratios", mastery_level=55))
        memory_store.add_progress("learner-42", make_progress("lesson_completion", percentage=100))
        memory_store.set_cognitive_profile("learner-42", {"attention_span": "short"})

        profile = await fetch_learner_profile(memory_store, "learner-42")

        assert profile.identity.age == 12
        assert profile.low_mastery_topics() == ["ratios"]
        assert len(profile.progress_records) == 1
        assert profile.cognitive_profile == {"attention_span": "short"}

    @pytest.mark.asyncio
    async def test_missing_identity_gets_defaults(self) -> None:
        profile = await fetch_learner_profile(InMemoryLearnerStore(), "new-learner")

        assert profile.learner_id == "new-learner"
        assert profile.identity.learning_style == "visual"
        assert profile.recent_sessions == ()

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across the unit tests:
- Settings isolation
- Learner stores and profiles
- Tutor requests and generator payloads
"""

import json
from collections.abc import Generator
from datetime import timedelta
from typing import Any

import pytest

from emotutor.core.config.settings import TutorSettings, clear_settings_cache
from emotutor.infrastructure.stores import InMemoryLearnerStore
from emotutor.models.learner import LearnerIdentity, LearnerProfile, ProgressRecord
from emotutor.models.tutoring import ConversationTurn, TutorRequest
from emotutor.utils.datetime import utc_now


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Reload settings for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def tutor_settings() -> TutorSettings:
    """Tutor settings with short timeouts for tests."""
    return TutorSettings(
        generation_timeout_seconds=0.2,
        store_timeout_seconds=0.5,
    )


# =============================================================================
# Learner Fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryLearnerStore:
    """Empty in-memory learner store."""
    return InMemoryLearnerStore()


@pytest.fixture
def identity() -> LearnerIdentity:
    return LearnerIdentity(
        learner_id="learner-42",
        display_name="Ada",
        age=15,
        learning_style="visual",
    )


@pytest.fixture
def empty_profile(identity: LearnerIdentity) -> LearnerProfile:
    """Profile of a learner without any history."""
    return LearnerProfile(identity=identity)


def _make_progress(kind: str, value: float | None = None, percentage: float | None = None,
                   minutes_ago: int = 0) -> ProgressRecord:
    """Build a progress record timestamped relative to now."""
    return ProgressRecord(
        kind=kind,
        value=value,
        percentage=percentage,
        timestamp=utc_now() - timedelta(minutes=minutes_ago),
    )


def _make_turns(count: int, start_speaker: str = "learner") -> list[ConversationTurn]:
    """Build alternating conversation turns numbered in chronological order."""
    speakers = ["learner", "tutor"] if start_speaker == "learner" else ["tutor", "learner"]
    base = utc_now() - timedelta(minutes=count)
    return [
        ConversationTurn(
            speaker=speakers[i % 2],
            text=f"turn {i}",
            timestamp=base + timedelta(minutes=i),
        )
        for i in range(count)
    ]


# =============================================================================
# Request Fixtures
# =============================================================================


def _make_request(
    message: str = "Can you help me with fractions",
    session_kind: str = "instruction",
    subject: str | None = "mathematics",
    history: list[ConversationTurn] | None = None,
    **extra: Any,
) -> TutorRequest:
    """Build a TutorRequest from snake_case fields."""
    return TutorRequest(
        learner_id=extra.pop("learner_id", "learner-42"),
        message=message,
        session_kind=session_kind,
        subject=subject,
        conversation_history=tuple(history or ()),
        **extra,
    )


@pytest.fixture
def confused_request() -> TutorRequest:
    return _make_request(
        message="this is so confusing, I don't understand the formula",
        subject="mathematics",
    )


@pytest.fixture
def generated_payload() -> dict[str, Any]:
    """A valid JSON payload as returned by the language model."""
    return {
        "reply_text": "Let's look at the formula one piece at a time.",
        "emotional_tone": "patient_clarifying",
        "confidence_score": 0.87,
        "teaching_approach": "explanatory_questioning",
        "encouragement_level": 6,
        "follow_up_questions": [
            "Which symbol in the formula is unclear?",
            "Can you tell me what the formula is used for?",
            "Would an example help?",
        ],
        "reasoning_steps": ["Learner is confused", "Break formula into parts"],
        "learning_insights": {
            "strengths_identified": ["Asks questions"],
            "areas_for_improvement": ["Algebraic notation"],
            "learning_patterns": "Prefers worked examples",
            "recommended_focus": "Variables in formulas",
        },
        "suggested_actions": ["Rewrite the formula in words"],
    }


@pytest.fixture
def generated_raw(generated_payload: dict[str, Any]) -> str:
    """The valid payload wrapped the way models often return it."""
    return "Here is my reply:\n```json\n" + json.dumps(generated_payload) + "\n```"


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def make_progress():
    """Factory for progress records."""
    return _make_progress


@pytest.fixture
def make_turns():
    """Factory for alternating conversation turns."""
    return _make_turns


@pytest.fixture
def make_request():
    """Factory for tutor requests."""
    return _make_request

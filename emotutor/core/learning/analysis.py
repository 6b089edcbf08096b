# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning pattern analysis.

Aggregates a learner's stored history into a compact behavioral profile
(LearningAnalysis) used to personalize tutor replies.

All comparisons are strictly-greater-than against fixed thresholds. When
history is empty every derived field takes the first (most conservative)
value of its enum, so analysis never fails for a new learner.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

from emotutor.core.emotional.classifier import TurnLike
from emotutor.core.emotional.constants import EmotionalState
from emotutor.models.common import ProgressKind, SessionKind
from emotutor.models.learner import LearnerProfile, ProgressRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LearningVelocity(str, Enum):
    """How fast the learner completes lessons."""

    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"


class PerformanceLevel(str, Enum):
    """Performance bucket derived from the mean quiz score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EngagementLevel(str, Enum):
    """Engagement bucket derived from the number of recent sessions."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LearningThresholds:
    """Bucket boundaries for learning analysis (exclusive lower bounds)."""

    # Completed lessons
    VELOCITY_FAST = 10
    VELOCITY_MODERATE = 5

    # Mean quiz score (0-100)
    PERFORMANCE_HIGH = 80
    PERFORMANCE_MEDIUM = 60

    # Recent session count
    ENGAGEMENT_HIGH = 20
    ENGAGEMENT_MEDIUM = 10

    # A lesson counts as completed at this percentage
    LESSON_COMPLETE_PERCENTAGE = 100


class LearningAnalysis(BaseModel):
    """Derived, per-request learning profile.

    Attributes:
        learning_velocity: Bucket of completed-lesson count.
        performance_level: Bucket of mean quiz score.
        preferred_session_kind: Most frequent kind among recent sessions.
        dominant_emotion: Most frequent detected emotion among recent sessions.
        engagement_level: Bucket of recent session count.
        learning_style: Copied from the learner identity.
        difficulty_preference: Copied from the learner identity.
        completed_lessons: Number of completed lessons.
        average_quiz_score: Mean quiz score, 0.0 without quizzes.
        session_count: Number of recent sessions considered.
        average_tutor_turn_length: Mean character length of tutor turns.
    """

    model_config = ConfigDict(frozen=True)

    learning_velocity: LearningVelocity = LearningVelocity.SLOW
    performance_level: PerformanceLevel = PerformanceLevel.LOW
    preferred_session_kind: SessionKind = SessionKind.INSTRUCTION
    dominant_emotion: EmotionalState = EmotionalState.NEUTRAL
    engagement_level: EngagementLevel = EngagementLevel.LOW
    learning_style: str = "visual"
    difficulty_preference: str = "medium"
    completed_lessons: int = 0
    average_quiz_score: float = 0.0
    session_count: int = 0
    average_tutor_turn_length: float = 0.0


def classify_velocity(completed_lessons: int) -> LearningVelocity:
    """Bucket the completed-lesson count."""
    if completed_lessons > LearningThresholds.VELOCITY_FAST:
        return LearningVelocity.FAST
    if completed_lessons > LearningThresholds.VELOCITY_MODERATE:
        return LearningVelocity.MODERATE
    return LearningVelocity.SLOW


def classify_performance(average_score: float) -> PerformanceLevel:
    """Bucket the mean quiz score."""
    if average_score > LearningThresholds.PERFORMANCE_HIGH:
        return PerformanceLevel.HIGH
    if average_score > LearningThresholds.PERFORMANCE_MEDIUM:
        return PerformanceLevel.MEDIUM
    return PerformanceLevel.LOW


def classify_engagement(session_count: int) -> EngagementLevel:
    """Bucket the recent session count."""
    if session_count > LearningThresholds.ENGAGEMENT_HIGH:
        return EngagementLevel.HIGH
    if session_count > LearningThresholds.ENGAGEMENT_MEDIUM:
        return EngagementLevel.MEDIUM
    return EngagementLevel.LOW


def count_completed_lessons(records: Iterable[ProgressRecord]) -> int:
    return sum(
        1
        for r in records
        if r.kind == ProgressKind.LESSON_COMPLETION.value
        and (r.percentage or 0) >= LearningThresholds.LESSON_COMPLETE_PERCENTAGE
    )


def average_quiz_score(records: Iterable[ProgressRecord]) -> float:
    """Mean quiz score; records without a value count as zero."""
    scores = [r.value or 0.0 for r in records if r.kind == ProgressKind.QUIZ_SCORE.value]
    return sum(scores) / max(len(scores), 1)


def most_frequent(values: Sequence[T], default: T) -> T:
    """Return the mode of values, ordered most recent first.

    Ties resolve to the candidate seen first, i.e. the most recent one.
    """
    if not values:
        return default
    counts: Counter[T] = Counter(values)
    return counts.most_common(1)[0][0]


def _session_kinds(profile: LearnerProfile) -> list[SessionKind]:
    kinds = []
    for session in profile.recent_sessions:
        try:
            kinds.append(SessionKind(session.session_kind))
        except ValueError:
            logger.debug("Ignoring unknown session kind in history: %s", session.session_kind)
    return kinds


def _average_tutor_turn_length(history: Sequence[TurnLike]) -> float:
    lengths = [
        len(turn.text)
        for turn in history
        if getattr(turn.speaker, "value", turn.speaker) == "tutor"
    ]
    if not lengths:
        return 0.0
    return sum(lengths) / len(lengths)


def analyze_learning_patterns(
    profile: LearnerProfile,
    history: Sequence[TurnLike] = (),
) -> LearningAnalysis:
    """Derive a LearningAnalysis from a learner profile.

    Args:
        profile: Read-only learner snapshot (sessions most recent first).
        history: Current conversation turns in chronological order.

    Returns:
        LearningAnalysis with every field defined.
    """
    completed = count_completed_lessons(profile.progress_records)
    quiz_average = average_quiz_score(profile.progress_records)
    session_count = len(profile.recent_sessions)

    # Detected emotions, not reply tones
    emotions = [
        s.emotion_detected for s in profile.recent_sessions if s.emotion_detected is not None
    ]

    analysis = LearningAnalysis(
        learning_velocity=classify_velocity(completed),
        performance_level=classify_performance(quiz_average),
        preferred_session_kind=most_frequent(_session_kinds(profile), SessionKind.INSTRUCTION),
        dominant_emotion=most_frequent(emotions, EmotionalState.NEUTRAL),
        engagement_level=classify_engagement(session_count),
        learning_style=profile.identity.learning_style or "visual",
        difficulty_preference=profile.identity.difficulty_preference or "medium",
        completed_lessons=completed,
        average_quiz_score=quiz_average,
        session_count=session_count,
        average_tutor_turn_length=_average_tutor_turn_length(history),
    )

    logger.debug(
        "Learning analysis for %s: velocity=%s performance=%s engagement=%s",
        profile.learner_id,
        analysis.learning_velocity.value,
        analysis.performance_level.value,
        analysis.engagement_level.value,
    )
    return analysis

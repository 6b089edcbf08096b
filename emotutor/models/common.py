# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Common enums shared by request, profile and response models."""

from enum import Enum


class Speaker(str, Enum):
    """Who produced a conversation turn."""

    LEARNER = "learner"
    TUTOR = "tutor"


class SessionKind(str, Enum):
    """Pedagogical activity type of the current exchange.

    Declaration order matters: INSTRUCTION is the default used when a
    learner has no session history.
    """

    INSTRUCTION = "instruction"
    DRILL = "drill"
    DISCUSSION = "discussion"
    REVIEW = "review"
    ASSESSMENT = "assessment"
    EXPLORATION = "exploration"
    PRACTICE = "practice"


class EmotionalTone(str, Enum):
    """Tone of a tutor reply."""

    EMPATHETIC = "empathetic"
    ENTHUSIASTIC = "enthusiastic"
    PATIENT_CLARIFYING = "patient_clarifying"
    ENGAGING_CHALLENGING = "engaging_challenging"
    CALMING_REASSURING = "calming_reassuring"
    ENCOURAGING_CHALLENGING = "encouraging_challenging"
    FRIENDLY_ADAPTIVE = "friendly_adaptive"


class TeachingApproach(str, Enum):
    """Pedagogical strategy tag attached to a reply."""

    SUPPORTIVE_BREAKDOWN = "supportive_breakdown"
    CHALLENGING_EXPANSION = "challenging_expansion"
    EXPLANATORY_QUESTIONING = "explanatory_questioning"
    INTERACTIVE_ACCELERATION = "interactive_acceleration"
    SUPPORTIVE_CONFIDENCE_BUILDING = "supportive_confidence_building"
    ADVANCED_APPLICATION = "advanced_application"
    CONVERSATIONAL_GUIDANCE = "conversational_guidance"


class ResponseSource(str, Enum):
    """Which generation path produced a reply."""

    PRIMARY = "primary"
    FALLBACK = "fallback"


class ProgressKind(str, Enum):
    """Kind of a learner progress record."""

    LESSON_COMPLETION = "lesson_completion"
    QUIZ_SCORE = "quiz_score"
    PRACTICE_SESSION = "practice_session"
    ASSIGNMENT = "assignment"

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models shared across the engine, stores and API.

Modules:
    common: Enums (session kinds, tones, teaching approaches, ...).
    learner: Learner profile snapshot and its records.
    tutoring: Request, response and persisted session schemas.
"""

from emotutor.models.common import (
    EmotionalTone,
    ProgressKind,
    ResponseSource,
    SessionKind,
    Speaker,
    TeachingApproach,
)
from emotutor.models.learner import (
    LearnerIdentity,
    LearnerProfile,
    MasteryRecord,
    ProgressRecord,
    SessionSummary,
)
from emotutor.models.tutoring import (
    ConversationTurn,
    LearningInsights,
    SessionRecord,
    TutorRequest,
    TutorResponse,
)

__all__ = [
    "ConversationTurn",
    "EmotionalTone",
    "LearnerIdentity",
    "LearnerProfile",
    "LearningInsights",
    "MasteryRecord",
    "ProgressKind",
    "ProgressRecord",
    "ResponseSource",
    "SessionKind",
    "SessionRecord",
    "SessionSummary",
    "Speaker",
    "TeachingApproach",
    "TutorRequest",
    "TutorResponse",
]

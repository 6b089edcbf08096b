# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Emotion classification for Emotutor.

Key Components:
- EmotionalState: Closed set of learner emotional states
- detect_emotion: Rule-based classifier over message and tutor history

Example usage:

    from emotutor.core.emotional import STICKY_STATES, detect_emotion

    emotion = detect_emotion("I'm stuck on this proof", history)
    if emotion in STICKY_STATES:
        # Tutor cautiously
        pass
"""

from emotutor.core.emotional.classifier import (
    detect_emotion,
    extract_emotion_from_reply,
    match_triggers,
)
from emotutor.core.emotional.constants import (
    EMOTION_TRIGGERS,
    STICKY_STATES,
    TUTOR_REPLY_MARKERS,
    EmotionalState,
)

__all__ = [
    # Classification
    "detect_emotion",
    "extract_emotion_from_reply",
    "match_triggers",
    # Constants and enums
    "EmotionalState",
    "EMOTION_TRIGGERS",
    "TUTOR_REPLY_MARKERS",
    "STICKY_STATES",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Constants for emotion classification.

This module defines the closed set of emotional states recognised by the
tutoring engine, the lowercase trigger substrings used to detect them in
learner text, and the markers used to read an emotion back out of a
previous tutor reply.

Declaration order of EmotionalState is the classification priority:
when a message matches triggers of several states, the earliest state wins.
"""

from enum import Enum


class EmotionalState(str, Enum):
    """Possible emotional states for a learner.

    States are detected from the learner's message (or supplied by the
    caller) and drive the tone, approach and templates of the reply.
    """

    FRUSTRATED = "frustrated"  # Struggling, giving up signs
    EXCITED = "excited"  # High engagement, discovery moments
    CONFUSED = "confused"  # Not understanding, needs clarification
    BORED = "bored"  # Disengaged, material too easy
    ANXIOUS = "anxious"  # Worried about performance
    CONFIDENT = "confident"  # Feeling capable, high self-efficacy
    NEUTRAL = "neutral"  # Baseline state


# Trigger substrings matched against the lowercased learner message.
# Iteration order is the classification priority.
EMOTION_TRIGGERS: dict[EmotionalState, tuple[str, ...]] = {
    EmotionalState.FRUSTRATED: (
        "difficult", "hard", "stuck", "help", "impossible", "can't",
        "won't work", "broken", "wrong", "error", "frustrat", "annoying",
        "ridiculous", "stupid", "give up",
    ),
    EmotionalState.EXCITED: (
        "great", "awesome", "amazing", "love", "excited", "wow", "fantastic",
        "brilliant", "perfect", "excellent", "incredible", "outstanding",
        "thrilled", "ecstatic", "phenomenal",
    ),
    EmotionalState.CONFUSED: (
        "?", "what", "how", "why", "explain", "clarify", "unclear",
        "confused", "confusing", "lost", "don't understand", "don't get it",
        "not sure", "maybe", "think", "wonder", "curious",
    ),
    EmotionalState.BORED: (
        "boring", "bored", "easy", "simple", "already know", "too slow",
        "repetitive", "monotonous", "tedious", "dull", "uninteresting", "basic",
    ),
    EmotionalState.ANXIOUS: (
        "worried", "nervous", "anxious", "scared", "afraid", "concerned",
        "stressed", "overwhelmed", "panic", "fear", "doubt",
    ),
    EmotionalState.CONFIDENT: (
        "sure", "confident", "know", "understand", "got it", "clear",
        "obvious", "definitely", "certainly",
    ),
}

# Markers read from previous tutor replies, checked in this order.
TUTOR_REPLY_MARKERS: dict[EmotionalState, tuple[str, ...]] = {
    EmotionalState.FRUSTRATED: ("frustrated", "difficult"),
    EmotionalState.EXCITED: ("excited", "great"),
    EmotionalState.CONFUSED: ("confused", "unclear"),
    EmotionalState.BORED: ("boring", "easy"),
    EmotionalState.ANXIOUS: ("worried", "anxious"),
    EmotionalState.CONFIDENT: ("confident", "sure"),
}

# Distress states carried forward from tutor history until a countersignal.
STICKY_STATES: frozenset[EmotionalState] = frozenset({
    EmotionalState.FRUSTRATED,
    EmotionalState.CONFUSED,
    EmotionalState.ANXIOUS,
})

DEFAULT_HISTORY_TURNS = 3

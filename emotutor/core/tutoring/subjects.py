# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Subject context tables.

Static per-subject phrasing used to flavor fallback replies, plus the
subject-scoped keywords used to spot difficulty areas in a message.
Unknown or missing subjects resolve to the "default" entry.
"""

from emotutor.core.emotional.constants import EmotionalState

DEFAULT_SUBJECT = "default"

# One short sentence per emotion and subject.
SUBJECT_CONTEXTS: dict[str, dict[EmotionalState, str]] = {
    "mathematics": {
        EmotionalState.FRUSTRATED: (
            "Math can be challenging, but every concept builds on previous ones. "
            "Let's find the foundation you need."
        ),
        EmotionalState.EXCITED: (
            "Math is beautiful when you see the patterns! "
            "Let's explore some fascinating applications."
        ),
        EmotionalState.CONFUSED: (
            "Math rewards careful step-by-step thinking. Let's work through this methodically."
        ),
        EmotionalState.BORED: (
            "Let's tackle some advanced mathematical ideas that will really stretch your thinking!"
        ),
        EmotionalState.ANXIOUS: (
            "Math anxiety is common, and we'll work through it together at your own pace."
        ),
        EmotionalState.CONFIDENT: (
            "Your mathematical confidence is great! Let's explore some advanced applications."
        ),
        EmotionalState.NEUTRAL: (
            "Math is a powerful tool for understanding the world. "
            "Let's find what interests you most."
        ),
    },
    "programming": {
        EmotionalState.FRUSTRATED: (
            "Coding can be frustrating, but every bug you fix makes you a better programmer."
        ),
        EmotionalState.EXCITED: (
            "Programming is like digital magic! Let's build something amazing together."
        ),
        EmotionalState.CONFUSED: (
            "Programming is logical thinking written down. Let's break the ideas down step by step."
        ),
        EmotionalState.BORED: (
            "Let's work on some complex algorithms and data structures that will challenge you!"
        ),
        EmotionalState.ANXIOUS: (
            "Programming can feel overwhelming, so we'll start with the basics and build up."
        ),
        EmotionalState.CONFIDENT: (
            "Your programming confidence is excellent! Let's tackle some advanced projects."
        ),
        EmotionalState.NEUTRAL: (
            "Programming opens up endless possibilities. Let's find what excites you most."
        ),
    },
    "science": {
        EmotionalState.FRUSTRATED: (
            "Science takes patience and curiosity. Let's explore the concepts systematically."
        ),
        EmotionalState.EXCITED: (
            "Science is about discovery! Let's explore some fascinating phenomena together."
        ),
        EmotionalState.CONFUSED: (
            "Scientific thinking takes practice. Let's work through the concepts methodically."
        ),
        EmotionalState.BORED: (
            "Let's dive into some cutting-edge research and advanced scientific ideas!"
        ),
        EmotionalState.ANXIOUS: (
            "Science can seem complex, but we'll start with the fundamentals and build up."
        ),
        EmotionalState.CONFIDENT: (
            "Your scientific confidence is great! Let's explore some advanced applications."
        ),
        EmotionalState.NEUTRAL: (
            "Science helps us understand the world around us. "
            "Let's find what fascinates you most."
        ),
    },
    DEFAULT_SUBJECT: {
        EmotionalState.FRUSTRATED: (
            "Learning can be challenging, but every step forward is progress. "
            "Let's work through this together."
        ),
        EmotionalState.EXCITED: (
            "Your enthusiasm is wonderful! Let's channel that energy into great learning."
        ),
        EmotionalState.CONFUSED: (
            "Confusion is part of learning. Let's clarify the concepts step by step."
        ),
        EmotionalState.BORED: (
            "Let's find something more challenging and engaging for you to work on!"
        ),
        EmotionalState.ANXIOUS: (
            "It's okay to feel anxious about learning. We'll take this at your own pace."
        ),
        EmotionalState.CONFIDENT: (
            "Your confidence is inspiring! Let's tackle some advanced challenges together."
        ),
        EmotionalState.NEUTRAL: (
            "Learning is a journey, and I'm here to help you find what works best for you."
        ),
    },
}

# Keywords that point at the part of a subject the learner struggles with.
DIFFICULTY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "mathematics": ("equation", "formula", "calculation", "problem", "solve"),
    "programming": ("code", "function", "variable", "error", "debug"),
    "science": ("concept", "theory", "experiment", "hypothesis", "analysis"),
    DEFAULT_SUBJECT: ("understand", "learn", "know", "figure out", "get"),
}


def resolve_subject_key(subject: str | None) -> str:
    """Map a subject identifier onto a known table key."""
    if not subject:
        return DEFAULT_SUBJECT
    key = subject.strip().lower()
    return key if key in SUBJECT_CONTEXTS else DEFAULT_SUBJECT


def resolve_subject_context(subject: str | None) -> dict[EmotionalState, str]:
    """Return the per-emotion phrases for a subject.

    Args:
        subject: Subject identifier, e.g. "mathematics". May be None.

    Returns:
        Mapping of every EmotionalState to one phrase.
    """
    return SUBJECT_CONTEXTS[resolve_subject_key(subject)]


def subject_phrase(subject: str | None, emotion: EmotionalState) -> str:
    """Return the phrase for one subject and emotion."""
    return resolve_subject_context(subject)[emotion]


def difficulty_keywords(subject: str | None) -> tuple[str, ...]:
    """Return the difficulty keywords scoped to a subject."""
    return DIFFICULTY_KEYWORDS[resolve_subject_key(subject)]

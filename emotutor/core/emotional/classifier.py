# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rule-based emotion classification.

Maps a learner message and the recent conversation to exactly one
EmotionalState. Classification is a pure function: it performs no I/O,
never raises for well-typed input and always returns a defined label.

Algorithm:
1. Scan the lowercased message for trigger substrings, in priority order.
2. Otherwise read the emotion the tutor's last few replies were addressing;
   if the most recent one is a distress state, keep it.
3. Otherwise the learner is neutral.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from emotutor.core.emotional.constants import (
    DEFAULT_HISTORY_TURNS,
    EMOTION_TRIGGERS,
    STICKY_STATES,
    TUTOR_REPLY_MARKERS,
    EmotionalState,
)

logger = logging.getLogger(__name__)

TUTOR_SPEAKER = "tutor"


class TurnLike(Protocol):
    """Minimal view of a conversation turn needed for classification."""

    @property
    def speaker(self) -> str: ...

    @property
    def text(self) -> str: ...


def match_triggers(text: str) -> list[EmotionalState]:
    """Return every state whose triggers occur in the text, in priority order.

    Args:
        text: Raw learner text.

    Returns:
        Matching states, highest priority first. Empty if none match.
    """
    lowered = text.lower()
    return [
        state
        for state, triggers in EMOTION_TRIGGERS.items()
        if any(trigger in lowered for trigger in triggers)
    ]


def extract_emotion_from_reply(reply: str) -> EmotionalState | None:
    """Read the emotion a tutor reply was addressing.

    Args:
        reply: Text of a previous tutor turn.

    Returns:
        The first state whose marker occurs in the reply, or None.
    """
    lowered = reply.lower()
    for state, markers in TUTOR_REPLY_MARKERS.items():
        if any(marker in lowered for marker in markers):
            return state
    return None


def detect_emotion(
    message: str,
    history: Sequence[TurnLike] = (),
    history_turns: int = DEFAULT_HISTORY_TURNS,
) -> EmotionalState:
    """Classify the learner's emotional state.

    Args:
        message: The learner's current message.
        history: Conversation turns in chronological order (oldest first).
        history_turns: How many of the latest tutor turns to inspect.

    Returns:
        The detected EmotionalState. NEUTRAL for an empty message with
        no distress carried over from the tutor's recent replies.
    """
    if message:
        matches = match_triggers(message)
        if matches:
            return matches[0]

    if history_turns <= 0:
        return EmotionalState.NEUTRAL

    tutor_turns = [turn for turn in history if _speaker_value(turn) == TUTOR_SPEAKER]
    recent = tutor_turns[-history_turns:]

    # Most recent first
    for turn in reversed(recent):
        carried = extract_emotion_from_reply(turn.text)
        if carried is None:
            continue
        if carried in STICKY_STATES:
            logger.debug("Carrying forward emotional state from tutor history: %s", carried.value)
            return carried
        break

    return EmotionalState.NEUTRAL


def _speaker_value(turn: TurnLike) -> str:
    speaker = turn.speaker
    return getattr(speaker, "value", speaker)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prompt construction and payload parsing for the primary generation path.

TutorPromptBuilder turns the learner context into a PromptSpec asking for
a JSON reply. parse_tutor_payload validates the raw model output into a
GeneratedTutorReply; anything it cannot validate raises ResponseParseError
and the orchestrator falls back to the deterministic generator.
"""

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from emotutor.core.emotional.constants import EmotionalState
from emotutor.core.intelligence.llm.client import Message, PromptSpec
from emotutor.core.learning.analysis import LearningAnalysis
from emotutor.models.common import EmotionalTone, SessionKind, Speaker, TeachingApproach
from emotutor.models.learner import LearnerProfile
from emotutor.models.tutoring import ConversationTurn, LearningInsights

logger = logging.getLogger(__name__)

MIN_FOLLOW_UPS = 2
MAX_FOLLOW_UPS = 4

_JSON_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

_INSIGHT_FIELDS = frozenset(LearningInsights.model_fields) | frozenset(
    field.alias for field in LearningInsights.model_fields.values() if field.alias
)


class ResponseParseError(Exception):
    """Raised when model output is not a valid tutor payload.

    Attributes:
        message: Error description.
        raw: Raw model output (truncated).
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        raw: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.raw = raw[:200] if raw else raw
        self.original_error = original_error
        super().__init__(self.message)


class GeneratedTutorReply(BaseModel):
    """Validated payload returned by the generation capability.

    ``confidence_score`` is kept on whatever scale the model used; the
    orchestrator normalizes it.
    """

    reply_text: str = Field(
        min_length=1,
        validation_alias=AliasChoices("reply_text", "replyText", "ai_response"),
    )
    emotional_tone: EmotionalTone
    confidence_score: float = Field(ge=0)
    teaching_approach: TeachingApproach
    encouragement_level: int
    follow_up_questions: list[str]
    reasoning_steps: list[str] = Field(default_factory=list)
    learning_insights: LearningInsights = Field(default_factory=LearningInsights)
    suggested_actions: list[str] = Field(default_factory=list)

    @field_validator("reply_text")
    @classmethod
    def _reply_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("reply_text must not be blank")
        return value

    @field_validator("encouragement_level", mode="before")
    @classmethod
    def _clamp_encouragement(cls, value: Any) -> int:
        return max(1, min(10, int(round(float(value)))))

    @field_validator("follow_up_questions")
    @classmethod
    def _bound_follow_ups(cls, value: list[str]) -> list[str]:
        questions = [q.strip() for q in value if q and q.strip()]
        if len(questions) < MIN_FOLLOW_UPS:
            raise ValueError(f"at least {MIN_FOLLOW_UPS} follow-up questions required")
        return questions[:MAX_FOLLOW_UPS]

    @field_validator("learning_insights", mode="before")
    @classmethod
    def _collect_extra_insights(cls, value: Any) -> Any:
        # Unknown insight keys are kept under signals
        if not isinstance(value, dict):
            return value
        known = {k: v for k, v in value.items() if k in _INSIGHT_FIELDS}
        extra = {k: v for k, v in value.items() if k not in _INSIGHT_FIELDS}
        if extra:
            known["signals"] = {**extra, **(known.get("signals") or {})}
        return known


def extract_json_object(raw: str) -> dict[str, Any]:
    """Extract a JSON object from model output.

    Accepts fenced ```json blocks and surrounding prose.

    Raises:
        ResponseParseError: If no JSON object can be decoded.
    """
    text = raw.strip()

    match = _JSON_BLOCK_PATTERN.search(text)
    if match:
        text = match.group(1).strip()

    match = _JSON_OBJECT_PATTERN.search(text)
    if match:
        text = match.group(0)

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(
            f"Failed to parse JSON from response: {e}", raw=raw, original_error=e
        ) from e

    if not isinstance(payload, dict):
        raise ResponseParseError("Response JSON is not an object", raw=raw)
    return payload


def parse_tutor_payload(raw: str) -> GeneratedTutorReply:
    """Parse and validate raw model output.

    Args:
        raw: Text returned by the generation capability.

    Returns:
        GeneratedTutorReply.

    Raises:
        ResponseParseError: If the output is not JSON or misses required
            fields or uses values outside the canonical enums.
    """
    payload = extract_json_object(raw)
    try:
        return GeneratedTutorReply.model_validate(payload)
    except (ValidationError, ValueError, TypeError) as e:
        raise ResponseParseError(
            f"Response payload failed validation: {e}", raw=raw, original_error=e
        ) from e


def _values(enum_cls: type) -> str:
    return "|".join(member.value for member in enum_cls)


class TutorPromptBuilder:
    """Builds the PromptSpec for the primary generation path.

    Attributes:
        model: Model in LiteLLM format, None for the client default.
        temperature: Sampling temperature.
        max_tokens: Upper bound on generated tokens.
        history_turns: Conversation turns embedded in the prompt.
    """

    def __init__(
        self,
        model: str | None = None,
        temperature: float = 0.8,
        max_tokens: int = 2000,
        history_turns: int = 3,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.history_turns = history_turns

    def build(
        self,
        message: str,
        emotion: EmotionalState,
        session_kind: SessionKind,
        subject: str | None,
        analysis: LearningAnalysis,
        profile: LearnerProfile,
        history: Sequence[ConversationTurn] = (),
    ) -> PromptSpec:
        """Compose the prompt for one tutoring request."""
        tail = list(history)[-self.history_turns:] if self.history_turns > 0 else []

        return PromptSpec(
            system_instruction=self._system_instruction(
                emotion, session_kind, subject, analysis, profile
            ),
            user_message=self._user_message(message),
            conversation_tail=[self._to_message(turn) for turn in tail],
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    def _to_message(self, turn: ConversationTurn) -> Message:
        role = "assistant" if turn.speaker is Speaker.TUTOR else "user"
        return Message(role=role, content=turn.text)

    def _user_message(self, message: str) -> str:
        text = message.strip() or "(the learner sent an empty message)"
        return f'Learner message: "{text}"\n\nRespond with the JSON object only.'

    def _system_instruction(
        self,
        emotion: EmotionalState,
        session_kind: SessionKind,
        subject: str | None,
        analysis: LearningAnalysis,
        profile: LearnerProfile,
    ) -> str:
        identity = profile.identity
        gaps = ", ".join(profile.low_mastery_topics()) or "none recorded"

        return f"""You are an emotionally intelligent tutor. You adapt your teaching to the learner's emotional state, learning style and history. Be supportive, clear and encouraging.

Learner profile:
- Age: {identity.age if identity.age is not None else "not specified"}
- Learning style: {analysis.learning_style}
- Experience level: {identity.experience_level}
- Difficulty preference: {analysis.difficulty_preference}
- Detected emotion: {emotion.value}
- Session kind: {session_kind.value}
- Subject: {subject or "general"}
- Performance level: {analysis.performance_level.value}
- Learning velocity: {analysis.learning_velocity.value}
- Engagement level: {analysis.engagement_level.value}
- Dominant emotion in recent sessions: {analysis.dominant_emotion.value}
- Recent sessions: {analysis.session_count}
- Low-mastery topics: {gaps}

Reply with a single JSON object with exactly these fields:
{{
  "reply_text": "your reply to the learner",
  "emotional_tone": "{_values(EmotionalTone)}",
  "confidence_score": 0.85,
  "teaching_approach": "{_values(TeachingApproach)}",
  "encouragement_level": 7,
  "follow_up_questions": ["2 to 4 questions"],
  "reasoning_steps": ["short steps explaining your approach"],
  "learning_insights": {{
    "strengths_identified": ["..."],
    "areas_for_improvement": ["..."],
    "learning_patterns": "...",
    "recommended_focus": "..."
  }},
  "suggested_actions": ["..."]
}}

confidence_score is between 0 and 1. encouragement_level is between 1 and 10. Use only the listed values for emotional_tone and teaching_approach."""

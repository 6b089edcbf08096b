# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Deterministic fallback response generator.

Builds a complete TutorResponse from static tables when the generation
capability cannot be used. Nothing here performs I/O, so a failure in
this module is a programming defect rather than a runtime condition.

Each emotion owns:
- a tone/approach/confidence/encouragement row (EMOTION_RESPONSE_PROFILES)
- a reply template that interpolates the subject phrase and an
  encouragement phrase chosen by performance level
- a fixed list of follow-up questions and suggested actions
- an insights builder backed by the text-scan helpers below
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import assert_never

from emotutor.core.emotional.constants import EmotionalState
from emotutor.core.learning.analysis import LearningAnalysis, PerformanceLevel
from emotutor.core.tutoring.subjects import difficulty_keywords, subject_phrase
from emotutor.models.common import EmotionalTone, SessionKind, TeachingApproach
from emotutor.models.learner import LearnerProfile
from emotutor.models.tutoring import LearningInsights, TutorResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmotionResponseProfile:
    """Fixed reply parameters for one emotional state."""

    tone: EmotionalTone
    approach: TeachingApproach
    confidence: int
    encouragement: int


EMOTION_RESPONSE_PROFILES: dict[EmotionalState, EmotionResponseProfile] = {
    EmotionalState.FRUSTRATED: EmotionResponseProfile(
        EmotionalTone.EMPATHETIC, TeachingApproach.SUPPORTIVE_BREAKDOWN, 90, 8
    ),
    EmotionalState.EXCITED: EmotionResponseProfile(
        EmotionalTone.ENTHUSIASTIC, TeachingApproach.CHALLENGING_EXPANSION, 92, 7
    ),
    EmotionalState.CONFUSED: EmotionResponseProfile(
        EmotionalTone.PATIENT_CLARIFYING, TeachingApproach.EXPLANATORY_QUESTIONING, 88, 6
    ),
    EmotionalState.BORED: EmotionResponseProfile(
        EmotionalTone.ENGAGING_CHALLENGING, TeachingApproach.INTERACTIVE_ACCELERATION, 87, 6
    ),
    EmotionalState.ANXIOUS: EmotionResponseProfile(
        EmotionalTone.CALMING_REASSURING, TeachingApproach.SUPPORTIVE_CONFIDENCE_BUILDING, 89, 9
    ),
    EmotionalState.CONFIDENT: EmotionResponseProfile(
        EmotionalTone.ENCOURAGING_CHALLENGING, TeachingApproach.ADVANCED_APPLICATION, 94, 6
    ),
    EmotionalState.NEUTRAL: EmotionResponseProfile(
        EmotionalTone.FRIENDLY_ADAPTIVE, TeachingApproach.CONVERSATIONAL_GUIDANCE, 85, 5
    ),
}

ENCOURAGEMENT_PHRASES: dict[PerformanceLevel, str] = {
    PerformanceLevel.HIGH: (
        "Your track record shows you're capable of mastering challenging concepts."
    ),
    PerformanceLevel.MEDIUM: (
        "You've shown steady progress and have the foundation to succeed here."
    ),
    PerformanceLevel.LOW: (
        "Every expert was once a beginner, and you're taking the right steps forward."
    ),
}

FOLLOW_UP_QUESTIONS: dict[EmotionalState, tuple[str, ...]] = {
    EmotionalState.FRUSTRATED: (
        "What specific part of this concept is causing the most difficulty?",
        "Would you like me to break this down into even smaller steps?",
        "Should we try a completely different approach to explain this?",
        "What's your current understanding of the basics here?",
    ),
    EmotionalState.EXCITED: (
        "What aspect of this topic excites you most?",
        "Would you like to explore some advanced applications?",
        "How do you see this connecting to your broader learning goals?",
        "What would you like to build or create with this knowledge?",
    ),
    EmotionalState.CONFUSED: (
        "What's your current understanding of this concept?",
        "Which part of my explanation needs more clarity?",
        "Would a visual diagram help illustrate this better?",
        "Can you tell me what you think the main point is?",
    ),
    EmotionalState.BORED: (
        "What level of challenge would be more engaging for you?",
        "Would you like to explore real-world applications of this?",
        "What kind of projects or problems interest you most?",
        "Should we dive into some advanced concepts?",
    ),
    EmotionalState.ANXIOUS: (
        "What specifically is making you feel anxious about this?",
        "What would help you feel more confident?",
        "Would breaking this into smaller steps help?",
        "What support do you need to feel comfortable moving on?",
    ),
    EmotionalState.CONFIDENT: (
        "How would you apply this knowledge in a real-world scenario?",
        "What advanced concepts would you like to explore next?",
        "Would you like to help others understand this topic?",
        "What challenges or projects interest you most?",
    ),
    EmotionalState.NEUTRAL: (
        "What would you like to explore or learn about?",
        "How can I help you reach your learning goals?",
        "What topics or concepts interest you most?",
        "What's your preferred way of learning new things?",
    ),
}

SUGGESTED_ACTIONS: dict[EmotionalState, tuple[str, ...]] = {
    EmotionalState.FRUSTRATED: (
        "Review fundamental concepts",
        "Practice with simpler examples",
        "Take a short break and return fresh",
        "Try explaining the concept back to me",
    ),
    EmotionalState.EXCITED: (
        "Explore advanced concepts",
        "Work on a challenging project",
        "Teach others what you've learned",
        "Connect with like-minded learners",
    ),
    EmotionalState.CONFUSED: (
        "Ask specific questions about unclear parts",
        "Request visual aids or examples",
        "Try explaining it back in your own words",
        "Take notes on key concepts",
    ),
    EmotionalState.BORED: (
        "Try advanced problems",
        "Explore practical applications",
        "Work on a complex project",
        "Mentor other learners",
    ),
    EmotionalState.ANXIOUS: (
        "Start with easier concepts",
        "Practice in a low-pressure environment",
        "Set small, achievable goals",
        "Take breaks when needed",
    ),
    EmotionalState.CONFIDENT: (
        "Explore advanced applications",
        "Mentor other learners",
        "Work on complex projects",
        "Teach others what you know",
    ),
    EmotionalState.NEUTRAL: (
        "Explore different learning approaches",
        "Set specific learning goals",
        "Try interactive exercises",
        "Connect with the learning community",
    ),
}

CONFUSION_INDICATORS: tuple[str, ...] = (
    "unclear", "confusing", "don't get", "not sure", "maybe", "think",
    "wonder", "curious", "explain", "clarify", "what", "how", "why",
)

ANXIETY_INDICATORS: tuple[str, ...] = (
    "worried", "nervous", "anxious", "scared", "afraid", "concerned",
    "stressed", "overwhelmed", "panic", "fear", "doubt", "can't do",
    "too hard", "impossible", "never understand",
)

MASTERY_GAP_THRESHOLD = 70
CONFIDENCE_ADJUSTMENT = 5
CONFIDENCE_CEILING = 100
CONFIDENCE_FLOOR = 70
REASONING_EXCERPT_CHARS = 50


# ========== Text-scan helpers ==========


def _scan(text: str, indicators: Sequence[str]) -> list[str]:
    lowered = text.lower()
    return [indicator for indicator in indicators if indicator in lowered]


def identify_difficulty_areas(message: str, subject: str | None) -> list[str]:
    """Subject-scoped keywords found in the message."""
    return _scan(message, difficulty_keywords(subject))


def identify_confusion_sources(message: str) -> list[str]:
    """Confusion indicators found in the message."""
    return _scan(message, CONFUSION_INDICATORS)


def identify_anxiety_sources(message: str) -> list[str]:
    """Anxiety indicators found in the message."""
    return _scan(message, ANXIETY_INDICATORS)


def detect_learning_gaps(profile: LearnerProfile) -> list[str]:
    """Topics with mastery below the gap threshold."""
    return profile.low_mastery_topics(MASTERY_GAP_THRESHOLD)


def adjust_confidence(base: int, performance: PerformanceLevel) -> int:
    """Apply the performance adjustment to a base confidence score.

    High performance adds 5 (capped at 100), low performance subtracts 5
    (floored at 70), medium leaves the score unchanged.
    """
    match performance:
        case PerformanceLevel.HIGH:
            return min(base + CONFIDENCE_ADJUSTMENT, CONFIDENCE_CEILING)
        case PerformanceLevel.LOW:
            return max(base - CONFIDENCE_ADJUSTMENT, CONFIDENCE_FLOOR)
        case PerformanceLevel.MEDIUM:
            return base
        case _:
            assert_never(performance)


def build_reasoning_steps(
    message: str,
    emotion: EmotionalState,
    subject: str | None,
    analysis: LearningAnalysis,
    history_length: int,
) -> list[str]:
    """Short trace of how the reply was put together."""
    detection_confidence = "medium" if emotion is EmotionalState.NEUTRAL else "high"
    approach = EMOTION_RESPONSE_PROFILES[emotion].approach
    return [
        f'Analyzed learner input: "{message[:REASONING_EXCERPT_CHARS]}..."',
        f"Detected emotion: {emotion.value} (confidence: {detection_confidence})",
        f"Identified learning context: {subject or 'general'} session",
        (
            f"Assessed learner profile: {analysis.learning_style} learner, "
            f"{analysis.performance_level.value} performance"
        ),
        f"Considered conversation history: {history_length} previous exchanges",
        f"Applied teaching strategy: {approach.value}",
    ]


# ========== Reply templates ==========


def _frustrated_reply(phrase: str, encouragement: str) -> str:
    return (
        "I can absolutely understand your frustration, and what you're feeling is "
        f"completely normal when tackling challenging concepts. {encouragement}\n\n"
        f"Let's take a step back and approach this systematically. {phrase}\n\n"
        "Here's what I suggest we do:\n"
        "1. First, let's pin down exactly where things stop making sense\n"
        "2. Then, we'll break it into the smallest possible pieces\n"
        "3. Finally, we'll build your understanding back up step by step\n\n"
        "Every breakthrough comes after moments of struggle, and you're not alone in this. "
        "What specific part is causing the most difficulty right now?"
    )


def _excited_reply(phrase: str, encouragement: str) -> str:
    return (
        "I love your enthusiasm! Your excitement shows you're truly engaged with "
        f"the material. {phrase}\n\n"
        f"{encouragement} Let's channel that energy into something great.\n\n"
        "Here are some directions we could explore:\n"
        "• Advanced applications and real-world implementations\n"
        "• Recent developments in this field\n"
        "• Creative projects that showcase your understanding\n"
        "• Connections to other fascinating topics\n\n"
        "Which part of this topic is sparking your curiosity the most?"
    )


def _confused_reply(phrase: str, encouragement: str) -> str:
    return (
        "It's wonderful that you're asking questions, because that's exactly how deep "
        f"learning happens. Confusion is often the first step toward real understanding. {phrase}\n\n"
        f"{encouragement} Let me help clarify this, starting from the fundamentals.\n\n"
        "Here's my approach:\n"
        "1. First, let's establish what you already know\n"
        "2. Then, I'll explain the core idea in simple terms\n"
        "3. We'll work through examples together\n"
        "4. Finally, you can try explaining it back to me\n\n"
        "What's your current understanding of the basic concepts here?"
    )


def _bored_reply(phrase: str, encouragement: str) -> str:
    return (
        "It sounds like you're ready for something more challenging! Feeling bored is "
        f"often a sign you've mastered the basics and are ready to level up. {phrase}\n\n"
        f"{encouragement} Let's make this more interesting:\n"
        "• Advanced problem-solving scenarios\n"
        "• Real-world applications and case studies\n"
        "• Creative projects that push your boundaries\n"
        "• Collaborative challenges with other learners\n\n"
        "What kind of challenge would really get you excited?"
    )


def _anxious_reply(phrase: str, encouragement: str) -> str:
    return (
        "I completely understand feeling anxious, and it's okay to feel this way. "
        f"Learning can sometimes feel overwhelming, but you're not alone. {phrase}\n\n"
        f"{encouragement} Let's build your confidence together:\n"
        "• We'll start with concepts you're comfortable with\n"
        "• We'll move at a pace that feels right for you\n"
        "• We'll celebrate every small win along the way\n"
        "• We'll take breaks whenever you need them\n\n"
        "There's no pressure here. What would help you feel more comfortable right now?"
    )


def _confident_reply(phrase: str, encouragement: str) -> str:
    return (
        "Your confidence is inspiring! You clearly have a solid foundation and are "
        f"ready for more advanced challenges. {phrase}\n\n"
        f"{encouragement} This is a great time to:\n"
        "• Apply what you know to real-world problems\n"
        "• Tackle complex problems that stretch your abilities\n"
        "• Help others who are just starting out\n"
        "• Connect concepts across different domains\n\n"
        "Which advanced concepts or problems would you like to explore next?"
    )


def _neutral_reply(phrase: str, encouragement: str) -> str:
    return (
        "Thanks for sharing that with me! I'm here to help you learn in whatever "
        f"way works best for you. {phrase}\n\n"
        f"{encouragement} I'd love to understand more about:\n"
        "• What you're hoping to learn or achieve\n"
        "• How you prefer to approach new concepts\n"
        "• Which topics or skills interest you most\n\n"
        "What would you like to explore together?"
    )


def compose_reply(emotion: EmotionalState, phrase: str, encouragement: str) -> str:
    """Fill the template owned by an emotion."""
    match emotion:
        case EmotionalState.FRUSTRATED:
            return _frustrated_reply(phrase, encouragement)
        case EmotionalState.EXCITED:
            return _excited_reply(phrase, encouragement)
        case EmotionalState.CONFUSED:
            return _confused_reply(phrase, encouragement)
        case EmotionalState.BORED:
            return _bored_reply(phrase, encouragement)
        case EmotionalState.ANXIOUS:
            return _anxious_reply(phrase, encouragement)
        case EmotionalState.CONFIDENT:
            return _confident_reply(phrase, encouragement)
        case EmotionalState.NEUTRAL:
            return _neutral_reply(phrase, encouragement)
        case _:
            assert_never(emotion)


# ========== Insights ==========


def build_insights(
    emotion: EmotionalState,
    message: str,
    subject: str | None,
    analysis: LearningAnalysis,
    profile: LearnerProfile,
) -> LearningInsights:
    """Emotion-specific learning insights."""
    pattern = (
        f"{analysis.learning_style} learner, {analysis.learning_velocity.value} velocity, "
        f"{analysis.engagement_level.value} engagement"
    )

    match emotion:
        case EmotionalState.FRUSTRATED:
            areas = identify_difficulty_areas(message, subject)
            return LearningInsights(
                strengths_identified=["Persistence with difficult material"],
                areas_for_improvement=areas or ["Foundational concepts"],
                learning_patterns=pattern,
                recommended_focus="Step-by-step breakdown of the current problem",
                signals={
                    "difficulty_areas": areas,
                    "recommended_approach": "step_by_step_breakdown",
                    "confidence_building_needed": True,
                },
            )
        case EmotionalState.EXCITED:
            return LearningInsights(
                strengths_identified=["High engagement", "Intrinsic motivation"],
                areas_for_improvement=[],
                learning_patterns=pattern,
                recommended_focus="Advanced applications of the current topic",
                signals={
                    "engagement_level": "high",
                    "readiness_for_advanced": True,
                    "motivation_drivers": ["curiosity", "practical_application"],
                },
            )
        case EmotionalState.CONFUSED:
            sources = identify_confusion_sources(message)
            gaps = detect_learning_gaps(profile)
            return LearningInsights(
                strengths_identified=["Asking questions to build understanding"],
                areas_for_improvement=gaps or ["Clarifying the core concept"],
                learning_patterns=pattern,
                recommended_focus="Clarify fundamentals with worked examples",
                signals={
                    "confusion_sources": sources,
                    "clarification_needed": True,
                    "learning_gaps": gaps,
                },
            )
        case EmotionalState.BORED:
            return LearningInsights(
                strengths_identified=["Solid grasp of the basics"],
                areas_for_improvement=["Challenge level of current material"],
                learning_patterns=pattern,
                recommended_focus="Raise difficulty and add real-world context",
                signals={
                    "current_level_too_easy": True,
                    "readiness_for_challenge": True,
                    "engagement_triggers": ["complexity", "real_world_relevance"],
                },
            )
        case EmotionalState.ANXIOUS:
            sources = identify_anxiety_sources(message)
            return LearningInsights(
                strengths_identified=["Willingness to keep going"],
                areas_for_improvement=["Confidence with the current material"],
                learning_patterns=pattern,
                recommended_focus="Small achievable goals in a low-pressure setting",
                signals={
                    "anxiety_sources": sources,
                    "confidence_building_priority": True,
                    "support_needed": True,
                },
            )
        case EmotionalState.CONFIDENT:
            return LearningInsights(
                strengths_identified=["Strong command of the topic", "Self-efficacy"],
                areas_for_improvement=[],
                learning_patterns=pattern,
                recommended_focus="Advanced application and teaching others",
                signals={
                    "mastery_level": "high",
                    "readiness_for_advanced": True,
                    "teaching_potential": True,
                },
            )
        case EmotionalState.NEUTRAL:
            return LearningInsights(
                strengths_identified=[],
                areas_for_improvement=[],
                learning_patterns=pattern,
                recommended_focus="Identify goals and interests",
                signals={
                    "engagement_level": "moderate",
                    "learning_preferences": analysis.learning_style,
                    "exploration_ready": True,
                },
            )
        case _:
            assert_never(emotion)


class FallbackResponseGenerator:
    """Template-driven reply builder used when generation is unavailable.

    Example:
        >>> generator = FallbackResponseGenerator()
        >>> response = generator.generate(
        ...     message="I'm stuck",
        ...     emotion=EmotionalState.FRUSTRATED,
        ...     session_kind=SessionKind.INSTRUCTION,
        ...     subject="mathematics",
        ...     analysis=LearningAnalysis(),
        ...     profile=profile,
        ... )
        >>> response.teaching_approach
        <TeachingApproach.SUPPORTIVE_BREAKDOWN: 'supportive_breakdown'>
    """

    def generate(
        self,
        message: str,
        emotion: EmotionalState,
        session_kind: SessionKind,
        subject: str | None,
        analysis: LearningAnalysis,
        profile: LearnerProfile,
        history_length: int = 0,
    ) -> TutorResponse:
        """Build a complete reply for the given emotion.

        Session metadata is left empty; the orchestrator fills it for
        both generation paths.
        """
        row = EMOTION_RESPONSE_PROFILES[emotion]
        encouragement = ENCOURAGEMENT_PHRASES[analysis.performance_level]
        reply_text = compose_reply(emotion, subject_phrase(subject, emotion), encouragement)

        logger.debug(
            "Fallback reply composed: emotion=%s session_kind=%s subject=%s",
            emotion.value,
            session_kind.value,
            subject or "general",
        )

        return TutorResponse(
            reply_text=reply_text,
            emotional_tone=row.tone,
            confidence_score=adjust_confidence(row.confidence, analysis.performance_level),
            teaching_approach=row.approach,
            encouragement_level=row.encouragement,
            follow_up_questions=list(FOLLOW_UP_QUESTIONS[emotion]),
            reasoning_steps=build_reasoning_steps(
                message, emotion, subject, analysis, history_length
            ),
            learning_insights=build_insights(emotion, message, subject, analysis, profile),
            suggested_actions=list(SUGGESTED_ACTIONS[emotion]),
        )

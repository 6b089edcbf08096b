# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response orchestrator.

Top-level request handler of the tutoring engine:

1. Resolve the learner's emotion (explicit or classified).
2. Fetch the learner profile (fatal on failure).
3. Analyze learning patterns.
4. Try the primary generation path; on any failure use the fallback.
5. Attach session metadata.
6. Dispatch persistence and audit as background tasks.

The reply is final before side effects start. Side-effect failures are
logged when they happen and the most recent ones are kept for drain();
they never change the reply.
"""

import asyncio
import logging
from collections import deque
from typing import Any

from emotutor.core.config.settings import LLMSettings, TutorSettings
from emotutor.core.emotional.classifier import detect_emotion
from emotutor.core.emotional.constants import EmotionalState
from emotutor.core.learning.analysis import LearningAnalysis, analyze_learning_patterns
from emotutor.core.tutoring.context import fetch_learner_profile
from emotutor.core.tutoring.errors import InvalidRequestError, SideEffectError, TutoringError
from emotutor.core.tutoring.fallback import FallbackResponseGenerator, build_reasoning_steps
from emotutor.core.tutoring.ports import AuditSink, GenerationCapability, LearnerStore, SessionSink
from emotutor.core.tutoring.prompt import TutorPromptBuilder, parse_tutor_payload
from emotutor.models.common import ResponseSource
from emotutor.models.learner import LearnerProfile
from emotutor.models.tutoring import SessionRecord, TutorRequest, TutorResponse

logger = logging.getLogger(__name__)

AUDIT_EVENT_KIND = "ai_interaction"
AUDIT_SEVERITY = "info"


def normalize_confidence(value: float) -> int:
    """Bring a confidence score onto the 0-100 integer scale.

    Values up to 1 are read as fractions, larger values as percentages.
    """
    if value <= 1:
        value = value * 100
    return max(0, min(100, int(round(value))))


class ResponseOrchestrator:
    """Coordinates classification, analysis, generation and side effects.

    Holds no per-learner state between requests. The only instance state
    is the set of in-flight side-effect tasks and a bounded buffer of
    their most recent errors.

    Attributes:
        settings: Tutoring engine settings.
        llm_settings: Sampling settings used when no prompt builder is given.

    Example:
        >>> orchestrator = ResponseOrchestrator(
        ...     store=store, session_sink=store, audit_sink=store, generator=LLMClient()
        ... )
        >>> response = await orchestrator.respond(request)
        >>> errors = await orchestrator.drain()
    """

    def __init__(
        self,
        store: LearnerStore,
        session_sink: SessionSink,
        audit_sink: AuditSink,
        generator: GenerationCapability | None = None,
        prompt_builder: TutorPromptBuilder | None = None,
        fallback: FallbackResponseGenerator | None = None,
        settings: TutorSettings | None = None,
        llm_settings: LLMSettings | None = None,
    ):
        self.settings = settings or TutorSettings()
        self.llm_settings = llm_settings or LLMSettings()
        self._store = store
        self._session_sink = session_sink
        self._audit_sink = audit_sink
        self._generator = generator
        self._prompt_builder = prompt_builder or TutorPromptBuilder(
            temperature=self.llm_settings.temperature,
            max_tokens=self.llm_settings.max_tokens,
            history_turns=self.settings.prompt_history_turns,
        )
        self._fallback = fallback or FallbackResponseGenerator()

        self._pending: set[asyncio.Task[None]] = set()
        self._side_effect_errors: deque[SideEffectError] = deque(
            maxlen=self.settings.side_effect_error_buffer
        )

    async def respond(self, request: TutorRequest) -> TutorResponse:
        """Produce the tutoring reply for one request.

        Args:
            request: Validated tutoring request.

        Returns:
            TutorResponse with session metadata. Same field set whichever
            generation path produced it.

        Raises:
            InvalidRequestError: If the request has no usable learner id.
            ContextUnavailableError: If the learner profile cannot be fetched.
            TutoringError: If the fallback generator itself fails.
        """
        if not isinstance(request.learner_id, str) or not request.learner_id.strip():
            raise InvalidRequestError("learnerId must not be blank")

        emotion = request.explicit_emotion or detect_emotion(
            request.message,
            request.conversation_history,
            self.settings.classifier_history_turns,
        )

        profile = await fetch_learner_profile(
            self._store,
            request.learner_id,
            sessions_limit=self.settings.recent_sessions_limit,
            progress_limit=self.settings.progress_records_limit,
            timeout=self.settings.store_timeout_seconds,
        )
        analysis = analyze_learning_patterns(profile, request.conversation_history)

        response, source = await self._generate(request, emotion, analysis, profile)

        response = response.model_copy(
            update={
                "session_metadata": self._session_metadata(
                    request, emotion, analysis, response, source
                )
            }
        )

        logger.info(
            "Tutor reply ready: learner=%s emotion=%s approach=%s source=%s",
            request.learner_id,
            emotion.value,
            response.teaching_approach.value,
            source.value,
        )

        self._dispatch_side_effects(request, emotion, response, source)
        return response

    async def drain(self) -> list[SideEffectError]:
        """Wait for in-flight side effects and return their errors.

        Only the most recent side_effect_error_buffer errors are kept.
        They are returned once and then cleared.
        """
        if self._pending:
            await asyncio.gather(*list(self._pending))
        errors = list(self._side_effect_errors)
        self._side_effect_errors.clear()
        return errors

    @property
    def pending_side_effects(self) -> int:
        return len(self._pending)

    @property
    def buffered_side_effect_errors(self) -> int:
        return len(self._side_effect_errors)

    # ========== Generation ==========

    async def _generate(
        self,
        request: TutorRequest,
        emotion: EmotionalState,
        analysis: LearningAnalysis,
        profile: LearnerProfile,
    ) -> tuple[TutorResponse, ResponseSource]:
        if self._generator is not None:
            try:
                response = await self._generate_primary(request, emotion, analysis, profile)
                return response, ResponseSource.PRIMARY
            except Exception as e:
                logger.warning(
                    "Primary generation failed for learner %s, using fallback: %s: %s",
                    request.learner_id,
                    type(e).__name__,
                    e,
                )
        else:
            logger.debug("No generation capability configured, using fallback")

        try:
            response = self._fallback.generate(
                message=request.message,
                emotion=emotion,
                session_kind=request.session_kind,
                subject=request.subject,
                analysis=analysis,
                profile=profile,
                history_length=len(request.conversation_history),
            )
        except Exception as e:
            logger.exception("Fallback generation failed for learner %s", request.learner_id)
            raise TutoringError(
                "Failed to compose tutoring reply",
                kind="internal_error",
                original_error=e,
            ) from e

        return response, ResponseSource.FALLBACK

    async def _generate_primary(
        self,
        request: TutorRequest,
        emotion: EmotionalState,
        analysis: LearningAnalysis,
        profile: LearnerProfile,
    ) -> TutorResponse:
        prompt_spec = self._prompt_builder.build(
            message=request.message,
            emotion=emotion,
            session_kind=request.session_kind,
            subject=request.subject,
            analysis=analysis,
            profile=profile,
            history=request.conversation_history,
        )

        raw = await asyncio.wait_for(
            self._generator.generate(prompt_spec),
            timeout=self.settings.generation_timeout_seconds,
        )
        reply = parse_tutor_payload(raw)

        reasoning = reply.reasoning_steps or build_reasoning_steps(
            request.message,
            emotion,
            request.subject,
            analysis,
            len(request.conversation_history),
        )

        return TutorResponse(
            reply_text=reply.reply_text,
            emotional_tone=reply.emotional_tone,
            confidence_score=normalize_confidence(reply.confidence_score),
            teaching_approach=reply.teaching_approach,
            encouragement_level=reply.encouragement_level,
            follow_up_questions=reply.follow_up_questions,
            reasoning_steps=reasoning,
            learning_insights=reply.learning_insights,
            suggested_actions=reply.suggested_actions,
        )

    def _session_metadata(
        self,
        request: TutorRequest,
        emotion: EmotionalState,
        analysis: LearningAnalysis,
        response: TutorResponse,
        source: ResponseSource,
    ) -> dict[str, Any]:
        return {
            "emotion_detected": emotion.value,
            "performance_level": analysis.performance_level.value,
            "learning_velocity": analysis.learning_velocity.value,
            "conversation_length": len(request.conversation_history),
            "session_count": analysis.session_count,
            "dominant_emotion": analysis.dominant_emotion.value,
            "engagement_level": analysis.engagement_level.value,
            "adaptive_approach": response.teaching_approach.value,
            "response_source": source.value,
        }

    # ========== Side effects ==========

    def _build_record(
        self,
        request: TutorRequest,
        emotion: EmotionalState,
        response: TutorResponse,
        source: ResponseSource,
    ) -> SessionRecord:
        tail = request.history_tail(self.settings.persisted_turns)
        context_data = {
            **request.auxiliary_context,
            "reasoning_steps": list(response.reasoning_steps),
            "learning_insights": response.learning_insights.model_dump(mode="json"),
            "conversation_history": [
                turn.model_dump(mode="json", by_alias=True) for turn in tail
            ],
        }
        return SessionRecord(
            learner_id=request.learner_id,
            session_kind=request.session_kind,
            subject=request.subject,
            message=request.message,
            reply_text=response.reply_text,
            emotion_detected=emotion,
            emotional_tone=response.emotional_tone,
            confidence_score=response.confidence_score,
            teaching_approach=response.teaching_approach,
            encouragement_level=response.encouragement_level,
            response_source=source,
            context_data=context_data,
        )

    def _dispatch_side_effects(
        self,
        request: TutorRequest,
        emotion: EmotionalState,
        response: TutorResponse,
        source: ResponseSource,
    ) -> None:
        record = self._build_record(request, emotion, response, source)
        audit_metadata = {
            "session_kind": request.session_kind.value,
            "subject": request.subject,
            "emotion_detected": emotion.value,
            "confidence_score": response.confidence_score,
            "teaching_approach": response.teaching_approach.value,
            "response_source": source.value,
        }
        description = (
            f"AI tutoring session: {request.session_kind.value} in {request.subject or 'general'}"
        )

        self._spawn(self._persist(record))
        self._spawn(self._audit(request.learner_id, description, audit_metadata))

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, record: SessionRecord) -> None:
        try:
            await asyncio.wait_for(
                self._session_sink.append_session(record),
                timeout=self.settings.store_timeout_seconds,
            )
        except Exception as e:
            logger.error("Failed to persist session for learner %s: %s", record.learner_id, e)
            self._side_effect_errors.append(
                SideEffectError(
                    f"Failed to persist session: {e}",
                    kind=SideEffectError.PERSISTENCE,
                    learner_id=record.learner_id,
                    original_error=e,
                )
            )

    async def _audit(self, learner_id: str, description: str, metadata: dict[str, Any]) -> None:
        try:
            await asyncio.wait_for(
                self._audit_sink.log_event(
                    AUDIT_EVENT_KIND,
                    description,
                    AUDIT_SEVERITY,
                    {"learner_id": learner_id, **metadata},
                ),
                timeout=self.settings.store_timeout_seconds,
            )
        except Exception as e:
            logger.error("Failed to write audit event for learner %s: %s", learner_id, e)
            self._side_effect_errors.append(
                SideEffectError(
                    f"Failed to write audit event: {e}",
                    kind=SideEffectError.AUDIT,
                    learner_id=learner_id,
                    original_error=e,
                )
            )

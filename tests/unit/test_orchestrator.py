# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the response orchestrator."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from emotutor.core.config import LLMSettings, TutorSettings
from emotutor.core.emotional import EmotionalState
from emotutor.core.intelligence.llm import LLMError, PromptSpec
from emotutor.core.tutoring import (
    ContextUnavailableError,
    InvalidRequestError,
    ResponseOrchestrator,
    SideEffectError,
    TutoringError,
    normalize_confidence,
)
from emotutor.models.common import EmotionalTone, ResponseSource, SessionKind, TeachingApproach
from emotutor.models.learner import LearnerIdentity
from emotutor.models.tutoring import TutorRequest


class SlowGenerator:
    """Generation capability that never answers in time."""

    async def generate(self, prompt_spec: PromptSpec) -> str:
        await asyncio.sleep(5)
        return "{}"


@pytest.fixture
def generator(generated_raw) -> AsyncMock:
    mock = AsyncMock()
    mock.generate.return_value = generated_raw
    return mock


@pytest.fixture
def orchestrator(memory_store, generator, tutor_settings) -> ResponseOrchestrator:
    return ResponseOrchestrator(
        store=memory_store,
        session_sink=memory_store,
        audit_sink=memory_store,
        generator=generator,
        settings=tutor_settings,
    )


@pytest.fixture
def fallback_orchestrator(memory_store, tutor_settings) -> ResponseOrchestrator:
    return ResponseOrchestrator(
        store=memory_store,
        session_sink=memory_store,
        audit_sink=memory_store,
        settings=tutor_settings,
    )


class TestNormalizeConfidence:
    """Tests for confidence scale normalization."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.87, 87), (0.0, 0), (1.0, 100), (87, 87), (87.4, 87), (150, 100)],
    )
    def test_normalize(self, value: float, expected: int) -> None:
        assert normalize_confidence(value) == expected


class TestPrimaryPath:
    """Tests for replies produced by the generation capability."""

    @pytest.mark.asyncio
    async def test_primary_reply(self, orchestrator, generator, confused_request) -> None:
        """Test a valid payload becomes the reply with normalized confidence."""
        response = await orchestrator.respond(confused_request)
        await orchestrator.drain()

        assert response.reply_text.startswith("Let's look at the formula")
        assert response.confidence_score == 87
        assert response.teaching_approach == TeachingApproach.EXPLANATORY_QUESTIONING
        assert response.session_metadata["response_source"] == "primary"
        assert response.session_metadata["emotion_detected"] == "confused"

        generator.generate.assert_awaited_once()
        prompt_spec = generator.generate.await_args.args[0]
        assert isinstance(prompt_spec, PromptSpec)
        assert "Detected emotion: confused" in prompt_spec.system_instruction

    @pytest.mark.asyncio
    async def test_sampling_settings_reach_prompt(
        self, memory_store, generator, tutor_settings, confused_request
    ) -> None:
        """Test configured temperature and max_tokens are sent to the generator."""
        orchestrator = ResponseOrchestrator(
            store=memory_store,
            session_sink=memory_store,
            audit_sink=memory_store,
            generator=generator,
            settings=tutor_settings,
            llm_settings=LLMSettings(temperature=0.3, max_tokens=700),
        )

        await orchestrator.respond(confused_request)
        await orchestrator.drain()

        prompt_spec = generator.generate.await_args.args[0]
        assert prompt_spec.temperature == 0.3
        assert prompt_spec.max_tokens == 700

    @pytest.mark.asyncio
    async def test_missing_reasoning_steps_are_filled(
        self, orchestrator, generator, generated_payload, confused_request
    ) -> None:
        payload = {**generated_payload, "reasoning_steps": []}
        generator.generate.return_value = json.dumps(payload)

        response = await orchestrator.respond(confused_request)
        await orchestrator.drain()

        assert len(response.reasoning_steps) == 6
        assert response.reasoning_steps[1] == "Detected emotion: confused (confidence: high)"

    @pytest.mark.asyncio
    async def test_session_metadata(self, orchestrator, confused_request) -> None:
        """Test metadata describes the analysis for a new learner."""
        response = await orchestrator.respond(confused_request)
        await orchestrator.drain()

        assert response.session_metadata == {
            "emotion_detected": "confused",
            "performance_level": "low",
            "learning_velocity": "slow",
            "conversation_length": 0,
            "session_count": 0,
            "dominant_emotion": "neutral",
            "engagement_level": "low",
            "adaptive_approach": "explanatory_questioning",
            "response_source": "primary",
        }


class TestFallbackPath:
    """Tests for falling back to the deterministic generator."""

    @pytest.mark.asyncio
    async def test_no_generator_uses_fallback(self, fallback_orchestrator, confused_request) -> None:
        response = await fallback_orchestrator.respond(confused_request)
        await fallback_orchestrator.drain()

        assert response.session_metadata["response_source"] == "fallback"
        assert response.confidence_score == 83
        assert response.teaching_approach == TeachingApproach.EXPLANATORY_QUESTIONING

    @pytest.mark.asyncio
    async def test_generator_error_falls_back(
        self, orchestrator, generator, confused_request
    ) -> None:
        generator.generate.side_effect = LLMError("rate limited", error_code="rate_limit")

        response = await orchestrator.respond(confused_request)
        await orchestrator.drain()

        assert response.session_metadata["response_source"] == "fallback"
        assert response.emotional_tone in EmotionalTone
        reply = response.reply_text.lower()
        assert "rate limited" not in reply
        assert "rate_limit" not in reply
        assert "error" not in reply

    @pytest.mark.asyncio
    async def test_invalid_payload_falls_back(
        self, orchestrator, generator, generated_payload, confused_request
    ) -> None:
        """Test a tone outside the canonical set is treated as a failure."""
        generator.generate.return_value = json.dumps(
            {**generated_payload, "emotional_tone": "sarcastic"}
        )

        response = await orchestrator.respond(confused_request)
        await orchestrator.drain()

        assert response.session_metadata["response_source"] == "fallback"
        assert response.emotional_tone.value == "patient_clarifying"

    @pytest.mark.asyncio
    async def test_generation_timeout_falls_back(
        self, memory_store, tutor_settings, confused_request
    ) -> None:
        orchestrator = ResponseOrchestrator(
            store=memory_store,
            session_sink=memory_store,
            audit_sink=memory_store,
            generator=SlowGenerator(),
            settings=tutor_settings,
        )

        response = await orchestrator.respond(confused_request)
        await orchestrator.drain()

        assert response.session_metadata["response_source"] == "fallback"
        assert response.emotional_tone in EmotionalTone
        reply = response.reply_text.lower()
        assert "timeout" not in reply
        assert "timed out" not in reply
        assert "error" not in reply

    @pytest.mark.asyncio
    async def test_fallback_failure_is_internal_error(
        self, memory_store, tutor_settings, confused_request
    ) -> None:
        broken = MagicMock()
        broken.generate.side_effect = KeyError("missing template")
        orchestrator = ResponseOrchestrator(
            store=memory_store,
            session_sink=memory_store,
            audit_sink=memory_store,
            fallback=broken,
            settings=tutor_settings,
        )

        with pytest.raises(TutoringError) as exc_info:
            await orchestrator.respond(confused_request)

        assert exc_info.value.kind == "internal_error"
        assert orchestrator.pending_side_effects == 0

    @pytest.mark.asyncio
    async def test_both_paths_share_schema(
        self, orchestrator, fallback_orchestrator, confused_request
    ) -> None:
        """Test the caller cannot tell the paths apart by field set."""
        primary = await orchestrator.respond(confused_request)
        fallback = await fallback_orchestrator.respond(confused_request)
        await orchestrator.drain()
        await fallback_orchestrator.drain()

        primary_dump = primary.model_dump(by_alias=True)
        fallback_dump = fallback.model_dump(by_alias=True)

        assert primary_dump.keys() == fallback_dump.keys()
        assert primary_dump["sessionMetadata"].keys() == fallback_dump["sessionMetadata"].keys()
        assert primary_dump["learningInsights"].keys() == fallback_dump["learningInsights"].keys()


class TestEmotionResolution:
    """Tests for choosing the emotion."""

    @pytest.mark.asyncio
    async def test_explicit_emotion_wins(self, fallback_orchestrator, make_request) -> None:
        request = make_request(message="this is boring", explicit_emotion=EmotionalState.ANXIOUS)

        response = await fallback_orchestrator.respond(request)
        await fallback_orchestrator.drain()

        assert response.session_metadata["emotion_detected"] == "anxious"
        assert response.teaching_approach == TeachingApproach.SUPPORTIVE_CONFIDENCE_BUILDING

    @pytest.mark.asyncio
    async def test_classified_from_message(self, fallback_orchestrator, make_request) -> None:
        response = await fallback_orchestrator.respond(make_request(message="this is boring"))
        await fallback_orchestrator.drain()

        assert response.session_metadata["emotion_detected"] == "bored"


class TestContextFetch:
    """Tests for learner context failures."""

    @pytest.mark.asyncio
    async def test_store_failure_is_fatal(
        self, orchestrator, memory_store, generator, confused_request
    ) -> None:
        """Test a failing read aborts the request before generation."""
        with patch.object(
            memory_store,
            "fetch_mastery_records",
            AsyncMock(side_effect=ConnectionError("database unreachable")),
        ):
            with pytest.raises(ContextUnavailableError) as exc_info:
                await orchestrator.respond(confused_request)

        assert exc_info.value.learner_id == "learner-42"
        assert isinstance(exc_info.value.original_error, ConnectionError)
        generator.generate.assert_not_awaited()
        assert orchestrator.pending_side_effects == 0
        assert memory_store.audit_events == []

    @pytest.mark.asyncio
    async def test_store_timeout_is_fatal(self, orchestrator, memory_store, confused_request) -> None:
        async def never_answers(learner_id: str) -> None:
            await asyncio.sleep(5)

        with patch.object(memory_store, "fetch_learner", never_answers):
            with pytest.raises(ContextUnavailableError):
                await orchestrator.respond(confused_request)

    @pytest.mark.asyncio
    async def test_profile_feeds_prompt(
        self, orchestrator, memory_store, generator, confused_request, make_progress
    ) -> None:
        memory_store.add_learner(
            LearnerIdentity(learner_id="learner-42", age=11, learning_style="auditory")
        )
        memory_store.add_progress(
            "learner-42",
            make_progress("quiz_score", value=95),
            make_progress("quiz_score", value=90),
        )

        response = await orchestrator.respond(confused_request)
        await orchestrator.drain()

        prompt_spec = generator.generate.await_args.args[0]
        assert "Age: 11" in prompt_spec.system_instruction
        assert "Learning style: auditory" in prompt_spec.system_instruction
        assert response.session_metadata["performance_level"] == "high"


class TestSideEffects:
    """Tests for persistence and audit."""

    @pytest.mark.asyncio
    async def test_session_and_audit_written(
        self, orchestrator, memory_store, make_request
    ) -> None:
        request = make_request(auxiliary_context={"lesson_id": "L-7"})

        await orchestrator.respond(request)
        errors = await orchestrator.drain()

        assert errors == []
        [record] = memory_store.sessions["learner-42"]
        assert record.response_source == ResponseSource.PRIMARY
        assert record.context_data["lesson_id"] == "L-7"
        assert len(record.context_data["reasoning_steps"]) == 2
        assert "learning_insights" in record.context_data

        [event] = memory_store.audit_events
        assert event.kind == "ai_interaction"
        assert event.severity == "info"
        assert event.description == "AI tutoring session: instruction in mathematics"
        assert event.metadata["learner_id"] == "learner-42"
        assert event.metadata["response_source"] == "primary"

    @pytest.mark.asyncio
    async def test_persisted_tail_is_bounded(
        self, fallback_orchestrator, memory_store, make_request, make_turns
    ) -> None:
        """Test only the last five turns are persisted, in order."""
        request = make_request(message="ok", history=make_turns(10))

        await fallback_orchestrator.respond(request)
        await fallback_orchestrator.drain()

        turns = await memory_store.fetch_recent_turns("learner-42", 5)
        assert [t.text for t in turns] == ["turn 5", "turn 6", "turn 7", "turn 8", "turn 9"]

    @pytest.mark.asyncio
    async def test_persistence_failure_reported_separately(
        self, orchestrator, memory_store, confused_request
    ) -> None:
        """Test a failed write does not change the reply and is reported by drain()."""
        with patch.object(
            memory_store, "append_session", AsyncMock(side_effect=RuntimeError("disk full"))
        ):
            response = await orchestrator.respond(confused_request)
            errors = await orchestrator.drain()

        assert response.session_metadata["response_source"] == "primary"
        assert len(errors) == 1
        assert isinstance(errors[0], SideEffectError)
        assert errors[0].kind == SideEffectError.PERSISTENCE
        assert len(memory_store.audit_events) == 1
        assert await orchestrator.drain() == []

    @pytest.mark.asyncio
    async def test_audit_failure_reported_separately(
        self, memory_store, generator, tutor_settings, confused_request
    ) -> None:
        audit_sink = AsyncMock()
        audit_sink.log_event.side_effect = ConnectionError("audit backend down")
        orchestrator = ResponseOrchestrator(
            store=memory_store,
            session_sink=memory_store,
            audit_sink=audit_sink,
            generator=generator,
            settings=tutor_settings,
        )

        await orchestrator.respond(confused_request)
        errors = await orchestrator.drain()

        assert [e.kind for e in errors] == [SideEffectError.AUDIT]
        assert len(memory_store.sessions["learner-42"]) == 1

    @pytest.mark.asyncio
    async def test_history_accumulates_across_requests(
        self, fallback_orchestrator, confused_request
    ) -> None:
        """Test a drained session is visible to the next request's analysis."""
        await fallback_orchestrator.respond(confused_request)
        await fallback_orchestrator.drain()

        response = await fallback_orchestrator.respond(confused_request)
        await fallback_orchestrator.drain()

        assert response.session_metadata["session_count"] == 1
        assert response.session_metadata["dominant_emotion"] == "confused"

    @pytest.mark.asyncio
    async def test_error_buffer_is_bounded(self, memory_store, make_request) -> None:
        """Test only the most recent failures are kept when nobody drains."""
        orchestrator = ResponseOrchestrator(
            store=memory_store,
            session_sink=memory_store,
            audit_sink=memory_store,
            settings=TutorSettings(store_timeout_seconds=0.5, side_effect_error_buffer=5),
        )

        with patch.object(
            memory_store, "append_session", AsyncMock(side_effect=RuntimeError("disk full"))
        ):
            for i in range(20):
                await orchestrator.respond(make_request(learner_id=f"learner-{i}"))
            for _ in range(100):
                if not orchestrator.pending_side_effects:
                    break
                await asyncio.sleep(0.01)

            assert orchestrator.pending_side_effects == 0
            assert orchestrator.buffered_side_effect_errors == 5

            errors = await orchestrator.drain()

        assert {e.learner_id for e in errors} == {f"learner-{i}" for i in range(15, 20)}
        assert all(e.kind == SideEffectError.PERSISTENCE for e in errors)
        assert orchestrator.buffered_side_effect_errors == 0


class TestRequestGuard:
    """Tests for requests that bypass model validation."""

    @pytest.mark.asyncio
    async def test_blank_learner_id_rejected(self, orchestrator, memory_store, generator) -> None:
        request = TutorRequest.model_construct(
            learner_id="   ",
            message="help",
            session_kind=SessionKind.INSTRUCTION,
            subject=None,
            explicit_emotion=None,
            auxiliary_context={},
            conversation_history=(),
        )

        with pytest.raises(InvalidRequestError) as exc_info:
            await orchestrator.respond(request)

        assert exc_info.value.kind == "invalid_request"
        generator.generate.assert_not_awaited()
        assert orchestrator.pending_side_effects == 0
        assert memory_store.audit_events == []

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring response engine.

Key Components:
- ResponseOrchestrator: Top-level request handler
- FallbackResponseGenerator: Deterministic template-driven replies
- TutorPromptBuilder / parse_tutor_payload: Primary generation path
- fetch_learner_profile: Concurrent learner context assembly
- LearnerStore, SessionSink, AuditSink, GenerationCapability: Collaborator ports

Example usage:

    from emotutor.core.tutoring import ResponseOrchestrator

    orchestrator = ResponseOrchestrator(store, session_sink, audit_sink, generator)
    response = await orchestrator.respond(request)
"""

from emotutor.core.tutoring.context import fetch_learner_profile
from emotutor.core.tutoring.errors import (
    ContextUnavailableError,
    InvalidRequestError,
    SideEffectError,
    TutoringError,
)
from emotutor.core.tutoring.fallback import (
    EMOTION_RESPONSE_PROFILES,
    FallbackResponseGenerator,
    adjust_confidence,
)
from emotutor.core.tutoring.orchestrator import ResponseOrchestrator, normalize_confidence
from emotutor.core.tutoring.ports import (
    AuditSink,
    GenerationCapability,
    LearnerStore,
    SessionSink,
)
from emotutor.core.tutoring.prompt import (
    GeneratedTutorReply,
    ResponseParseError,
    TutorPromptBuilder,
    parse_tutor_payload,
)
from emotutor.core.tutoring.subjects import resolve_subject_context

__all__ = [
    # Orchestration
    "ResponseOrchestrator",
    "normalize_confidence",
    "fetch_learner_profile",
    # Fallback
    "EMOTION_RESPONSE_PROFILES",
    "FallbackResponseGenerator",
    "adjust_confidence",
    "resolve_subject_context",
    # Primary path
    "GeneratedTutorReply",
    "ResponseParseError",
    "TutorPromptBuilder",
    "parse_tutor_payload",
    # Ports
    "AuditSink",
    "GenerationCapability",
    "LearnerStore",
    "SessionSink",
    # Errors
    "ContextUnavailableError",
    "InvalidRequestError",
    "SideEffectError",
    "TutoringError",
]

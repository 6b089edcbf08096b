# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor API endpoints.

This module provides the tutoring response endpoint:
- POST /respond - Produce an emotionally adaptive tutor reply

Example:
    POST /api/v1/tutor/respond
    {
        "learnerId": "learner-42",
        "message": "this is so confusing, I don't understand the formula",
        "sessionKind": "instruction",
        "subject": "mathematics",
        "conversationHistory": []
    }

Errors:
    422 invalid_request: Missing or malformed fields.
    503 context_unavailable: The learner's history could not be read.
"""

import logging
from uuid import uuid4

from fastapi import APIRouter, status

from emotutor.api.dependencies import OrchestratorDep
from emotutor.models.tutoring import TutorRequest, TutorResponse
from emotutor.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tutor", tags=["Tutor"])


@router.post(
    "/respond",
    response_model=TutorResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
    summary="Generate a tutor reply",
)
async def respond(
    body: TutorRequest,
    orchestrator: OrchestratorDep,
) -> TutorResponse:
    """Generate a personalized tutor reply for a learner message.

    The reply has the same shape whether it was generated by the language
    model or by the deterministic fallback. Persistence and audit run in
    the background and never change the outcome of this call.
    """
    bind_context(request_id=str(uuid4()), learner_id=body.learner_id)
    try:
        logger.info(
            "Tutor request received: session_kind=%s subject=%s history=%d",
            body.session_kind.value,
            body.subject or "general",
            len(body.conversation_history),
        )
        return await orchestrator.respond(body)
    finally:
        clear_context()

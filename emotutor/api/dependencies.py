# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

The application holds a single ResponseOrchestrator. It is built from
settings at startup and handed to endpoints through get_orchestrator(),
which tests override with app.dependency_overrides.

Example:
    @router.post("/respond")
    async def respond(
        body: TutorRequest,
        orchestrator: ResponseOrchestrator = Depends(get_orchestrator),
    ):
        ...
"""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends

from emotutor.core.config import Settings, get_settings
from emotutor.core.intelligence.llm import LLMClient
from emotutor.core.tutoring import ResponseOrchestrator, TutorPromptBuilder
from emotutor.infrastructure.audit import StructlogAuditSink
from emotutor.infrastructure.stores import InMemoryLearnerStore, SqlAlchemyLearnerStore

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[Settings], ResponseOrchestrator]

# Orchestrator singleton
_orchestrator: ResponseOrchestrator | None = None


def build_orchestrator(settings: Settings) -> ResponseOrchestrator:
    """Wire the orchestrator's collaborators from settings.

    With the database enabled, the SQLAlchemy store serves as learner
    store, session sink and audit sink. Otherwise sessions are kept in
    memory and audit events go to the structured log.
    """
    if settings.database.enabled:
        sql_store = SqlAlchemyLearnerStore()
        store, session_sink, audit_sink = sql_store, sql_store, sql_store
    else:
        memory_store = InMemoryLearnerStore()
        store, session_sink, audit_sink = memory_store, memory_store, StructlogAuditSink()

    generator = LLMClient(llm_settings=settings.llm)
    prompt_builder = TutorPromptBuilder(
        model=generator.model,
        temperature=settings.llm.temperature,
        max_tokens=settings.llm.max_tokens,
        history_turns=settings.tutor.prompt_history_turns,
    )

    return ResponseOrchestrator(
        store=store,
        session_sink=session_sink,
        audit_sink=audit_sink,
        generator=generator,
        prompt_builder=prompt_builder,
        settings=settings.tutor,
        llm_settings=settings.llm,
    )


def init_orchestrator(
    settings: Settings,
    factory: OrchestratorFactory | None = None,
) -> ResponseOrchestrator:
    """Create the application orchestrator."""
    global _orchestrator
    _orchestrator = (factory or build_orchestrator)(settings)
    logger.info("Tutoring orchestrator initialized")
    return _orchestrator


async def close_orchestrator() -> None:
    """Wait for in-flight side effects and drop the orchestrator."""
    global _orchestrator

    if _orchestrator is None:
        return

    errors = await _orchestrator.drain()
    for error in errors:
        logger.warning("Side effect failed before shutdown: %s (%s)", error.message, error.kind)
    _orchestrator = None


def get_orchestrator() -> ResponseOrchestrator:
    """Get the application orchestrator, building it on first use."""
    if _orchestrator is None:
        return init_orchestrator(get_settings())
    return _orchestrator


OrchestratorDep = Annotated[ResponseOrchestrator, Depends(get_orchestrator)]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Collaborator interfaces consumed by the tutoring engine.

The engine depends only on these protocols; concrete stores, sinks and
the LLM client live in the infrastructure and intelligence packages.
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from emotutor.models.learner import (
    LearnerIdentity,
    MasteryRecord,
    ProgressRecord,
    SessionSummary,
)
from emotutor.models.tutoring import ConversationTurn, SessionRecord

if TYPE_CHECKING:
    from emotutor.core.intelligence.llm.client import PromptSpec


@runtime_checkable
class LearnerStore(Protocol):
    """Read-only access to a learner's stored history."""

    async def fetch_learner(self, learner_id: str) -> LearnerIdentity | None:
        """Identity and demographic fields, or None for an unknown learner."""
        ...

    async def fetch_recent_sessions(self, learner_id: str, limit: int) -> list[SessionSummary]:
        """Past sessions, most recent first."""
        ...

    async def fetch_progress_records(self, learner_id: str, limit: int) -> list[ProgressRecord]:
        """Progress events, most recent first."""
        ...

    async def fetch_mastery_records(self, learner_id: str) -> list[MasteryRecord]:
        ...

    async def fetch_cognitive_profile(self, learner_id: str) -> dict[str, Any] | None:
        ...

    async def fetch_recent_turns(self, learner_id: str, limit: int) -> list[ConversationTurn]:
        """Conversation turns persisted with the latest session, in original order."""
        ...


@runtime_checkable
class SessionSink(Protocol):
    """Write-only sink for completed tutoring sessions."""

    async def append_session(self, record: SessionRecord) -> None:
        ...


@runtime_checkable
class AuditSink(Protocol):
    """Write-only, best-effort audit event sink."""

    async def log_event(
        self,
        kind: str,
        description: str,
        severity: str,
        metadata: dict[str, Any],
    ) -> None:
        ...


@runtime_checkable
class GenerationCapability(Protocol):
    """External text generation. Returns the raw model output."""

    async def generate(self, prompt_spec: "PromptSpec") -> str:
        ...

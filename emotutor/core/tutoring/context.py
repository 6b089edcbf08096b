# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner profile assembly.

The five store reads have no data dependency on each other, so they are
issued concurrently and bounded by a single timeout. Any failure makes
the request's context unavailable.
"""

import asyncio
import logging

from emotutor.core.tutoring.errors import ContextUnavailableError
from emotutor.core.tutoring.ports import LearnerStore
from emotutor.models.learner import LearnerIdentity, LearnerProfile

logger = logging.getLogger(__name__)


async def fetch_learner_profile(
    store: LearnerStore,
    learner_id: str,
    sessions_limit: int = 25,
    progress_limit: int = 20,
    timeout: float | None = 10.0,
) -> LearnerProfile:
    """Assemble a read-only LearnerProfile from the store.

    Args:
        store: Learner history store.
        learner_id: Learner to fetch.
        sessions_limit: Maximum number of recent sessions to read.
        progress_limit: Maximum number of progress records to read.
        timeout: Bound in seconds on all reads together. None disables it.

    Returns:
        LearnerProfile. A learner without an identity record gets default
        identity fields.

    Raises:
        ContextUnavailableError: If any read fails or the timeout expires.
    """
    reads = asyncio.gather(
        store.fetch_learner(learner_id),
        store.fetch_recent_sessions(learner_id, sessions_limit),
        store.fetch_progress_records(learner_id, progress_limit),
        store.fetch_mastery_records(learner_id),
        store.fetch_cognitive_profile(learner_id),
    )

    try:
        identity, sessions, progress, mastery, cognitive = await asyncio.wait_for(
            reads, timeout=timeout
        )
    except TimeoutError as e:
        logger.error("Learner context fetch timed out for %s after %ss", learner_id, timeout)
        raise ContextUnavailableError(
            f"Timed out fetching learner context for {learner_id}",
            learner_id=learner_id,
            original_error=e,
        ) from e
    except Exception as e:
        logger.error("Learner context fetch failed for %s: %s", learner_id, e)
        raise ContextUnavailableError(
            f"Failed to fetch learner context for {learner_id}",
            learner_id=learner_id,
            original_error=e,
        ) from e

    if identity is None:
        logger.debug("No learner record for %s, using default identity", learner_id)
        identity = LearnerIdentity(learner_id=learner_id)

    return LearnerProfile(
        identity=identity,
        recent_sessions=tuple(sessions or ()),
        progress_records=tuple(progress or ()),
        mastery_records=tuple(mastery or ()),
        cognitive_profile=cognitive,
    )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring error taxonomy.

Generation failures (LLMError, ResponseParseError) never reach callers;
the orchestrator recovers from them with the fallback generator. The
errors below are the ones that do cross the engine boundary.
"""


class TutoringError(Exception):
    """Base exception for tutoring failures.

    Attributes:
        message: Error description.
        kind: Machine-readable error kind.
        original_error: Original exception if any.
    """

    kind: str = "internal_error"

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        if kind is not None:
            self.kind = kind
        self.original_error = original_error
        super().__init__(self.message)


class InvalidRequestError(TutoringError):
    """Raised when a request is malformed and cannot be processed."""

    kind = "invalid_request"


class ContextUnavailableError(TutoringError):
    """Raised when the learner profile cannot be fetched.

    Attributes:
        learner_id: Learner whose context was requested.
    """

    kind = "context_unavailable"

    def __init__(
        self,
        message: str,
        learner_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.learner_id = learner_id
        super().__init__(message, original_error=original_error)


class SideEffectError(TutoringError):
    """Failure of a best-effort side effect (persistence or audit).

    These are reported separately from the reply and never change the
    outcome of the request that produced them.

    Attributes:
        learner_id: Learner the side effect belonged to.
    """

    PERSISTENCE = "persistence_failed"
    AUDIT = "audit_failed"

    def __init__(
        self,
        message: str,
        kind: str,
        learner_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.learner_id = learner_id
        super().__init__(message, kind=kind, original_error=original_error)

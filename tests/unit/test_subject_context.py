# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for subject context tables."""

import pytest

from emotutor.core.emotional import EmotionalState
from emotutor.core.tutoring.subjects import (
    DEFAULT_SUBJECT,
    SUBJECT_CONTEXTS,
    difficulty_keywords,
    resolve_subject_context,
    resolve_subject_key,
    subject_phrase,
)


class TestResolveSubject:
    """Tests for subject key resolution."""

    @pytest.mark.parametrize("subject", ["mathematics", "programming", "science"])
    def test_known_subjects(self, subject: str) -> None:
        assert resolve_subject_key(subject) == subject

    @pytest.mark.parametrize("subject", [None, "", "history", "underwater basket weaving"])
    def test_unknown_subjects_use_default(self, subject: str | None) -> None:
        """Test missing or unknown subjects resolve to the default table."""
        assert resolve_subject_key(subject) == DEFAULT_SUBJECT
        assert resolve_subject_context(subject) is SUBJECT_CONTEXTS[DEFAULT_SUBJECT]

    def test_lookup_is_case_insensitive(self) -> None:
        assert resolve_subject_key("  Mathematics ") == "mathematics"


class TestSubjectTables:
    """Tests for table completeness."""

    @pytest.mark.parametrize("subject", sorted(SUBJECT_CONTEXTS))
    def test_every_emotion_has_phrase(self, subject: str) -> None:
        """Test each subject covers all seven emotional states."""
        context = resolve_subject_context(subject)

        assert set(context) == set(EmotionalState)
        assert all(phrase.strip() for phrase in context.values())

    def test_phrase_lookup(self) -> None:
        phrase = subject_phrase("programming", EmotionalState.FRUSTRATED)

        assert "bug" in phrase

    def test_difficulty_keywords_scoped(self) -> None:
        """Test difficulty keywords differ per subject."""
        assert "formula" in difficulty_keywords("mathematics")
        assert "debug" in difficulty_keywords("programming")
        assert difficulty_keywords("history") == difficulty_keywords(None)

"""Emotutor Backend.

Adaptive tutoring-response engine: classifies a learner's emotional state,
profiles their learning history, and produces a personalized reply with
structured pedagogical metadata, falling back to a deterministic generator
whenever the language-model path is unavailable.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

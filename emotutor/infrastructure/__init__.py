# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for Emotutor.

Provides concrete implementations of the tutoring engine's collaborators:
- database: Async SQLAlchemy connection management and ORM models
- stores: Learner history stores (in-memory and SQLAlchemy)
- audit: Audit sinks
"""

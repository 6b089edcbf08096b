# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for Emotutor.

This package contains the core tutoring logic:
- config: Application configuration and settings
- emotional: Emotion classification from learner text
- learning: Learning pattern analysis over historical records
- tutoring: Response orchestration, fallback generation, prompts
- intelligence: LLM client used by the primary generation path
"""

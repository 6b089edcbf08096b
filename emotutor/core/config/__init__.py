# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for Emotutor.

Settings are Pydantic-based and loaded from environment variables.

Example:
    >>> from emotutor.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.llm.get_default_model())
    'gpt-4o'
"""

from emotutor.core.config.settings import (
    APISettings,
    DatabaseSettings,
    LLMSettings,
    Settings,
    TutorSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "APISettings",
    "DatabaseSettings",
    "LLMSettings",
    "TutorSettings",
]

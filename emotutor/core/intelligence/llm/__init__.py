# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM client module using LiteLLM.

Example:
    >>> from emotutor.core.intelligence.llm import LLMClient, PromptSpec
    >>> client = LLMClient()
    >>> raw = await client.generate(PromptSpec(system_instruction="...", user_message="Hi"))
"""

from emotutor.core.intelligence.llm.client import (
    LLMClient,
    LLMError,
    LLMResponse,
    Message,
    PromptSpec,
)

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMResponse",
    "Message",
    "PromptSpec",
]

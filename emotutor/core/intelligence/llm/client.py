# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM client using LiteLLM for multi-provider support.

This module provides the external generation capability of the tutoring
engine. LiteLLM routes a request to the provider implied by the model
identifier; API keys and endpoints are passed directly to acompletion()
rather than through environment variables.

Supported providers:
- OpenAI: GPT-4o, GPT-4, etc.
- Anthropic: Claude 3.5
- Google: Gemini models
- Ollama: Local inference, no credential needed

Example:
    >>> from emotutor.core.intelligence.llm import LLMClient
    >>> client = LLMClient()
    >>> response = await client.complete("Explain the slope of a line")
    >>> print(response.content)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm
from litellm import acompletion

from emotutor.core.config.settings import LLMSettings, ProviderName, get_settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from an LLM completion.

    Attributes:
        content: The generated text content.
        model: The model that generated the response.
        tokens_input: Number of input tokens used.
        tokens_output: Number of output tokens generated.
        finish_reason: Why generation stopped (stop, length, etc.).
        raw_response: Original response object from LiteLLM.
    """

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    raw_response: Optional[object] = field(default=None, repr=False)

    @property
    def total_tokens(self) -> int:
        """Get total tokens used (input + output)."""
        return self.tokens_input + self.tokens_output


class LLMError(Exception):
    """Exception raised when LLM operation fails.

    Attributes:
        message: Error description.
        model: Model that caused the error.
        error_code: Error code if available.
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.model = model
        self.error_code = error_code
        self.original_error = original_error
        super().__init__(self.message)


@dataclass
class Message:
    """A message in a conversation.

    Attributes:
        role: Message role (system, user, assistant).
        content: Message text content.
    """

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary format for LiteLLM."""
        return {"role": self.role, "content": self.content}


@dataclass
class PromptSpec:
    """Everything needed for one generation request.

    Attributes:
        system_instruction: System prompt block.
        user_message: Final user prompt.
        conversation_tail: Recent conversation as chat messages.
        model: Model in LiteLLM format. None uses the client default.
        temperature: Sampling temperature.
        max_tokens: Upper bound on generated tokens.
    """

    system_instruction: str
    user_message: str
    conversation_tail: list[Message] = field(default_factory=list)
    model: Optional[str] = None
    temperature: float = 0.8
    max_tokens: int = 2000


class LLMClient:
    """Client for LLM operations via LiteLLM.

    Implements the tutoring engine's generation capability through
    generate(), and a general-purpose complete() for single prompts.

    Attributes:
        model: Default model to use for completions.
        timeout: Request timeout in seconds.

    Example:
        >>> client = LLMClient()
        >>> response = await client.complete(
        ...     prompt="What is a derivative?",
        ...     temperature=0.7,
        ... )
        >>> print(response.content)
    """

    def __init__(
        self,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        llm_settings: Optional[LLMSettings] = None,
    ):
        """Initialize the LLM client.

        Args:
            model: Default model in LiteLLM format. Falls back to settings.
            timeout: Request timeout in seconds. Falls back to settings.
            llm_settings: LLM configuration. Uses get_settings() if None.
        """
        self._settings = llm_settings or get_settings().llm
        self._model = model or self._settings.get_default_model()
        self._timeout = timeout or self._settings.request_timeout

        self._configure_litellm()

        logger.info(
            "LLMClient initialized with model=%s, timeout=%.1fs",
            self._model,
            self._timeout,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def timeout(self) -> float:
        return self._timeout

    def _configure_litellm(self) -> None:
        litellm.set_verbose = False
        litellm.drop_params = True

    def _provider_for_model(self, model: str) -> ProviderName:
        """Infer the provider from a LiteLLM model string."""
        if model.startswith(("ollama/", "ollama_chat/")):
            return "ollama"
        if model.startswith("gemini/"):
            return "google"
        if model.startswith("anthropic/") or model.startswith("claude"):
            return "anthropic"
        return "openai"

    def _get_provider_params(self, model: str) -> dict[str, Any]:
        """Get api_key / api_base to pass directly to acompletion().

        Raises:
            LLMError: If the provider needs a credential and none is configured.
        """
        provider = self._provider_for_model(model)

        if provider == "ollama":
            return {"api_base": self._settings.ollama_base_url}

        api_key = self._settings.get_api_key(provider)
        if self._settings.requires_api_key(provider) and not api_key:
            raise LLMError(
                message=f"No API key configured for provider '{provider}'",
                model=model,
                error_code="missing_credential",
            )
        return {"api_key": api_key}

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        messages: Optional[list[Message]] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs,
    ) -> LLMResponse:
        """Generate a completion for the given prompt.

        Args:
            prompt: User prompt text.
            model: Override default model for this request.
            system_prompt: Optional system prompt to set context.
            messages: Previous conversation messages (if multi-turn).
            temperature: Sampling temperature (0-2). Falls back to settings.
            max_tokens: Maximum tokens to generate. Falls back to settings.
            **kwargs: Additional LiteLLM parameters.

        Returns:
            LLMResponse with generated content and metadata.

        Raises:
            LLMError: If the credential is missing or generation fails.
            ValueError: If prompt is empty.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        use_model = model or self._model

        chat_messages: list[dict[str, str]] = []

        if system_prompt:
            chat_messages.append({"role": "system", "content": system_prompt})

        if messages:
            chat_messages.extend([m.to_dict() for m in messages])

        chat_messages.append({"role": "user", "content": prompt})

        # Raises before any network call when the credential is missing
        provider_params = self._get_provider_params(use_model)

        try:
            response = await acompletion(
                model=use_model,
                messages=chat_messages,
                temperature=self._settings.temperature if temperature is None else temperature,
                max_tokens=max_tokens or self._settings.max_tokens,
                timeout=self._timeout,
                **provider_params,
                **kwargs,
            )

            content = response.choices[0].message.content or ""
            finish_reason = response.choices[0].finish_reason or "stop"

            usage = getattr(response, "usage", None)
            tokens_input = getattr(usage, "prompt_tokens", 0) or 0
            tokens_output = getattr(usage, "completion_tokens", 0) or 0

            logger.debug(
                "Completion generated: model=%s, tokens_in=%d, tokens_out=%d",
                use_model,
                tokens_input,
                tokens_output,
            )

            return LLMResponse(
                content=content,
                model=use_model,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                finish_reason=finish_reason,
                raw_response=response,
            )

        except Exception as e:
            logger.error(
                "Completion failed: model=%s, prompt_length=%d, error=%s",
                use_model,
                len(prompt),
                str(e),
            )
            raise LLMError(
                message=f"Completion failed: {str(e)}",
                model=use_model,
                original_error=e,
            ) from e

    async def generate(self, prompt_spec: PromptSpec) -> str:
        """Run a PromptSpec and return the raw generated text.

        Args:
            prompt_spec: Prompt to send.

        Returns:
            Raw model output.

        Raises:
            LLMError: If generation fails or returns no content.
        """
        response = await self.complete(
            prompt=prompt_spec.user_message,
            model=prompt_spec.model,
            system_prompt=prompt_spec.system_instruction,
            messages=prompt_spec.conversation_tail,
            temperature=prompt_spec.temperature,
            max_tokens=prompt_spec.max_tokens,
        )

        if not response.content.strip():
            raise LLMError(
                message="Model returned empty content",
                model=response.model,
                error_code="empty_response",
            )

        return response.content

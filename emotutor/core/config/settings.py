# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for Emotutor.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from emotutor.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.tutor.generation_timeout_seconds)
    30.0
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["openai", "anthropic", "google", "ollama"]


class DatabaseSettings(BaseSettings):
    """Database configuration for the learner history store.

    Attributes:
        enabled: Whether to back the store with the database.
            When disabled, an in-memory store is used.
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    enabled: bool = False
    user: str = "emotutor"
    password: SecretStr = SecretStr("emotutor_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "emotutor"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class LLMSettings(BaseSettings):
    """LLM provider configuration using LiteLLM.

    Supports multiple providers: openai, anthropic, google, ollama.
    LiteLLM handles provider routing based on model prefix.

    Attributes:
        default_provider: Default LLM provider to use.
        openai_api_key: OpenAI API key.
        openai_default_model: Default OpenAI model.
        anthropic_api_key: Anthropic API key.
        anthropic_default_model: Default Anthropic model.
        google_api_key: Google AI API key.
        google_default_model: Default Google model.
        ollama_base_url: Base URL for an Ollama server.
        ollama_default_model: Default Ollama model.
        temperature: Sampling temperature for tutor replies.
        max_tokens: Upper bound on generated tokens per reply.
        request_timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
    )

    default_provider: ProviderName = Field(
        default="openai",
        validation_alias="LLM_DEFAULT_PROVIDER",
    )

    # OpenAI
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    openai_default_model: str = Field(
        default="gpt-4o",
        validation_alias="OPENAI_DEFAULT_MODEL",
    )

    # Anthropic
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="ANTHROPIC_API_KEY",
    )
    anthropic_default_model: str = Field(
        default="claude-3-5-sonnet-20241022",
        validation_alias="ANTHROPIC_DEFAULT_MODEL",
    )

    # Google
    google_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="GOOGLE_API_KEY",
    )
    google_default_model: str = Field(
        default="gemini-2.0-flash",
        validation_alias="GOOGLE_DEFAULT_MODEL",
    )

    # Ollama (local inference, no credential)
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        validation_alias="OLLAMA_BASE_URL",
    )
    ollama_default_model: str = Field(
        default="qwen2.5:7b",
        validation_alias="OLLAMA_DEFAULT_MODEL",
    )

    temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)
    request_timeout: float = 60.0

    def get_default_model(self) -> str:
        """Get the default model for the configured provider.

        Returns:
            Model identifier string in LiteLLM format.
        """
        models = {
            "openai": self.openai_default_model,
            "anthropic": self.anthropic_default_model,
            "google": f"gemini/{self.google_default_model}",
            "ollama": f"ollama/{self.ollama_default_model}",
        }
        return models[self.default_provider]

    def requires_api_key(self, provider: ProviderName | None = None) -> bool:
        """Check whether a provider needs an API credential."""
        return (provider or self.default_provider) != "ollama"

    def get_api_key(self, provider: ProviderName | None = None) -> str | None:
        """Get the configured API key for a provider.

        Args:
            provider: Provider name. Defaults to the configured default provider.

        Returns:
            The secret value, or None if no key is configured.
        """
        keys = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "google": self.google_api_key,
            "ollama": None,
        }
        secret = keys[provider or self.default_provider]
        return secret.get_secret_value() if secret else None


class TutorSettings(BaseSettings):
    """Tutoring engine configuration.

    Attributes:
        generation_timeout_seconds: Bound on the external generation call.
        store_timeout_seconds: Bound on each learner-store read.
        recent_sessions_limit: Number of past sessions read per request.
        progress_records_limit: Number of progress records read per request.
        persisted_turns: Conversation turns kept in the persisted context blob.
        prompt_history_turns: Conversation turns embedded in the LLM prompt.
        classifier_history_turns: Tutor turns inspected for emotional carry-over.
        side_effect_error_buffer: Most recent side-effect failures kept for drain().
    """

    model_config = SettingsConfigDict(
        env_prefix="TUTOR_",
        extra="ignore",
    )

    generation_timeout_seconds: float = Field(default=30.0, gt=0)
    store_timeout_seconds: float = Field(default=10.0, gt=0)
    recent_sessions_limit: int = Field(default=25, gt=0)
    progress_records_limit: int = Field(default=20, gt=0)
    persisted_turns: int = Field(default=5, ge=0)
    prompt_history_turns: int = Field(default=3, ge=0)
    classifier_history_turns: int = Field(default=3, ge=0)
    side_effect_error_buffer: int = Field(default=100, gt=0)


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        title: OpenAPI title.
        version: API version reported by the health endpoint.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    title: str = "Emotutor API"
    version: str = "1.0.0"


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        audit_log_level: Level of the audit event stream.
        audit_log_file: File the audit stream is written to. Stdout if unset.
        database: Learner store database settings.
        llm: LLM provider settings.
        tutor: Tutoring engine settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    audit_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    audit_log_file: str | None = None

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    tutor: TutorSettings = Field(default_factory=TutorSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production" and self.database.enabled:
            if self.database.password.get_secret_value() == "emotutor_password":
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DB_PASSWORD environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()

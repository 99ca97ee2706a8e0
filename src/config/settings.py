# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "google"
    llm_default_model: str = "gemini-2.5-flash"
    llm_default_temperature: float = 0.4
    llm_max_tokens: int = 8192

    # Provider API keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("google_api_key", "gemini_api_key"),
    )
    ollama_base_url: str = "http://localhost:11434"

    # === Generation ===
    generation_timeout_s: float = 60.0
    generation_max_retries: int = 1
    generation_retry_base_delay_s: float = 1.0

    # === Cache ===
    cache_backend: Literal["memory", "sqlite", "redis"] = "sqlite"
    cache_root: Path = Path("~/.careerpath/cache")
    cache_redis_url: str = ""
    cache_schema_version: int = 1
    cache_roadmap_ttl_days: float = 30
    cache_topic_resources_ttl_days: float = 7
    cache_sweep_interval_s: float = 3600.0
    cache_single_flight: bool = False

    # === Durable roadmap records ===
    roadmap_store_backend: Literal["memory", "sqlite"] = "sqlite"
    roadmap_db_path: Path = Path("~/.careerpath/roadmaps.db")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("generation_max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("generation_max_retries must be >= 0")
        return v

    @field_validator("cache_roadmap_ttl_days", "cache_topic_resources_ttl_days")
    @classmethod
    def validate_ttl(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("cache TTL must be > 0 days")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_BACKEND=redis requires CACHE_REDIS_URL")

        if self.generation_timeout_s <= 0:
            errors.append("GENERATION_TIMEOUT_S must be > 0")

        if self.cache_sweep_interval_s <= 0:
            errors.append("CACHE_SWEEP_INTERVAL_S must be > 0")

        if self.cache_schema_version < 1:
            errors.append("CACHE_SCHEMA_VERSION must be >= 1")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    def api_key_for(self, provider: str) -> str:
        """Return the configured API key for a provider ('' if none)."""
        return {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "google": self.google_api_key,
        }.get(provider, "")


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-process config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

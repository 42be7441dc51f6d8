"""Environment-driven pipeline settings."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from opportunity_scout.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PipelineSettings(BaseSettings):
    """Tunable policy and collaborator settings for one pipeline.

    Each field reads the environment variable of the same name in upper
    case (SEARCH_PROVIDER, ADMISSION_THRESHOLD, ...) or the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Collaborators
    search_provider: Literal["tavily", "searxng"] = "tavily"
    tavily_api_key: str = ""
    searxng_url: str = "http://localhost:8888"
    reasoning_provider: Literal["ollama", "openai", "none"] = "ollama"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None
    profile_path: str = "profile.yaml"

    # Fan-out
    max_queries: int = Field(default=5, ge=1, le=5)
    max_results_per_query: int = Field(default=8, ge=1)
    max_postings_to_score: int = Field(default=15, ge=1)
    search_workers: int = Field(default=5, ge=1)
    scoring_workers: int = Field(default=8, ge=1)

    # Admission and buckets
    admission_threshold: int = Field(default=40, ge=0, le=100)
    high_match_threshold: int = Field(default=70, ge=0, le=100)
    medium_match_threshold: int = Field(default=40, ge=0, le=100)
    high_match_cap: int = Field(default=10, ge=0)
    medium_match_cap: int = Field(default=5, ge=0)
    low_match_cap: int = Field(default=3, ge=0)

    run_timeout_secs: float = Field(default=30.0, gt=0)
    default_location: str = "India"

    @field_validator("search_provider", "reasoning_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("openai_base_url", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        return None if isinstance(v, str) and not v.strip() else v

    @model_validator(mode="after")
    def check_bucket_order(self) -> PipelineSettings:
        if self.medium_match_threshold > self.high_match_threshold:
            raise ValueError("medium_match_threshold must not exceed high_match_threshold")
        return self


def load_settings(env_file: str | None = ".env") -> PipelineSettings:
    """Build settings from the environment and ``env_file`` (None skips the file).

    Raises:
        ConfigurationError: If a value fails validation.
    """
    try:
        settings = PipelineSettings(_env_file=env_file)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid pipeline settings: {e}") from e

    logger.debug(
        "Settings loaded: search=%s reasoning=%s admission=%d",
        settings.search_provider,
        settings.reasoning_provider,
        settings.admission_threshold,
    )
    return settings

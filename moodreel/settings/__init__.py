"""Centralized configuration for the MoodReel project.

Every value can be overridden from the environment or the .env file;
the defaults are enough to serve an existing dataset.

Usage:
    from moodreel.settings import settings

    settings.tmdb.api_key
    settings.pipeline.batch_size
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moodreel.settings.ai import LLMSettings
from moodreel.settings.api import APISettings, CORSSettings, RateLimitSettings
from moodreel.settings.base import LoggingSettings, PathsSettings, PipelineSettings
from moodreel.settings.sources import TMDBSettings

__all__ = [
    # Main
    "Settings",
    "settings",
    # Base
    "PathsSettings",
    "LoggingSettings",
    "PipelineSettings",
    # API
    "APISettings",
    "RateLimitSettings",
    "CORSSettings",
    # Sources
    "TMDBSettings",
    # AI
    "LLMSettings",
    # Utilities
    "get_masked_settings",
    "print_services_status",
]

ENVIRONMENTS = frozenset({"development", "production", "test"})
SECRET_FIELDS = [("tmdb", "api_key")]
MASK = "***MASKED***"


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Every configuration section of the app, loaded once at import."""

    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    paths: PathsSettings = Field(default_factory=PathsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)

    api: APISettings = Field(default_factory=APISettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        v = v.lower()
        if v not in ENVIRONMENTS:
            raise ValueError(f"ENVIRONMENT must be one of {sorted(ENVIRONMENTS)}")
        return v

    def model_post_init(self, _: Any) -> None:
        """Create the data and log directories."""
        self.paths.ensure_directories()


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

settings = Settings()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_masked_settings() -> dict[str, Any]:
    """Dump the settings with API keys replaced, safe to log."""
    config = settings.model_dump()
    for section, key in SECRET_FIELDS:
        if config.get(section, {}).get(key):
            config[section][key] = MASK
    return config


def print_services_status() -> None:
    """Print configuration status of the external services."""
    services = [
        ("TMDB API", settings.tmdb.is_configured),
        ("Local LLM", settings.llm.is_configured),
        ("Dataset", settings.paths.dataset_path.exists()),
    ]

    print("\nSERVICES STATUS:")
    print("-" * 40)
    for name, configured in services:
        status = "OK " if configured else "-- "
        print(f"  {status} {name}")
    print("-" * 40)

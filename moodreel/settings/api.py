"""API configuration settings.

FastAPI, rate limiting, and CORS settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """FastAPI configuration.

    Attributes:
        host: API host address.
        port: API port.
        reload: Enable auto-reload in development.
        workers: Number of worker processes.
        default_limit: Recommendations returned when no limit is given.
        max_limit: Largest accepted recommendation limit.
    """

    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=8000, alias="API_PORT")
    reload: bool = Field(default=True, alias="API_RELOAD")
    workers: int = Field(default=1, alias="API_WORKERS")
    title: str = Field(default="MoodReel API", alias="API_TITLE")
    version: str = Field(default="1.0.0", alias="API_VERSION")
    default_limit: int = Field(default=12, alias="API_DEFAULT_LIMIT")
    max_limit: int = Field(default=50, alias="API_MAX_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class RateLimitSettings(BaseSettings):
    """Per-client request throttling.

    Attributes:
        per_minute: Max requests per minute.
        per_hour: Max requests per hour.
        max_clients: Client IPs tracked at once, least recently seen dropped first.
    """

    per_minute: int = Field(default=100, alias="RATE_LIMIT_PER_MINUTE")
    per_hour: int = Field(default=1000, alias="RATE_LIMIT_PER_HOUR")
    max_clients: int = Field(default=10_000, ge=1, alias="RATE_LIMIT_MAX_CLIENTS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class CORSSettings(BaseSettings):
    """CORS configuration.

    Attributes:
        origins_raw: Comma-separated allowed origins.
    """

    origins_raw: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def origins(self) -> list[str]:
        """Parse origins from comma-separated string."""
        return [o.strip() for o in self.origins_raw.split(",") if o.strip()]

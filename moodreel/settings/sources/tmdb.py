"""TMDB API configuration settings.

Source of raw movie metadata and live mood discovery.
"""

from datetime import datetime

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TMDBSettings(BaseSettings):
    """TMDB API configuration.

    Attributes:
        api_key: TMDB API key (required for harvest and discovery).
        base_url: TMDB API base URL.
        image_base_url: Poster CDN base URL.
        backdrop_base_url: Backdrop CDN base URL.
        language: Language for API responses.
    """

    api_key: str = Field(default="", alias="TMDB_API_KEY")
    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        alias="TMDB_BASE_URL",
    )
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500",
        alias="TMDB_IMAGE_BASE_URL",
    )
    backdrop_base_url: str = Field(
        default="https://image.tmdb.org/t/p/original",
        alias="TMDB_BACKDROP_BASE_URL",
    )

    language: str = Field(default="en-US", alias="TMDB_LANGUAGE")
    include_adult: bool = Field(default=False, alias="TMDB_INCLUDE_ADULT")
    watch_region: str = Field(default="US", alias="TMDB_WATCH_REGION")

    # Harvest filters
    min_rating: float = Field(default=7.5, alias="TMDB_MIN_RATING")
    min_votes: int = Field(default=500, alias="TMDB_MIN_VOTES")
    max_year: int = Field(default=2023, alias="TMDB_MAX_YEAR")
    pages_per_era: int = Field(default=8, alias="TMDB_PAGES_PER_ERA")
    top_rated_pages: int = Field(default=10, alias="TMDB_TOP_RATED_PAGES")

    # Live discovery
    discover_min_rating: float = Field(default=7.0, alias="TMDB_DISCOVER_MIN_RATING")
    discover_min_votes: int = Field(default=100, alias="TMDB_DISCOVER_MIN_VOTES")
    discover_pages: int = Field(default=2, ge=1, alias="TMDB_DISCOVER_PAGES")
    discover_min_results: int = Field(default=3, ge=0, alias="TMDB_DISCOVER_MIN_RESULTS")
    discover_detail_count: int = Field(default=12, alias="TMDB_DISCOVER_DETAIL_COUNT")

    # Rate limiting
    requests_per_period: int = Field(default=40, alias="TMDB_REQUESTS_PER_PERIOD")
    period_seconds: int = Field(default=10, alias="TMDB_PERIOD_SECONDS")
    min_request_delay: float = Field(default=0.25, alias="TMDB_MIN_REQUEST_DELAY")
    timeout_seconds: float = Field(default=30.0, alias="TMDB_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if TMDB API key is configured."""
        return bool(self.api_key and self.api_key != "your_api_key_here")

    @property
    def requests_per_second(self) -> float:
        """Calculate requests per second from period settings."""
        if self.period_seconds <= 0:
            return 1.0
        return self.requests_per_period / self.period_seconds

    @field_validator("min_rating")
    @classmethod
    def validate_min_rating(cls, v: float) -> float:
        """Validate rating floor is on the TMDB scale."""
        if not 0.0 <= v <= 10.0:
            raise ValueError("TMDB_MIN_RATING must be between 0.0 and 10.0")
        return v

    @field_validator("max_year")
    @classmethod
    def validate_max_year(cls, v: int) -> int:
        """Clamp maximum year to the current year."""
        current_year = datetime.now().year
        if v > current_year:
            return current_year
        return v

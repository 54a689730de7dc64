"""Base configuration settings.

Contains foundational settings for paths, logging, and the dataset pipeline.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# PROJECT ROOT DETECTION
# =============================================================================

_PROJECT_ROOT = Path(__file__).parent.parent.parent


def get_project_root() -> Path:
    """Get project root directory."""
    return _PROJECT_ROOT


# =============================================================================
# PATH SETTINGS
# =============================================================================


class PathsSettings(BaseSettings):
    """Data and logs paths configuration.

    Attributes:
        dataset_file: Enriched dataset served by the API (relative to
            the project root or absolute).
    """

    dataset_file: str = Field(
        default="data/processed/movies.json",
        alias="MOODREEL_DATASET_FILE",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def data_dir(self) -> Path:
        """Root data directory."""
        return _PROJECT_ROOT / "data"

    @property
    def raw_dir(self) -> Path:
        """Raw harvests from TMDB."""
        return self.data_dir / "raw"

    @property
    def processed_dir(self) -> Path:
        """Enriched datasets."""
        return self.data_dir / "processed"

    @property
    def checkpoints_dir(self) -> Path:
        """Build pipeline progress files."""
        return self.data_dir / "checkpoints"

    @property
    def logs_dir(self) -> Path:
        """Application logs."""
        return _PROJECT_ROOT / "logs"

    @property
    def dataset_path(self) -> Path:
        """Absolute path of the served dataset."""
        path = Path(self.dataset_file)
        if path.is_absolute():
            return path
        return _PROJECT_ROOT / path

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        directories = [
            self.data_dir,
            self.raw_dir,
            self.processed_dir,
            self.checkpoints_dir,
            self.logs_dir,
        ]
        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)


# =============================================================================
# LOGGING SETTINGS
# =============================================================================


class LoggingSettings(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Log files directory.
        to_file: Also write a dated log file per logger.
    """

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid LOG_LEVEL. Valid: {valid_levels}")
        return v_upper


# =============================================================================
# PIPELINE SETTINGS
# =============================================================================


class PipelineSettings(BaseSettings):
    """Dataset build pipeline configuration.

    Attributes:
        top_n: Number of best-scored movies kept in the dataset.
        batch_size: Movies processed between two progress saves.
        call_delay: Pause between two AI calls for the same movie (seconds).
        batch_delay: Pause between two batches (seconds).
        max_rate_limit_attempts: Attempts per AI call on rate-limit errors.
        max_other_attempts: Attempts per AI call on any other error.
        initial_backoff: First back-off interval on rate-limit errors (seconds).
        max_backoff: Ceiling of the rate-limit back-off interval (seconds).
        other_error_delay: Fixed delay before retrying other errors (seconds).
    """

    top_n: int = Field(default=250, alias="PIPELINE_TOP_N")
    batch_size: int = Field(default=10, alias="PIPELINE_BATCH_SIZE")
    call_delay: float = Field(default=3.0, alias="PIPELINE_CALL_DELAY")
    batch_delay: float = Field(default=10.0, alias="PIPELINE_BATCH_DELAY")

    max_rate_limit_attempts: int = Field(default=8, alias="PIPELINE_MAX_RATE_LIMIT_ATTEMPTS")
    max_other_attempts: int = Field(default=3, alias="PIPELINE_MAX_OTHER_ATTEMPTS")
    initial_backoff: float = Field(default=5.0, alias="PIPELINE_INITIAL_BACKOFF")
    max_backoff: float = Field(default=120.0, alias="PIPELINE_MAX_BACKOFF")
    other_error_delay: float = Field(default=2.0, alias="PIPELINE_OTHER_ERROR_DELAY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("top_n", "batch_size", "max_rate_limit_attempts", "max_other_attempts")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counters are strictly positive."""
        if v <= 0:
            raise ValueError("Pipeline counters must be > 0")
        return v

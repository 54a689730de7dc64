"""Settings for the local GGUF model behind enrichment and chat."""

from pathlib import Path

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moodreel.settings.base import get_project_root

# =============================================================================
# LLM SETTINGS
# =============================================================================


class LLMSettings(BaseSettings):
    """Local LLM configuration (llama-cpp-python).

    Enrichment and chat are optional: with no model file on disk the
    pipeline produces records without AI fields and the chat endpoint
    answers 503.

    Attributes:
        model_path: Path to GGUF model file (relative to project root or absolute).
        context_length: Context window size in tokens.
        max_tokens: Maximum tokens to generate per response.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        n_gpu_layers: Layers to offload to GPU (-1 = all, 0 = CPU only).
        chat_format: llama.cpp chat format, must support tool calls for chat.
    """

    model_path: str = Field(default="models/model.gguf", alias="LLM_MODEL_PATH")
    context_length: int = Field(default=4096, alias="LLM_CONTEXT_LENGTH")
    max_tokens: int = Field(default=512, alias="LLM_MAX_TOKENS")
    temperature: float = Field(default=0.7, alias="LLM_TEMPERATURE")
    n_gpu_layers: int = Field(default=0, alias="LLM_N_GPU_LAYERS")
    chat_format: str = Field(default="chatml-function-calling", alias="LLM_CHAT_FORMAT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate temperature is in valid range."""
        if not 0.0 <= v <= 2.0:
            raise ValueError("LLM_TEMPERATURE must be between 0.0 and 2.0")
        return v

    @field_validator("context_length", "max_tokens")
    @classmethod
    def validate_token_counts(cls, v: int, info: ValidationInfo) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @property
    def absolute_model_path(self) -> Path:
        """``model_path`` resolved against the project root."""
        path = Path(self.model_path)
        if path.is_absolute():
            return path
        return get_project_root() / path

    @property
    def is_configured(self) -> bool:
        """True once a model file is present on disk."""
        return self.absolute_model_path.exists()

"""Local LLM access."""

from moodreel.services.llm.llm_service import (
    LLMRateLimitError,
    LLMService,
    LLMServiceError,
    get_llm_service,
)

__all__ = ["LLMRateLimitError", "LLMService", "LLMServiceError", "get_llm_service"]

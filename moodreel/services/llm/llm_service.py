"""LLM service wrapping llama-cpp-python.

Local inference used to write dataset reviews, mood tags and viewing
suggestions, and to turn chat messages into TMDB search calls.
"""

from collections.abc import Iterator
from functools import lru_cache
from typing import Any

from moodreel.settings import settings
from moodreel.utils.logger import setup_logger

logger = setup_logger("services.llm")


class LLMServiceError(Exception):
    """Raised when the model cannot be loaded or produces no output."""


class LLMRateLimitError(LLMServiceError):
    """Raised when a model backend reports a quota or rate limit."""


class LLMService:
    """Thin wrapper around a llama.cpp `Llama` instance.

    The GGUF file is opened on first access to :attr:`llm`, so building
    the service (and the API app holding it) stays cheap when no model
    is installed. Per-call arguments override the configured sampling.
    """

    def __init__(
        self,
        model_path: str | None = None,
        context_length: int | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        n_gpu_layers: int | None = None,
        chat_format: str | None = None,
    ) -> None:
        """Any argument left as None falls back to ``settings.llm``."""
        llm_settings = settings.llm
        self._model_path = model_path or str(llm_settings.absolute_model_path)
        self._context_length = context_length or llm_settings.context_length
        self._max_tokens = max_tokens or llm_settings.max_tokens
        self._temperature = temperature if temperature is not None else llm_settings.temperature
        self._n_gpu_layers = n_gpu_layers if n_gpu_layers is not None else llm_settings.n_gpu_layers
        self._chat_format = chat_format or llm_settings.chat_format
        self._llm = None
        self._logger = logger

    @property
    def llm(self):
        """The loaded model, opened on first access."""
        if self._llm is None:
            from llama_cpp import Llama

            self._logger.info(
                f"Opening GGUF model {self._model_path} "
                f"with {self._context_length} context tokens"
            )
            try:
                self._llm = Llama(
                    model_path=self._model_path,
                    n_ctx=self._context_length,
                    n_gpu_layers=self._n_gpu_layers,
                    chat_format=self._chat_format,
                    verbose=False,
                )
            except ValueError as e:
                raise LLMServiceError(f"Cannot load model {self._model_path}: {e}") from e
            self._logger.info("Model ready")
        return self._llm

    def _sampling(self, max_tokens: int | None, temperature: float | None) -> dict[str, Any]:
        return {
            "max_tokens": max_tokens or self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
        }

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        stop: list[str] | None = None,
    ) -> dict:
        """Raw completion of ``prompt``.

        Returns:
            ``{"text": ..., "usage": ...}`` where ``usage`` is the token
            count dict reported by llama.cpp (empty when absent).
        """
        result = self.llm.create_completion(
            prompt=prompt,
            stop=stop or [],
            **self._sampling(max_tokens, temperature),
        )

        return {
            "text": result["choices"][0]["text"],
            "usage": result.get("usage", {}),
        }

    def generate_chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> dict:
        """Chat completion over OpenAI-style ``messages``.

        A null assistant message comes back as an empty ``text``.
        """
        result = self.llm.create_chat_completion(
            messages=messages,
            **self._sampling(max_tokens, temperature),
        )

        return {
            "text": result["choices"][0]["message"]["content"] or "",
            "usage": result.get("usage", {}),
        }

    def generate_with_tools(
        self,
        messages: list[dict[str, str]],
        tools: list[dict[str, Any]],
        tool_choice: str | dict[str, Any] = "auto",
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> dict:
        """Chat completion allowed to call function tools.

        Args:
            messages: Conversation messages.
            tools: OpenAI-style function tool schemas.
            tool_choice: "auto", "none" or a forced function.
            max_tokens: Override max tokens for this call.
            temperature: Override temperature for this call.

        Returns:
            Dict with keys:
                - text: Assistant text, empty when only tools were called.
                - tool_calls: List of {name, arguments} with raw JSON arguments.
                - usage: Token usage stats.
        """
        result = self.llm.create_chat_completion(
            messages=messages,
            tools=tools,
            tool_choice=tool_choice,
            **self._sampling(max_tokens, temperature),
        )

        message = result["choices"][0]["message"]
        tool_calls = [
            {
                "name": call["function"]["name"],
                "arguments": call["function"].get("arguments") or "{}",
            }
            for call in message.get("tool_calls") or []
        ]
        return {
            "text": message.get("content") or "",
            "tool_calls": tool_calls,
            "usage": result.get("usage", {}),
        }

    def generate_stream(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> Iterator[str]:
        """Stream chat completion token by token.

        Yields:
            Generated text chunks as they become available.
        """
        stream = self.llm.create_chat_completion(
            messages=messages,
            stream=True,
            **self._sampling(max_tokens, temperature),
        )

        for chunk in stream:
            delta = chunk["choices"][0].get("delta", {})
            content = delta.get("content")
            if content:
                yield content

    @property
    def is_loaded(self) -> bool:
        return self._llm is not None

    @property
    def model_path(self) -> str:
        return self._model_path


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    """Process-wide service built from the current settings."""
    return LLMService()

"""Conversational movie search.

The model receives the conversation and a single `search_movies` tool.
Its arguments are validated and forwarded as TMDB discover filters; the
TMDB results are returned without any re-ranking.
"""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from moodreel.etl.tmdb.client import TMDBClient
from moodreel.recommendation.moods import TMDB_GENRES
from moodreel.services.llm.llm_service import LLMService
from moodreel.utils.logger import setup_logger

logger = setup_logger("services.chat")

# =============================================================================
# PROMPT AND TOOL
# =============================================================================

_GENRE_REFERENCE = ", ".join(
    f"{genre_id}: {name}" for genre_id, name in TMDB_GENRES.items() if genre_id != 10770
)

SYSTEM_PROMPT = f"""You are a professional movie recommendation assistant. \
You need to understand the user's requirements and convert them into key movie search elements.

Genre ID reference:
{_GENRE_REFERENCE}

Analyze the user's request and call the search_movies tool with appropriate parameters."""

SEARCH_TOOL_NAME = "search_movies"

SEARCH_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": SEARCH_TOOL_NAME,
        "description": "Search movies by genre ids, keywords and optional filters.",
        "parameters": {
            "type": "object",
            "properties": {
                "genres": {
                    "type": "string",
                    "description": "Comma-separated genre IDs, e.g.: 28,12,16",
                },
                "keywords": {
                    "type": "string",
                    "description": "Comma-separated keywords, e.g.: action,adventure",
                },
                "options": {
                    "type": "object",
                    "properties": {
                        "vote_average.gte": {"type": "number"},
                        "sort_by": {"type": "string"},
                        "with_original_language": {"type": "string"},
                        "primary_release_year": {"type": "integer"},
                        "with_runtime.gte": {"type": "integer"},
                        "with_runtime.lte": {"type": "integer"},
                        "without_genres": {"type": "string"},
                    },
                },
            },
            "required": ["genres", "keywords", "options"],
        },
    },
}

_NUMERIC_LIST = re.compile(r"^\d+(\s*[,|]\s*\d+)*$")


# =============================================================================
# TOOL ARGUMENTS
# =============================================================================


class MovieSearchOptions(BaseModel):
    """Optional discover filters, keyed by their TMDB parameter names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    vote_average_gte: float | None = Field(default=None, alias="vote_average.gte", ge=0, le=10)
    sort_by: str | None = None
    with_original_language: str | None = None
    primary_release_year: int | None = None
    with_runtime_gte: int | None = Field(default=None, alias="with_runtime.gte", ge=0)
    with_runtime_lte: int | None = Field(default=None, alias="with_runtime.lte", ge=0)
    without_genres: str | None = None


class MovieSearchArguments(BaseModel):
    """Arguments of the search_movies tool.

    Attributes:
        genres: Comma-separated TMDB genre ids.
        keywords: Comma-separated keywords.
        options: Extra discover filters.
    """

    model_config = ConfigDict(extra="ignore")

    genres: str = ""
    keywords: str = ""
    options: MovieSearchOptions = Field(default_factory=MovieSearchOptions)

    def to_discover_filters(self) -> dict[str, Any]:
        """Translate to TMDB discover query parameters.

        Keywords are only forwarded when they are TMDB keyword ids;
        free-text keywords stay informational.
        """
        filters: dict[str, Any] = self.options.model_dump(by_alias=True, exclude_none=True)
        genres = self.genres.replace(" ", "")
        if genres:
            filters["with_genres"] = genres
        keywords = self.keywords.strip()
        if keywords and _NUMERIC_LIST.match(keywords):
            filters["with_keywords"] = keywords.replace(" ", "")
        return filters


# =============================================================================
# SERVICE
# =============================================================================


class ChatQueryError(Exception):
    """Raised when the model produced unusable tool arguments."""


@dataclass
class ChatSearchResult:
    """Answer to a chat message.

    Attributes:
        reply: Assistant text, possibly empty.
        arguments: Validated tool arguments, None without a tool call.
        movies: TMDB discover results as returned by the API.
        total_results: TMDB total result count.
    """

    reply: str
    arguments: MovieSearchArguments | None = None
    movies: list[dict[str, Any]] = field(default_factory=list)
    total_results: int = 0


class ChatSearchService:
    """Turn a conversation into one TMDB discover query."""

    def __init__(
        self,
        llm: LLMService,
        client_factory: Callable[[], TMDBClient] = TMDBClient,
    ) -> None:
        self._llm = llm
        self._client_factory = client_factory

    def handle(self, messages: list[dict[str, str]]) -> ChatSearchResult:
        """Answer the last user message.

        Args:
            messages: Conversation as role/content dicts, oldest first.

        Returns:
            Reply text and search results.

        Raises:
            ChatQueryError: If the tool arguments are not valid JSON or
                do not match the tool schema.
            TMDBClientError: If the discover query fails.
        """
        completion = self._llm.generate_with_tools(
            messages=[{"role": "system", "content": SYSTEM_PROMPT}, *messages],
            tools=[SEARCH_TOOL],
        )

        calls = [c for c in completion["tool_calls"] if c["name"] == SEARCH_TOOL_NAME]
        if not calls:
            logger.info("Model answered without searching")
            return ChatSearchResult(reply=completion["text"])

        arguments = self.parse_arguments(calls[0]["arguments"])
        filters = arguments.to_discover_filters()
        logger.info(f"Chat search with filters {filters}")

        sort_by = filters.pop("sort_by", "popularity.desc")
        with self._client_factory() as client:
            response = client.discover_movies(page=1, sort_by=sort_by, filters=filters)

        return ChatSearchResult(
            reply=completion["text"],
            arguments=arguments,
            movies=response.get("results") or [],
            total_results=response.get("total_results", 0),
        )

    @staticmethod
    def parse_arguments(raw: str | dict[str, Any]) -> MovieSearchArguments:
        """Validate raw tool arguments.

        Raises:
            ChatQueryError: On malformed JSON or schema mismatch.
        """
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
            return MovieSearchArguments.model_validate(data)
        except json.JSONDecodeError as e:
            raise ChatQueryError(f"Tool arguments are not valid JSON: {e}") from e
        except ValidationError as e:
            raise ChatQueryError(f"Tool arguments do not match the schema: {e}") from e

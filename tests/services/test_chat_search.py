"""Unit tests for the conversational movie search."""

import json
from unittest.mock import MagicMock

import pytest

from moodreel.etl.tmdb.client import TMDBClientError
from moodreel.services.chat.search import (
    SEARCH_TOOL,
    SYSTEM_PROMPT,
    ChatQueryError,
    ChatSearchService,
    MovieSearchArguments,
)

MESSAGES = [{"role": "user", "content": "A funny animated movie from 2010"}]

DISCOVER_RESPONSE = {
    "page": 1,
    "results": [{"id": 10193, "title": "Toy Story 3"}, {"id": 38757, "title": "Tangled"}],
    "total_results": 2,
}


def _tool_completion(arguments, text: str = "") -> dict:
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return {
        "text": text,
        "tool_calls": [{"name": "search_movies", "arguments": raw}],
        "usage": {},
    }


@pytest.fixture
def tmdb_client() -> MagicMock:
    client = MagicMock()
    client.__enter__.return_value = client
    client.discover_movies.return_value = DISCOVER_RESPONSE
    return client


@pytest.fixture
def service(mock_llm: MagicMock, tmdb_client: MagicMock) -> ChatSearchService:
    return ChatSearchService(mock_llm, client_factory=lambda: tmdb_client)


class TestSearchArguments:
    @staticmethod
    def test_filters() -> None:
        arguments = MovieSearchArguments.model_validate(
            {
                "genres": "16, 35",
                "keywords": "9715,818",
                "options": {"vote_average.gte": 7, "primary_release_year": 2010},
            }
        )
        assert arguments.to_discover_filters() == {
            "vote_average.gte": 7.0,
            "primary_release_year": 2010,
            "with_genres": "16,35",
            "with_keywords": "9715,818",
        }

    @staticmethod
    def test_free_text_keywords_not_forwarded() -> None:
        arguments = MovieSearchArguments(genres="35", keywords="toys, friendship")
        assert "with_keywords" not in arguments.to_discover_filters()

    @staticmethod
    def test_empty_arguments() -> None:
        assert MovieSearchArguments().to_discover_filters() == {}

    @staticmethod
    def test_tool_schema_lists_options() -> None:
        properties = SEARCH_TOOL["function"]["parameters"]["properties"]
        assert set(properties["options"]["properties"]) == {
            "vote_average.gte",
            "sort_by",
            "with_original_language",
            "primary_release_year",
            "with_runtime.gte",
            "with_runtime.lte",
            "without_genres",
        }

    @staticmethod
    def test_system_prompt_has_genre_reference() -> None:
        assert "35: Comedy" in SYSTEM_PROMPT
        assert "10770" not in SYSTEM_PROMPT


class TestParseArguments:
    @staticmethod
    def test_invalid_json() -> None:
        with pytest.raises(ChatQueryError, match="not valid JSON"):
            ChatSearchService.parse_arguments("{genres: 35")

    @staticmethod
    def test_schema_mismatch() -> None:
        with pytest.raises(ChatQueryError, match="schema"):
            ChatSearchService.parse_arguments({"options": {"vote_average.gte": 42}})

    @staticmethod
    def test_accepts_mapping() -> None:
        assert ChatSearchService.parse_arguments({"genres": "18"}).genres == "18"


class TestHandle:
    @staticmethod
    def test_answer_without_tool_call(service, mock_llm, tmdb_client) -> None:
        mock_llm.generate_with_tools.return_value = {
            "text": "What kind of movie?",
            "tool_calls": [],
            "usage": {},
        }

        result = service.handle(MESSAGES)

        assert result.reply == "What kind of movie?"
        assert result.movies == []
        assert result.arguments is None
        tmdb_client.discover_movies.assert_not_called()

    @staticmethod
    def test_search(service, mock_llm, tmdb_client) -> None:
        mock_llm.generate_with_tools.return_value = _tool_completion(
            {
                "genres": "16,35",
                "keywords": "toys",
                "options": {"primary_release_year": 2010, "sort_by": "vote_count.desc"},
            }
        )

        result = service.handle(MESSAGES)

        assert [m["title"] for m in result.movies] == ["Toy Story 3", "Tangled"]
        assert result.total_results == 2
        assert result.arguments.genres == "16,35"
        tmdb_client.discover_movies.assert_called_once_with(
            page=1,
            sort_by="vote_count.desc",
            filters={"primary_release_year": 2010, "with_genres": "16,35"},
        )

    @staticmethod
    def test_default_sort(service, mock_llm, tmdb_client) -> None:
        mock_llm.generate_with_tools.return_value = _tool_completion({"genres": "18"})
        service.handle(MESSAGES)
        assert tmdb_client.discover_movies.call_args.kwargs["sort_by"] == "popularity.desc"

    @staticmethod
    def test_system_prompt_first(service, mock_llm) -> None:
        mock_llm.generate_with_tools.return_value = _tool_completion({"genres": "18"})
        service.handle(MESSAGES)

        sent = mock_llm.generate_with_tools.call_args.kwargs["messages"]
        assert sent[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert sent[1:] == MESSAGES

    @staticmethod
    def test_invalid_tool_arguments(service, mock_llm, tmdb_client) -> None:
        mock_llm.generate_with_tools.return_value = _tool_completion("not json")
        with pytest.raises(ChatQueryError):
            service.handle(MESSAGES)
        tmdb_client.discover_movies.assert_not_called()

    @staticmethod
    def test_tmdb_error_propagates(service, mock_llm, tmdb_client) -> None:
        mock_llm.generate_with_tools.return_value = _tool_completion({"genres": "18"})
        tmdb_client.discover_movies.side_effect = TMDBClientError("boom")
        with pytest.raises(TMDBClientError):
            service.handle(MESSAGES)

"""Unit tests for dataset models."""

import pytest
from pydantic import ValidationError

from moodreel.catalog.models import (
    MovieCollection,
    MovieRecord,
    era_for_year,
    score_from_vote_average,
    year_from_date,
)


class TestHelpers:
    @staticmethod
    @pytest.mark.parametrize(
        ("vote_average", "expected"),
        [(8.44, 84), (6.5, 65), (7.25, 73), (0, 0), (None, 0), (10, 100)],
    )
    def test_score_from_vote_average(vote_average, expected: int) -> None:
        assert score_from_vote_average(vote_average) == expected

    @staticmethod
    @pytest.mark.parametrize(
        ("year", "era"),
        [
            (1949, "classic"),
            (1950, "vintage"),
            (1999, "modern"),
            (2000, "contemporary"),
            (None, "unknown"),
        ],
    )
    def test_era_for_year(year, era: str) -> None:
        assert era_for_year(year) == era

    @staticmethod
    def test_year_from_date() -> None:
        assert year_from_date("1994-09-23") == 1994
        assert year_from_date("") is None
        assert year_from_date("abcd-01-01") is None


class TestMovieRecord:
    @staticmethod
    def test_minimal_record_gets_defaults() -> None:
        movie = MovieRecord.model_validate({"id": 1, "title": "Minimal"})
        assert movie.original_title == "Minimal"
        assert movie.overview == ""
        assert movie.genres == []
        assert movie.keywords == []
        assert movie.cast == []
        assert movie.vote_average == 0.0
        assert movie.score_percent == 0
        assert movie.mood_tags is None
        assert movie.era == "unknown"
        assert not movie.has_ai_enrichment

    @staticmethod
    def test_null_collections_become_empty() -> None:
        movie = MovieRecord.model_validate(
            {"id": 1, "title": "Nulls", "genres": None, "keywords": None, "directors": None}
        )
        assert movie.genres == []
        assert movie.directors == []

    @staticmethod
    def test_derived_fields() -> None:
        movie = MovieRecord.model_validate(
            {
                "id": 278,
                "title": "The Shawshank Redemption",
                "release_date": "1994-09-23",
                "vote_average": 8.7,
                "poster_path": "/poster.jpg",
                "genres": [{"id": 18, "name": "Drama"}],
            }
        )
        assert movie.release_year == 1994
        assert movie.era == "modern"
        assert movie.score_percent == 87
        assert movie.poster_url == "https://image.tmdb.org/t/p/w500/poster.jpg"
        assert movie.genre_names == ["Drama"]

    @staticmethod
    def test_supplied_score_is_kept() -> None:
        movie = MovieRecord.model_validate(
            {"id": 1, "title": "X", "vote_average": 8.0, "score_percent": 50}
        )
        assert movie.score_percent == 50

    @staticmethod
    def test_unknown_fields_ignored() -> None:
        movie = MovieRecord.model_validate({"id": 1, "title": "X", "popularity": 12.3})
        assert not hasattr(movie, "popularity")

    @staticmethod
    def test_vote_average_out_of_range() -> None:
        with pytest.raises(ValidationError):
            MovieRecord.model_validate({"id": 1, "title": "X", "vote_average": 11})

    @staticmethod
    def test_missing_title_rejected() -> None:
        with pytest.raises(ValidationError):
            MovieRecord.model_validate({"id": 1})

    @staticmethod
    def test_frozen() -> None:
        movie = MovieRecord.model_validate({"id": 1, "title": "X"})
        with pytest.raises(ValidationError):
            movie.title = "Y"


class TestMovieCollection:
    @staticmethod
    def test_bare_list_accepted() -> None:
        payload = [{"id": 1, "title": "A"}, {"id": 2, "title": "B"}]
        collection = MovieCollection.model_validate(payload)
        assert collection.count == 2
        assert [m.id for m in collection.movies] == [1, 2]

    @staticmethod
    def test_document_with_statistics(dataset_document) -> None:
        collection = MovieCollection.model_validate(dataset_document)
        assert collection.count == 4
        assert collection.avg_rating == 80.0
        assert collection.generated_at == "2024-05-01T10:00:00"

    @staticmethod
    def test_null_movies() -> None:
        collection = MovieCollection.model_validate({"movies": None})
        assert collection.movies == []
        assert collection.count == 0

"""Shared pytest fixtures."""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from moodreel.catalog.models import MovieRecord
from moodreel.catalog.repository import MovieCatalog, get_catalog
from moodreel.services.discovery.mood_discovery import get_mood_discovery_service


@pytest.fixture(autouse=True, scope="function")
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Mock env variables for reproducible settings instances."""
    # TMDB settings
    monkeypatch.setenv("TMDB_API_KEY", "test_api_key_12345678901234567890")
    monkeypatch.setenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")
    monkeypatch.setenv("TMDB_LANGUAGE", "en-US")

    # Pipeline settings
    monkeypatch.setenv("PIPELINE_CALL_DELAY", "0")
    monkeypatch.setenv("PIPELINE_BATCH_DELAY", "0")

    # CORS settings
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000")

    # Environment
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("LOG_LEVEL", "INFO")


@pytest.fixture(autouse=True)
def reset_singletons() -> None:
    """Drop the process-wide catalog and discovery service between tests."""
    yield
    get_catalog.cache_clear()
    get_mood_discovery_service.cache_clear()


# =============================================================================
# MOVIES
# =============================================================================


@pytest.fixture
def make_movie() -> Callable[..., MovieRecord]:
    """Factory building a validated MovieRecord.

    Genres and keywords may be given as plain names.
    """

    def _make(movie_id: int, title: str | None = None, **fields: Any) -> MovieRecord:
        for name in ("genres", "keywords"):
            if name in fields and fields[name] is not None:
                fields[name] = [
                    {"name": item} if isinstance(item, str) else item for item in fields[name]
                ]
        data = {"id": movie_id, "title": title or f"Movie {movie_id}", **fields}
        return MovieRecord.model_validate(data)

    return _make


@pytest.fixture
def scenario_movies(make_movie) -> list[MovieRecord]:
    """A tagged uplifting, B comedy only, C nothing but the best score."""
    return [
        make_movie(1, "A", mood_tags=["uplifting"], score_percent=90),
        make_movie(2, "B", genres=["Comedy"], score_percent=95),
        make_movie(3, "C", score_percent=99),
    ]


@pytest.fixture
def sample_movies(make_movie) -> list[MovieRecord]:
    """Small enriched dataset covering every tier."""
    return [
        make_movie(
            10,
            "The Sunny Side",
            release_date="1995-06-01",
            vote_average=8.1,
            genres=["Comedy", "Family"],
            keywords=["friendship"],
            mood_tags=["Heartwarming", "Uplifting", "funny", "warm", "light"],
        ),
        make_movie(
            11,
            "Night Chase",
            release_date="2012-03-10",
            vote_average=7.8,
            genres=["Action", "Thriller"],
            keywords=["car chase", "suspense"],
            mood_tags=["TENSE", "thrilling", "dark", "gripping", "intense"],
        ),
        make_movie(
            12,
            "Letters Home",
            release_date="1962-11-20",
            vote_average=8.4,
            genres=["Drama", "War"],
            keywords=["tragedy"],
            mood_tags=["melancholic", "heartwarming", "moving", "somber", "tender"],
        ),
        make_movie(
            13,
            "Quiet Harbour",
            release_date="2019-09-05",
            vote_average=7.6,
            genres=["Animation"],
        ),
    ]


@pytest.fixture
def catalog(sample_movies) -> MovieCatalog:
    return MovieCatalog.from_movies(sample_movies)


@pytest.fixture
def dataset_document(sample_movies) -> dict[str, Any]:
    """Dataset JSON document as written by the build."""
    return {
        "count": len(sample_movies),
        "generated_at": "2024-05-01T10:00:00",
        "avg_rating": 80.0,
        "movies": [m.model_dump(mode="json") for m in sample_movies],
    }


# =============================================================================
# EXTERNAL SERVICES
# =============================================================================


@pytest.fixture
def mock_llm() -> MagicMock:
    """LLMService double answering every chat call with the same text."""
    llm = MagicMock()
    llm.generate_chat.return_value = {"text": "A generated answer.", "usage": {}}
    return llm


@pytest.fixture
def tmdb_movie_details() -> dict[str, Any]:
    """TMDB movie details with every appended sub-resource."""
    return {
        "id": 550,
        "imdb_id": "tt0137523",
        "title": "Fight Club",
        "original_title": "Fight Club",
        "overview": "  A ticking-time-bomb insomniac and a soap salesman.  ",
        "tagline": "Mischief. Mayhem. Soap.",
        "release_date": "1999-10-15",
        "runtime": 139,
        "original_language": "en",
        "genres": [{"id": 18, "name": "Drama"}, {"id": 53, "name": "Thriller"}],
        "vote_average": 8.44,
        "vote_count": 27000,
        "popularity": 61.4,
        "poster_path": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
        "backdrop_path": "/hZkgoQYus5vegHoetLkCJzb17zJ.jpg",
        "videos": {
            "results": [
                {"site": "Vimeo", "type": "Trailer", "key": "vimeo1"},
                {"site": "YouTube", "type": "Teaser", "key": "teaser1"},
                {"site": "YouTube", "type": "Trailer", "key": "BdJKm16Co6M"},
            ]
        },
        "keywords": {"keywords": [{"id": 825, "name": "support group"}]},
        "credits": {
            "cast": [
                {"id": 287, "name": "Brad Pitt", "character": "Tyler Durden", "order": 1},
                {"id": 819, "name": "Edward Norton", "character": "Narrator", "order": 0},
            ],
            "crew": [
                {"id": 7467, "name": "David Fincher", "job": "Director"},
                {"id": 7474, "name": "Ross Grayson Bell", "job": "Producer"},
            ],
        },
        "release_dates": {
            "results": [
                {
                    "iso_3166_1": "US",
                    "release_dates": [
                        {"certification": "R", "release_date": "1999-10-15T00:00:00.000Z"},
                        {"certification": "", "release_date": "2000-06-06T00:00:00.000Z"},
                    ],
                }
            ]
        },
        "watch/providers": {
            "results": {
                "US": {"flatrate": [{"provider_name": "Hulu"}, {"provider_name": "Hulu"}]},
                "FR": {"flatrate": [{"provider_name": "Canal+"}]},
            }
        },
    }

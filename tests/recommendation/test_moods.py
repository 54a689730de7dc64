"""Unit tests for the mood taxonomies."""

import pytest

from moodreel.recommendation.moods import (
    DISCOVERY_MOODS,
    LIBRARY_MOODS,
    TAXONOMIES,
    TMDB_GENRES,
    UnknownMoodError,
)


class TestLibraryMoods:
    @staticmethod
    def test_ids() -> None:
        assert LIBRARY_MOODS.ids == [
            "happy",
            "sad",
            "excited",
            "relaxed",
            "romantic",
            "thoughtful",
            "nostalgic",
            "adventurous",
            "inspired",
        ]

    @staticmethod
    def test_tag_needles_include_label() -> None:
        happy = LIBRARY_MOODS.get("happy")
        assert happy.tag_needles[0] == "happy"
        assert "uplifting" in happy.tag_needles
        assert "happy" not in happy.keyword_needles

    @staticmethod
    def test_inspired_keeps_non_tmdb_genres() -> None:
        inspired = LIBRARY_MOODS.get("inspired")
        assert "Biography" in inspired.genres
        assert "Biography" not in TMDB_GENRES.values()


class TestDiscoveryMoods:
    @staticmethod
    def test_eighteen_moods() -> None:
        assert len(DISCOVERY_MOODS) == 18

    @staticmethod
    def test_genres_resolved_from_ids() -> None:
        tense = DISCOVERY_MOODS.get("tense")
        assert tense.genre_ids == (53, 9648)
        assert tense.genres == ("Thriller", "Mystery")

    @staticmethod
    def test_every_genre_id_is_tmdb() -> None:
        for mood in DISCOVERY_MOODS:
            assert all(genre_id in TMDB_GENRES for genre_id in mood.genre_ids)


class TestMoodTaxonomy:
    @staticmethod
    def test_lookup_is_case_insensitive() -> None:
        assert LIBRARY_MOODS.get("Happy") is LIBRARY_MOODS.get("happy")
        assert "SAD" in LIBRARY_MOODS

    @staticmethod
    def test_taxonomies_stay_separate() -> None:
        assert "cheerful" not in LIBRARY_MOODS
        assert "happy" not in DISCOVERY_MOODS
        assert LIBRARY_MOODS.get("romantic") != DISCOVERY_MOODS.get("romantic")

    @staticmethod
    def test_unknown_mood_error() -> None:
        with pytest.raises(UnknownMoodError, match="discovery"):
            DISCOVERY_MOODS.get("happy")

    @staticmethod
    def test_registry() -> None:
        assert TAXONOMIES == {"library": LIBRARY_MOODS, "discovery": DISCOVERY_MOODS}

    @staticmethod
    def test_non_string_not_contained() -> None:
        assert 1 not in LIBRARY_MOODS

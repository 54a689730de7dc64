"""Unit tests for the movie catalog."""

import json
from pathlib import Path

import pytest

from moodreel.catalog.loader import DatasetLoadError
from moodreel.catalog.repository import MovieCatalog


class TestMovieCatalog:
    @staticmethod
    def test_from_file(tmp_path: Path, dataset_document) -> None:
        path = tmp_path / "movies.json"
        path.write_text(json.dumps(dataset_document), encoding="utf-8")

        catalog = MovieCatalog.from_file(path)

        assert len(catalog) == 4
        assert catalog.get(11).title == "Night Chase"
        assert catalog.get(999) is None
        assert catalog.collection.avg_rating == 80.0

    @staticmethod
    def test_from_missing_file(tmp_path: Path) -> None:
        with pytest.raises(DatasetLoadError):
            MovieCatalog.from_file(tmp_path / "absent.json")

    @staticmethod
    def test_mood_tags(catalog: MovieCatalog) -> None:
        tags = catalog.mood_tags()
        assert tags[0] == "dark"
        assert "heartwarming" in tags
        assert len(tags) == len(set(tags))

    @staticmethod
    def test_mood_tags_without_enrichment(make_movie) -> None:
        catalog = MovieCatalog.from_movies([make_movie(1), make_movie(2)])
        assert catalog.mood_tags() == []
        assert dict(catalog.grouped_by_mood()) == {}
        assert catalog.top_moods() == []

    @staticmethod
    def test_views_are_memoized(catalog: MovieCatalog) -> None:
        assert catalog.grouped_by_mood() is catalog.grouped_by_mood()
        assert catalog.mood_tags() == catalog.mood_tags()

    @staticmethod
    def test_grouped_view_is_read_only(catalog: MovieCatalog) -> None:
        groups = catalog.grouped_by_mood()
        with pytest.raises(TypeError):
            groups["new"] = ()

    @staticmethod
    def test_returned_tag_list_is_a_copy(catalog: MovieCatalog) -> None:
        catalog.mood_tags().append("injected")
        assert "injected" not in catalog.mood_tags()

    @staticmethod
    def test_reset_recomputes(catalog: MovieCatalog) -> None:
        first = catalog.grouped_by_mood()
        catalog.reset()
        second = catalog.grouped_by_mood()
        assert first is not second
        assert dict(first) == dict(second)

    @staticmethod
    def test_top_moods(catalog: MovieCatalog) -> None:
        assert catalog.top_moods(1) == [{"tag": "heartwarming", "count": 2}]

    @staticmethod
    def test_movies_for_tag(catalog: MovieCatalog) -> None:
        assert [m.id for m in catalog.movies_for_tag("heartwarming")] == [12, 10]

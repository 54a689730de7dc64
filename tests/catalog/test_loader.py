"""Unit tests for dataset loading."""

import json
from pathlib import Path

import pytest

from moodreel.catalog.loader import DatasetLoadError, load_collection


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadCollection:
    @staticmethod
    def test_loads_document(tmp_path: Path, dataset_document) -> None:
        collection = load_collection(_write(tmp_path / "movies.json", dataset_document))
        assert collection.count == 4
        assert collection.movies[0].title == "The Sunny Side"

    @staticmethod
    def test_loads_bare_array(tmp_path: Path) -> None:
        collection = load_collection(_write(tmp_path / "movies.json", [{"id": 1, "title": "A"}]))
        assert collection.count == 1

    @staticmethod
    def test_missing_file(tmp_path: Path) -> None:
        with pytest.raises(DatasetLoadError, match="Cannot read"):
            load_collection(tmp_path / "absent.json")

    @staticmethod
    def test_invalid_json(tmp_path: Path) -> None:
        path = tmp_path / "movies.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DatasetLoadError, match="not valid JSON"):
            load_collection(path)

    @staticmethod
    def test_schema_mismatch(tmp_path: Path) -> None:
        path = _write(tmp_path / "movies.json", {"movies": [{"title": "No id"}]})
        with pytest.raises(DatasetLoadError, match="schema"):
            load_collection(path)

    @staticmethod
    def test_duplicate_ids(tmp_path: Path) -> None:
        path = _write(tmp_path / "movies.json", [{"id": 1, "title": "A"}, {"id": 1, "title": "B"}])
        with pytest.raises(DatasetLoadError, match="twice"):
            load_collection(path)

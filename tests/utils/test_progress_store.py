"""Unit tests for the progress side-file store."""

import json
from pathlib import Path

import pytest

from moodreel.utils.progress_store import ProgressStore


@pytest.fixture
def store(tmp_path: Path) -> ProgressStore:
    return ProgressStore(directory=tmp_path / "progress", prefix="build")


class TestProgressStore:
    @staticmethod
    def test_creates_directory(store: ProgressStore) -> None:
        assert store.directory.is_dir()

    @staticmethod
    def test_save_and_load(store: ProgressStore) -> None:
        path = store.save("dataset", {"count": 2, "movies": [{"id": 1}, {"id": 2}]})

        assert path.name == "build_dataset.json"
        assert store.load("dataset") == {"count": 2, "movies": [{"id": 1}, {"id": 2}]}

    @staticmethod
    def test_envelope_is_timestamped(store: ProgressStore) -> None:
        path = store.save("dataset", {"count": 0})
        envelope = json.loads(path.read_text(encoding="utf-8"))
        assert set(envelope) == {"timestamp", "data"}

    @staticmethod
    def test_save_replaces_previous(store: ProgressStore) -> None:
        store.save("dataset", {"count": 1})
        store.save("dataset", {"count": 2})
        assert store.load("dataset") == {"count": 2}
        assert not list(store.directory.glob("*.tmp"))

    @staticmethod
    def test_missing_job(store: ProgressStore) -> None:
        assert store.load("unknown") is None
        assert not store.exists("unknown")
        assert store.delete("unknown") is False

    @staticmethod
    def test_delete(store: ProgressStore) -> None:
        store.save("dataset", {"count": 1})
        assert store.delete("dataset") is True
        assert not store.exists("dataset")

    @staticmethod
    def test_list_files_only_own_prefix(store: ProgressStore) -> None:
        store.save("first", {})
        store.save("second", {})
        ProgressStore(directory=store.directory, prefix="other").save("third", {})

        names = sorted(p.name for p in store.list_files())
        assert names == ["build_first.json", "build_second.json"]

    @staticmethod
    def test_unsafe_names(store: ProgressStore) -> None:
        assert store.path_for("a/b\\c").name == "build_a_b_c.json"

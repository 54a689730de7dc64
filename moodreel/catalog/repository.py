"""Process-wide read-only access to the movie dataset.

Derived views (tag list, tag groups) are computed on first use and kept
as immutable snapshots for the lifetime of the catalog. `reset()` drops
them, which tests and dataset reloads rely on.
"""

from collections.abc import Mapping, Sequence
from functools import cached_property, lru_cache
from pathlib import Path
from types import MappingProxyType

from moodreel.catalog.loader import load_collection
from moodreel.catalog.models import MovieCollection, MovieRecord
from moodreel.recommendation.grouping import (
    count_mood_tags,
    extract_mood_tags,
    group_by_mood_tags,
    recommend_by_tag,
)

_SNAPSHOTS = ("_mood_tags", "_groups")


class MovieCatalog:
    """Immutable movie collection with memoized mood views.

    Attributes:
        collection: The deserialized dataset, including its statistics.
    """

    def __init__(self, collection: MovieCollection) -> None:
        self.collection = collection
        self._movies: tuple[MovieRecord, ...] = tuple(collection.movies)
        self._by_id = {movie.id: movie for movie in self._movies}

    @classmethod
    def from_movies(cls, movies: Sequence[MovieRecord]) -> "MovieCatalog":
        return cls(MovieCollection(count=len(movies), movies=list(movies)))

    @classmethod
    def from_file(cls, path: Path) -> "MovieCatalog":
        """Load a catalog from a dataset file.

        Raises:
            DatasetLoadError: If the file is missing or malformed.
        """
        return cls(load_collection(path))

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    @property
    def movies(self) -> tuple[MovieRecord, ...]:
        return self._movies

    def get(self, movie_id: int) -> MovieRecord | None:
        return self._by_id.get(movie_id)

    def __len__(self) -> int:
        return len(self._movies)

    # -------------------------------------------------------------------------
    # Mood views
    # -------------------------------------------------------------------------

    @cached_property
    def _mood_tags(self) -> tuple[str, ...]:
        return tuple(extract_mood_tags(self._movies))

    @cached_property
    def _groups(self) -> Mapping[str, tuple[MovieRecord, ...]]:
        groups = group_by_mood_tags(self._movies)
        return MappingProxyType({tag: tuple(movies) for tag, movies in groups.items()})

    def mood_tags(self) -> list[str]:
        """Distinct lower-cased mood tags present in the dataset, sorted."""
        return list(self._mood_tags)

    def grouped_by_mood(self) -> Mapping[str, tuple[MovieRecord, ...]]:
        """Movies indexed by each mood tag, sorted by vote_average desc."""
        return self._groups

    def top_moods(self, limit: int = 10) -> list[dict]:
        """Most frequent mood tags as ``[{"tag", "count"}]``."""
        return count_mood_tags(self._groups, limit)

    def movies_for_tag(self, tag: str, limit: int = 6) -> list[MovieRecord]:
        """Best-rated movies carrying a mood tag."""
        return recommend_by_tag(self._movies, tag, limit)

    def reset(self) -> None:
        """Drop the memoized views so the next access recomputes them."""
        for name in _SNAPSHOTS:
            self.__dict__.pop(name, None)


# =============================================================================
# SINGLETON ACCESS
# =============================================================================


@lru_cache(maxsize=1)
def get_catalog() -> MovieCatalog:
    """Get or create the process-wide catalog from the configured dataset.

    Raises:
        DatasetLoadError: If the dataset file is missing or malformed.
    """
    from moodreel.settings import settings

    return MovieCatalog.from_file(settings.paths.dataset_path)

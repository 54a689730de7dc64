"""Movie dataset: models and loading."""

from moodreel.catalog.loader import DatasetLoadError, load_collection
from moodreel.catalog.models import (
    CastMember,
    Director,
    Genre,
    Keyword,
    MovieCollection,
    MovieRecord,
)

__all__ = [
    "CastMember",
    "DatasetLoadError",
    "Director",
    "Genre",
    "Keyword",
    "MovieCollection",
    "MovieRecord",
    "load_collection",
]

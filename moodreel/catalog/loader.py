"""Dataset file loading."""

import json
from pathlib import Path

from pydantic import ValidationError

from moodreel.catalog.models import MovieCollection
from moodreel.utils.logger import setup_logger

logger = setup_logger("catalog.loader")


class DatasetLoadError(RuntimeError):
    """Raised when the dataset file is missing or malformed."""


def load_collection(path: Path) -> MovieCollection:
    """Read and validate a dataset file.

    Args:
        path: JSON document holding a collection or a bare movie array.

    Returns:
        Validated collection.

    Raises:
        DatasetLoadError: If the file cannot be read, parsed or validated.
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise DatasetLoadError(f"Cannot read dataset {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"Dataset {path} is not valid JSON: {e}") from e

    try:
        collection = MovieCollection.model_validate(raw)
    except ValidationError as e:
        raise DatasetLoadError(f"Dataset {path} does not match the movie schema: {e}") from e

    _check_unique_ids(collection, path)
    logger.info(f"Dataset loaded: {len(collection.movies)} movies from {path.name}")
    return collection


def _check_unique_ids(collection: MovieCollection, path: Path) -> None:
    seen: set[int] = set()
    for movie in collection.movies:
        if movie.id in seen:
            raise DatasetLoadError(f"Dataset {path} contains movie id {movie.id} twice")
        seen.add(movie.id)

"""TMDB access: HTTP client, normalization and harvest."""

from moodreel.etl.tmdb.client import (
    TMDBClient,
    TMDBClientError,
    TMDBNotFoundError,
    TMDBRateLimitError,
)
from moodreel.etl.tmdb.harvester import HarvestResult, TMDBHarvester, write_harvest
from moodreel.etl.tmdb.normalizer import TMDBNormalizer

__all__ = [
    "HarvestResult",
    "TMDBClient",
    "TMDBClientError",
    "TMDBHarvester",
    "TMDBNormalizer",
    "TMDBNotFoundError",
    "TMDBRateLimitError",
    "write_harvest",
]

"""Dataset build: AI enrichment, retries and statistics."""

from moodreel.etl.enrichment.builder import BuildReport, DatasetBuilder
from moodreel.etl.enrichment.enricher import Enrichment, MovieEnricher, parse_mood_tags
from moodreel.etl.enrichment.retry import RetryPolicy, is_rate_limit_error

__all__ = [
    "BuildReport",
    "DatasetBuilder",
    "Enrichment",
    "MovieEnricher",
    "RetryPolicy",
    "is_rate_limit_error",
    "parse_mood_tags",
]

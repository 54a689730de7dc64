"""Mood taxonomies and recommendation algorithms."""

from moodreel.recommendation.engine import MoodRecommender, RankedMovie, rank, recommend
from moodreel.recommendation.moods import (
    DISCOVERY_MOODS,
    LIBRARY_MOODS,
    TMDB_GENRES,
    MoodDefinition,
    MoodTaxonomy,
    UnknownMoodError,
)

__all__ = [
    "DISCOVERY_MOODS",
    "LIBRARY_MOODS",
    "TMDB_GENRES",
    "MoodDefinition",
    "MoodRecommender",
    "MoodTaxonomy",
    "RankedMovie",
    "UnknownMoodError",
    "rank",
    "recommend",
]

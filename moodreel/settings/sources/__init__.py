"""Data source settings."""

from moodreel.settings.sources.tmdb import TMDBSettings

__all__ = [
    "TMDBSettings",
]

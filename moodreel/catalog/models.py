"""Pydantic models of the movie dataset.

Records are validated once at load time; every optional collection is
defaulted here so matching code never has to check for missing values.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# =============================================================================
# CONSTANTS
# =============================================================================

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
"""CDN prefix for poster paths."""

BACKDROP_BASE_URL = "https://image.tmdb.org/t/p/original"
"""CDN prefix for backdrop paths."""

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="
"""Prefix of trailer URLs built from a YouTube video key."""

ERA_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (1950, "classic"),
    (1980, "vintage"),
    (2000, "modern"),
)
"""Exclusive upper bound of each era; later years are contemporary."""

_LIST_FIELDS = ("genres", "keywords", "cast", "directors")


# =============================================================================
# HELPERS
# =============================================================================


def score_from_vote_average(vote_average: float | None) -> int:
    """Convert a 0-10 vote average into a 0-100 score, rounding halves up."""
    if not vote_average:
        return 0
    return int(math.floor(vote_average * 10 + 0.5))


def era_for_year(year: int | None) -> str:
    """Classify a release year into a coarse era bucket."""
    if year is None:
        return "unknown"
    for upper_bound, era in ERA_THRESHOLDS:
        if year < upper_bound:
            return era
    return "contemporary"


def year_from_date(release_date: str | None) -> int | None:
    """Extract the year of an ISO date string, None if unparseable."""
    if not release_date or len(release_date) < 4 or not release_date[:4].isdigit():
        return None
    return int(release_date[:4])


def build_image_url(base_url: str, path: str | None) -> str | None:
    """Join a CDN base and an image path fragment."""
    if not path:
        return None
    return f"{base_url}{path}"


# =============================================================================
# NESTED ENTITIES
# =============================================================================


class Genre(BaseModel):
    """Genre reference ({id, name})."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    name: str


class Keyword(BaseModel):
    """TMDB keyword reference."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    name: str


class CastMember(BaseModel):
    """Billed actor."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    name: str
    character: str | None = None


class Director(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    name: str


# =============================================================================
# MOVIE RECORD
# =============================================================================


class MovieRecord(BaseModel):
    """One movie of the dataset.

    Attributes:
        id: TMDB identifier, unique within a dataset.
        title: Display title.
        original_title: Title in the original language (defaults to title).
        overview: Plot synopsis.
        release_date: ISO release date.
        release_year: Year of release_date unless supplied.
        genres: Ordered genre references.
        keywords: TMDB keywords.
        vote_average: Average rating (0-10), 0 when unknown.
        vote_count: Number of votes.
        score_percent: Rating on a 0-100 scale, derived from vote_average
            when not supplied.
        poster_url: Poster image URL.
        backdrop_url: Backdrop image URL.
        trailer_url: YouTube trailer URL.
        cast: Top billed actors.
        directors: Credited directors.
        ai_review: Generated critic review, None if generation failed.
        mood_tags: Generated mood tags, None if generation failed.
        watch_suggestion: Generated viewing suggestion.
        era: Release era (classic, vintage, modern, contemporary).
        runtime: Duration in minutes.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Identity
    id: int
    title: str
    original_title: str = ""
    overview: str = ""
    release_date: str | None = None
    release_year: int | None = None

    # Classification
    genres: list[Genre] = Field(default_factory=list)
    keywords: list[Keyword] = Field(default_factory=list)

    # Popularity
    vote_average: float = Field(default=0.0, ge=0.0, le=10.0)
    vote_count: int = Field(default=0, ge=0)
    score_percent: int = Field(default=0, ge=0, le=100)

    # Media
    poster_url: str | None = None
    backdrop_url: str | None = None
    trailer_url: str | None = None

    # People
    cast: list[CastMember] = Field(default_factory=list)
    directors: list[Director] = Field(default_factory=list)

    # AI enrichment
    ai_review: str | None = None
    mood_tags: list[str] | None = None
    watch_suggestion: str | None = None

    era: str = "unknown"
    runtime: int | None = None

    @model_validator(mode="before")
    @classmethod
    def apply_defaults(cls, data: Any) -> Any:
        """Fill derived and missing values from the raw mapping."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        for name in _LIST_FIELDS:
            if data.get(name) is None:
                data[name] = []

        if data.get("vote_average") is None:
            data["vote_average"] = 0.0
        if data.get("vote_count") is None:
            data["vote_count"] = 0
        if data.get("score_percent") is None:
            data["score_percent"] = score_from_vote_average(data["vote_average"])

        if not data.get("original_title"):
            data["original_title"] = data.get("title") or ""
        if data.get("overview") is None:
            data["overview"] = ""

        if data.get("release_year") is None:
            data["release_year"] = year_from_date(data.get("release_date"))
        if not data.get("era"):
            data["era"] = era_for_year(data["release_year"])

        if not data.get("poster_url"):
            data["poster_url"] = build_image_url(POSTER_BASE_URL, data.get("poster_path"))
        if not data.get("backdrop_url"):
            data["backdrop_url"] = build_image_url(BACKDROP_BASE_URL, data.get("backdrop_path"))

        return data

    @property
    def genre_names(self) -> list[str]:
        return [genre.name for genre in self.genres]

    @property
    def has_ai_enrichment(self) -> bool:
        """Check if the record carries generated mood tags."""
        return bool(self.mood_tags)


# =============================================================================
# COLLECTION
# =============================================================================


class MovieCollection(BaseModel):
    """Deserialized dataset with its build-time statistics.

    Attributes:
        count: Number of movies.
        generated_at: ISO timestamp of the build.
        processing_time_seconds: Build duration.
        avg_rating: Mean score_percent of the collection.
        oldest_movie: Title of the earliest release.
        newest_movie: Title of the latest release.
        total_runtime: Sum of runtimes in minutes.
        movies: The records, best first.
    """

    model_config = ConfigDict(extra="ignore")

    count: int = 0
    generated_at: str | None = None
    processing_time_seconds: float | None = None
    avg_rating: float | None = None
    oldest_movie: str | None = None
    newest_movie: str | None = None
    total_runtime: int | None = None
    movies: list[MovieRecord] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data: Any) -> Any:
        """Accept a plain JSON array of movies as a collection."""
        if isinstance(data, list):
            return {"count": len(data), "movies": data}
        if isinstance(data, dict):
            movies = data.get("movies") or []
            data = {**data, "movies": movies}
            if not data.get("count"):
                data["count"] = len(movies)
        return data

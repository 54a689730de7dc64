"""TMDB harvester for highly rated movies.

Collects candidates from era-bounded discover queries, the top rated
list and optional per-genre queries, then fetches full details for the
best of them.
"""

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from moodreel.etl.tmdb.client import TMDBClient, TMDBClientError, TMDBNotFoundError
from moodreel.etl.tmdb.normalizer import TMDBNormalizer
from moodreel.recommendation.moods import TMDB_GENRES
from moodreel.settings import settings
from moodreel.utils.logger import setup_logger

# =============================================================================
# CONSTANTS
# =============================================================================

HARVEST_ERAS: tuple[tuple[str, str, str], ...] = (
    ("Silent Era", "1920-01-01", "1929-12-31"),
    ("Pre-Golden Age", "1930-01-01", "1939-12-31"),
    ("Classic Golden Age", "1940-01-01", "1959-12-31"),
    ("New Hollywood", "1960-01-01", "1979-12-31"),
    ("Modern Classics", "1980-01-01", "2000-12-31"),
    ("Recent Classics", "2001-01-01", "2015-12-31"),
    ("Contemporary Masterpieces", "2016-01-01", "2023-12-31"),
)
"""Discover windows as (label, first release date, last release date)."""

TOP_RATED_GROUP = "All Time Greats"


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class HarvestResult:
    """Outcome of a harvest run.

    Attributes:
        movies: Normalized movies, best rated first.
        candidates: Distinct candidates found before the limit.
        errors: Failed requests.
        duration_seconds: Wall-clock duration.
    """

    movies: list[dict[str, Any]] = field(default_factory=list)
    candidates: int = 0
    errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    def statistics(self) -> dict[str, Any]:
        """Counts per era and genre of the harvested movies."""
        by_era: dict[str, int] = {}
        by_genre: dict[str, int] = {}
        for movie in self.movies:
            by_era[movie["era"]] = by_era.get(movie["era"], 0) + 1
            for genre in movie["genres"]:
                by_genre[genre["name"]] = by_genre.get(genre["name"], 0) + 1

        average = (
            sum(m["vote_average"] for m in self.movies) / len(self.movies) if self.movies else 0.0
        )
        return {
            "by_era": by_era,
            "by_genre": dict(sorted(by_genre.items(), key=lambda kv: kv[1], reverse=True)),
            "average_rating": round(average, 2),
        }

    def to_document(self) -> dict[str, Any]:
        return {
            "count": len(self.movies),
            "generated_at": datetime.now().isoformat(),
            "statistics": self.statistics(),
            "movies": self.movies,
        }


# =============================================================================
# HARVESTER
# =============================================================================


class TMDBHarvester:
    """Builds the raw movie file consumed by the dataset build."""

    def __init__(
        self,
        client_factory: Callable[[], TMDBClient] = TMDBClient,
        normalizer: TMDBNormalizer | None = None,
    ) -> None:
        """Initialize harvester.

        Args:
            client_factory: Returns a fresh (not yet entered) TMDB client.
            normalizer: Detail normalizer.
        """
        self._client_factory = client_factory
        self._normalizer = normalizer or TMDBNormalizer()
        self._client: TMDBClient | None = None
        self._errors: list[str] = []
        self.logger = setup_logger("etl.tmdb.harvester")

    def harvest(
        self,
        limit: int = 250,
        min_rating: float | None = None,
        min_votes: int | None = None,
        max_year: int | None = None,
        genre_ids: list[int] | None = None,
    ) -> HarvestResult:
        """Collect and normalize the best rated movies.

        Args:
            limit: Number of movies to keep.
            min_rating: vote_average floor (default from settings).
            min_votes: vote_count floor (default from settings).
            max_year: Skip eras starting after this year.
            genre_ids: Extra TMDB genres to query.

        Returns:
            Harvest result with normalized movies.
        """
        min_rating = settings.tmdb.min_rating if min_rating is None else min_rating
        min_votes = settings.tmdb.min_votes if min_votes is None else min_votes
        max_year = max_year or settings.tmdb.max_year

        start = datetime.now()
        self._errors = []
        self.logger.info(
            f"Harvest started: limit={limit}, min_rating={min_rating}, "
            f"min_votes={min_votes}, max_year={max_year}"
        )

        with self._client_factory() as client:
            self._client = client
            candidates = self._collect_candidates(min_rating, min_votes, max_year, genre_ids or [])
            selected = self.select_best(candidates, limit)
            movies = list(self._fetch_details(selected))
            self._client = None

        result = HarvestResult(
            movies=movies,
            candidates=len(candidates),
            errors=list(self._errors),
            duration_seconds=(datetime.now() - start).total_seconds(),
        )
        self.logger.info(
            f"Harvest completed: {len(movies)}/{len(candidates)} movies "
            f"in {result.duration_seconds:.1f}s ({len(self._errors)} errors)"
        )
        return result

    # -------------------------------------------------------------------------
    # Candidate collection
    # -------------------------------------------------------------------------

    def _collect_candidates(
        self,
        min_rating: float,
        min_votes: int,
        max_year: int,
        genre_ids: list[int],
    ) -> dict[int, dict[str, Any]]:
        candidates: dict[int, dict[str, Any]] = {}
        base_filters = {"vote_average.gte": min_rating, "vote_count.gte": min_votes}

        for label, first_date, last_date in HARVEST_ERAS:
            if int(first_date[:4]) > max_year:
                self.logger.info(f"Skipping {label}: starts after {max_year}")
                continue
            filters = {
                **base_filters,
                "primary_release_date.gte": first_date,
                "primary_release_date.lte": min(last_date, f"{max_year}-12-31"),
            }
            for movie in self._iter_discover(filters, settings.tmdb.pages_per_era):
                candidates.setdefault(movie["id"], {**movie, "harvest_group": label})

        for movie in self._iter_top_rated(settings.tmdb.top_rated_pages):
            if movie.get("vote_count", 0) >= min_votes:
                candidates.setdefault(movie["id"], {**movie, "harvest_group": TOP_RATED_GROUP})

        for genre_id in genre_ids:
            label = f"Top {TMDB_GENRES.get(genre_id, str(genre_id))} Movies"
            filters = {**base_filters, "with_genres": genre_id}
            for movie in self._iter_discover(filters, settings.tmdb.pages_per_era):
                candidates.setdefault(movie["id"], {**movie, "harvest_group": label})

        self.logger.info(f"Collected {len(candidates)} distinct candidates")
        return candidates

    def _iter_discover(self, filters: dict[str, Any], max_pages: int) -> Iterator[dict[str, Any]]:
        for page in range(1, max_pages + 1):
            response = self._safe_call(
                f"discover page {page} {filters}",
                lambda: self._client.discover_movies(
                    page=page, sort_by="vote_average.desc", filters=filters
                ),
            )
            if not response:
                return
            results = response.get("results") or []
            yield from results
            if not results or page >= response.get("total_pages", page):
                return

    def _iter_top_rated(self, max_pages: int) -> Iterator[dict[str, Any]]:
        for page in range(1, max_pages + 1):
            response = self._safe_call(
                f"top rated page {page}", lambda: self._client.get_top_rated(page)
            )
            if not response:
                return
            yield from response.get("results") or []
            if page >= response.get("total_pages", page):
                return

    @staticmethod
    def select_best(candidates: dict[int, dict[str, Any]], limit: int) -> list[dict[str, Any]]:
        """Sort candidates by vote_average then vote_count, keep `limit`."""
        ranked = sorted(
            candidates.values(),
            key=lambda m: (m.get("vote_average") or 0.0, m.get("vote_count") or 0),
            reverse=True,
        )
        return ranked[:limit]

    # -------------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------------

    def _fetch_details(self, selected: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
        for index, summary in enumerate(selected, start=1):
            movie_id = summary["id"]
            details = self._safe_call(
                f"details {movie_id}", lambda: self._client.get_movie_full(movie_id)
            )
            if not details:
                continue
            normalized = self._normalizer.normalize_movies([details], summary.get("harvest_group"))
            yield from normalized
            if index % 25 == 0:
                self.logger.info(f"Fetched details for {index}/{len(selected)} movies")

    def _safe_call(
        self, description: str, call: Callable[[], dict[str, Any]]
    ) -> dict[str, Any] | None:
        try:
            return call()
        except TMDBNotFoundError:
            self.logger.warning(f"Not found: {description}")
        except (TMDBClientError, httpx.HTTPError) as e:
            self.logger.error(f"TMDB request failed ({description}): {e}")
            self._errors.append(f"{description}: {e}")
        return None


def write_harvest(result: HarvestResult, path: Path) -> Path:
    """Write a harvest result as JSON.

    Args:
        result: Harvest outcome.
        path: Target file.

    Returns:
        The written path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.to_document(), f, indent=2, ensure_ascii=False)
    return path

"""Live TMDB discovery by discovery-taxonomy mood.

Each mood has a query profile on top of its genres: TMDB keywords,
sort order, rating and vote floors, runtime bounds, original languages
and excluded genres. A query that finds too little is retried with
relaxed criteria, then replaced by popular movies. Only movies with a
trailer are returned.
"""

from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import httpx

from moodreel.catalog.models import MovieRecord
from moodreel.etl.tmdb.client import TMDBClient, TMDBClientError, TMDBNotFoundError
from moodreel.etl.tmdb.normalizer import TMDBNormalizer
from moodreel.recommendation.moods import DISCOVERY_MOODS, MoodDefinition, MoodTaxonomy
from moodreel.settings import settings
from moodreel.utils.logger import setup_logger

logger = setup_logger("services.discovery")

RELAXED_MIN_VOTES = 20


# =============================================================================
# QUERY PROFILES
# =============================================================================


@dataclass(frozen=True)
class DiscoveryProfile:
    """TMDB discover criteria of one mood.

    Attributes:
        keywords: Keyword names, resolved to TMDB keyword ids and OR-ed.
        genre_ids: Replaces the mood's own genres when set.
        sort_by: TMDB sort order.
        min_rating: ``vote_average.gte``, settings default when None.
        min_votes: ``vote_count.gte``, settings default when None.
        languages: ``with_original_language`` (``|`` separated).
        runtime_min: ``with_runtime.gte`` in minutes.
        runtime_max: ``with_runtime.lte`` in minutes.
        without_genres: Excluded TMDB genre ids.
    """

    keywords: tuple[str, ...] = ()
    genre_ids: tuple[int, ...] | None = None
    sort_by: str = "vote_average.desc"
    min_rating: float | None = None
    min_votes: int | None = None
    languages: str = "en"
    runtime_min: int | None = 60
    runtime_max: int | None = None
    without_genres: tuple[int, ...] = ()

    def filters(self, mood: MoodDefinition, keyword_ids: list[int]) -> dict[str, Any]:
        """Discover parameters for ``mood``, sort order excluded."""
        genre_ids = self.genre_ids if self.genre_ids is not None else mood.genre_ids
        return {
            "with_genres": _join(genre_ids, ","),
            "with_keywords": _join(keyword_ids, "|"),
            "without_genres": _join(self.without_genres, ","),
            "vote_average.gte": self.min_rating or settings.tmdb.discover_min_rating,
            "vote_count.gte": self.min_votes or settings.tmdb.discover_min_votes,
            "with_original_language": self.languages,
            "with_runtime.gte": self.runtime_min,
            "with_runtime.lte": self.runtime_max,
        }


def _join(values: tuple[int, ...] | list[int], separator: str) -> str | None:
    return separator.join(str(v) for v in values) or None


def relax_filters(filters: dict[str, Any]) -> dict[str, Any]:
    """Loosen a discover query that returned too few movies.

    Keeps the first genre only, halves the vote floor (not below 20),
    resets the rating floor to the default and drops runtime bounds.
    """
    relaxed = dict(filters)
    relaxed["vote_average.gte"] = settings.tmdb.discover_min_rating
    relaxed["vote_count.gte"] = max(RELAXED_MIN_VOTES, (filters.get("vote_count.gte") or 0) // 2)
    if relaxed.get("with_genres"):
        relaxed["with_genres"] = relaxed["with_genres"].split(",")[0]
    relaxed["with_runtime.gte"] = None
    relaxed["with_runtime.lte"] = None
    return relaxed


DISCOVERY_PROFILES: dict[str, DiscoveryProfile] = {
    "cheerful": DiscoveryProfile(
        keywords=("fun", "happy", "comedy"), sort_by="popularity.desc", runtime_max=150
    ),
    "humorous": DiscoveryProfile(
        keywords=("comedy", "parody", "funny"), sort_by="popularity.desc", runtime_max=150
    ),
    "playful": DiscoveryProfile(
        keywords=("comedy", "fun", "humor"), sort_by="popularity.desc", runtime_max=150
    ),
    "reflective": DiscoveryProfile(
        keywords=("philosophical", "thought-provoking"),
        min_rating=7.5,
        min_votes=150,
        languages="en|fr|de|es|it",
    ),
    "thoughtful": DiscoveryProfile(
        keywords=("documentary", "educational", "intellectual"),
        min_rating=7.5,
        min_votes=150,
        languages="en|fr|de|es|it",
    ),
    "romantic": DiscoveryProfile(
        keywords=("love", "romance", "relationship"), without_genres=(27, 53), runtime_min=90
    ),
    "passionate": DiscoveryProfile(
        keywords=("love", "passion", "emotion"), without_genres=(27, 53), runtime_min=90
    ),
    "fearful": DiscoveryProfile(
        keywords=("horror", "scary", "fear"), sort_by="popularity.desc", runtime_max=120
    ),
    "tense": DiscoveryProfile(
        keywords=("suspense", "thriller", "tension"), sort_by="popularity.desc", runtime_max=120
    ),
    "gloomy": DiscoveryProfile(
        keywords=("melancholy", "sad", "depression"), without_genres=(35, 16), runtime_min=100
    ),
    "melancholy": DiscoveryProfile(
        keywords=("nostalgic", "sentimental"), without_genres=(35, 16), runtime_min=100
    ),
    "idyllic": DiscoveryProfile(
        keywords=("fantasy", "magical", "beautiful"),
        genre_ids=(14, 10751, 16),
        sort_by="popularity.desc",
    ),
    "weird": DiscoveryProfile(
        keywords=("surreal", "bizarre", "quirky"), sort_by="vote_count.desc", languages="en|fr|ja"
    ),
    "angry": DiscoveryProfile(
        keywords=("revenge", "justice", "fight", "vendetta"),
        genre_ids=(28, 80, 10752),
        runtime_min=90,
    ),
    "lonely": DiscoveryProfile(
        keywords=("solitude", "isolation", "loneliness", "journey", "self-discovery"),
    ),
    "chill": DiscoveryProfile(keywords=("relaxing", "calm"), sort_by="popularity.desc"),
    "sleepy": DiscoveryProfile(keywords=("slow-paced", "calm"), sort_by="popularity.desc"),
    "thrill": DiscoveryProfile(
        keywords=("action", "adventure", "exciting"), sort_by="popularity.desc"
    ),
}
"""Query profile per discovery mood id."""


# =============================================================================
# SERVICE
# =============================================================================


class MoodDiscoveryService:
    """Query TMDB live for the movies of a discovery mood.

    Uses the discovery taxonomy only. Keyword ids are looked up once and
    kept for the lifetime of the service. Detail lookups that fail are
    dropped from the result rather than failing the request.
    """

    def __init__(
        self,
        client_factory: Callable[[], TMDBClient] = TMDBClient,
        taxonomy: MoodTaxonomy = DISCOVERY_MOODS,
        normalizer: TMDBNormalizer | None = None,
        profiles: dict[str, DiscoveryProfile] | None = None,
    ) -> None:
        self._client_factory = client_factory
        self._taxonomy = taxonomy
        self._normalizer = normalizer or TMDBNormalizer()
        self._profiles = DISCOVERY_PROFILES if profiles is None else profiles
        self._keyword_ids: dict[str, int | None] = {}

    def discover(self, mood_id: str, detail_count: int | None = None) -> list[MovieRecord]:
        """Discover movies for a mood.

        Args:
            mood_id: Discovery mood identifier.
            detail_count: Number of results enriched with details.

        Returns:
            Detailed movies with a trailer, in TMDB order. Movies under
            the rating floor are left out unless no movie reaches it.

        Raises:
            UnknownMoodError: If the mood is not a discovery mood.
            TMDBClientError: If a discover query itself fails.
        """
        mood = self._taxonomy.get(mood_id)
        profile = self._profiles.get(mood.id, DiscoveryProfile())
        detail_count = detail_count or settings.tmdb.discover_detail_count

        with self._client_factory() as client:
            filters = profile.filters(mood, self._resolve_keywords(client, profile.keywords))
            summaries = self._discover_pages(client, profile.sort_by, filters)

            if len(summaries) < settings.tmdb.discover_min_results:
                logger.info(f"Only {len(summaries)} movies for '{mood.id}', relaxing criteria")
                summaries += self._discover_pages(client, profile.sort_by, relax_filters(filters))

            if not summaries:
                logger.info(f"Nothing found for '{mood.id}', using popular movies")
                summaries = self._popular(client)

            movies = self._details(client, _unique(summaries)[:detail_count])

        selected = self._with_trailer(movies)
        logger.info(f"Discovered {len(selected)} movies for mood '{mood.id}'")
        return selected

    # -------------------------------------------------------------------------
    # TMDB queries
    # -------------------------------------------------------------------------

    def _resolve_keywords(self, client: TMDBClient, names: tuple[str, ...]) -> list[int]:
        for name in names:
            if name in self._keyword_ids:
                continue
            try:
                results = client.search_keywords(name).get("results") or []
            except (TMDBClientError, httpx.HTTPError) as e:
                logger.warning(f"Keyword '{name}' lookup failed: {e}")
                continue
            self._keyword_ids[name] = next(
                (k["id"] for k in results if str(k.get("name", "")).lower() == name.lower()),
                None,
            )
        return [kid for name in names if (kid := self._keyword_ids.get(name)) is not None]

    @staticmethod
    def _discover_pages(
        client: TMDBClient, sort_by: str, filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        summaries: list[dict[str, Any]] = []
        for page in range(1, settings.tmdb.discover_pages + 1):
            response = client.discover_movies(page=page, sort_by=sort_by, filters=filters)
            results = response.get("results") or []
            summaries.extend(results)
            total_pages = response.get("total_pages")
            if total_pages is not None and page >= total_pages:
                break
        return summaries

    @staticmethod
    def _popular(client: TMDBClient) -> list[dict[str, Any]]:
        floor = settings.tmdb.discover_min_rating
        summaries: list[dict[str, Any]] = []
        for page in range(1, settings.tmdb.discover_pages + 1):
            results = client.get_popular(page).get("results") or []
            summaries.extend(s for s in results if (s.get("vote_average") or 0) >= floor)
        return summaries

    def _details(
        self, client: TMDBClient, summaries: list[dict[str, Any]]
    ) -> list[MovieRecord]:
        movies = []
        for summary in summaries:
            try:
                details = client.get_movie_details(summary["id"], append_to_response="videos")
            except TMDBNotFoundError:
                continue
            except (TMDBClientError, httpx.HTTPError) as e:
                logger.warning(f"Details for {summary['id']} unavailable: {e}")
                continue
            movies.append(MovieRecord.model_validate(self._normalizer.normalize_movie(details)))
        return movies

    @staticmethod
    def _with_trailer(movies: list[MovieRecord]) -> list[MovieRecord]:
        with_trailer = [m for m in movies if m.trailer_url]
        floor = settings.tmdb.discover_min_rating
        rated = [m for m in with_trailer if m.vote_average >= floor]
        return rated or with_trailer


def _unique(summaries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    seen: set[int] = set()
    unique = []
    for summary in summaries:
        if summary["id"] not in seen:
            seen.add(summary["id"])
            unique.append(summary)
    return unique


@lru_cache(maxsize=1)
def get_mood_discovery_service() -> MoodDiscoveryService:
    """Process-wide service, so keyword ids are resolved once."""
    return MoodDiscoveryService()

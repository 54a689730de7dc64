"""Tiered mood recommendation over the curated dataset.

Ranking is a greedy fill through four tiers of decreasing precision:

1. ai_tags: a generated mood tag contains the mood label or a keyword stem.
2. keywords: a TMDB keyword contains a keyword stem.
3. genres: a genre name equals one of the mood genres.
4. fallback: any remaining movie.

Each tier sorts its own candidates by score_percent (stable) and only
contributes what is still missing to reach the limit. A movie selected by
an earlier tier is never considered again.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from moodreel.catalog.models import MovieRecord
from moodreel.recommendation.moods import LIBRARY_MOODS, MoodDefinition, MoodTaxonomy

if TYPE_CHECKING:
    from moodreel.catalog.repository import MovieCatalog

# =============================================================================
# TIER PREDICATES
# =============================================================================


def matches_mood_tags(movie: MovieRecord, mood: MoodDefinition) -> bool:
    """Check if a generated tag contains the mood label or a keyword stem."""
    needles = mood.tag_needles
    return any(needle in tag.lower() for tag in movie.mood_tags or () for needle in needles)


def matches_keywords(movie: MovieRecord, mood: MoodDefinition) -> bool:
    """Check if a TMDB keyword contains one of the mood keyword stems."""
    needles = mood.keyword_needles
    return any(needle in kw.name.lower() for kw in movie.keywords for needle in needles)


def matches_genres(movie: MovieRecord, mood: MoodDefinition) -> bool:
    """Check if a genre name equals one of the mood genres."""
    return any(genre.name in mood.genres for genre in movie.genres)


def _matches_anything(movie: MovieRecord, mood: MoodDefinition) -> bool:
    return True


TIERS: tuple[tuple[str, Callable[[MovieRecord, MoodDefinition], bool]], ...] = (
    ("ai_tags", matches_mood_tags),
    ("keywords", matches_keywords),
    ("genres", matches_genres),
    ("fallback", _matches_anything),
)
"""Tier names and predicates, highest precision first."""


# =============================================================================
# RANKING
# =============================================================================


@dataclass(frozen=True)
class RankedMovie:
    """A recommended movie and the tier that selected it."""

    movie: MovieRecord
    tier: str


def _score(movie: MovieRecord) -> int:
    return movie.score_percent


def validate_limit(limit: int) -> int:
    """Reject limits that are not strictly positive integers.

    Raises:
        ValueError: If limit is not an int >= 1.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit


def rank(movies: Sequence[MovieRecord], mood: MoodDefinition, limit: int) -> list[RankedMovie]:
    """Run the tiered fill and keep track of each selection's tier.

    Args:
        movies: Dataset to rank.
        mood: Resolved mood definition.
        limit: Maximum number of results (>= 1).

    Returns:
        At most `limit` ranked movies without duplicate ids, best first.

    Raises:
        ValueError: If limit is not a positive integer.
    """
    validate_limit(limit)

    selected: list[RankedMovie] = []
    seen: set[int] = set()

    for tier_name, predicate in TIERS:
        if len(selected) >= limit:
            break

        candidates = [m for m in movies if m.id not in seen and predicate(m, mood)]
        candidates.sort(key=_score, reverse=True)

        for movie in candidates:
            if len(selected) >= limit:
                break
            if movie.id in seen:
                continue
            selected.append(RankedMovie(movie=movie, tier=tier_name))
            seen.add(movie.id)

    return selected


def recommend(movies: Sequence[MovieRecord], mood: MoodDefinition, limit: int) -> list[MovieRecord]:
    """Recommend movies for a mood. See `rank` for the algorithm."""
    return [ranked.movie for ranked in rank(movies, mood, limit)]


# =============================================================================
# RECOMMENDER
# =============================================================================


class MoodRecommender:
    """Recommendation entry point bound to a catalog and a taxonomy.

    Mood ids are validated here: an unknown id raises UnknownMoodError,
    while a valid mood with no candidate movies returns an empty list.
    """

    def __init__(
        self,
        catalog: "MovieCatalog",
        taxonomy: MoodTaxonomy = LIBRARY_MOODS,
    ) -> None:
        self._catalog = catalog
        self._taxonomy = taxonomy

    @property
    def taxonomy(self) -> MoodTaxonomy:
        return self._taxonomy

    def recommend(self, mood_id: str, limit: int = 10) -> list[MovieRecord]:
        """Recommend up to `limit` movies for a mood id.

        Raises:
            UnknownMoodError: If mood_id is not part of the taxonomy.
            ValueError: If limit is not a positive integer.
        """
        mood = self._taxonomy.get(mood_id)
        return recommend(self._catalog.movies, mood, limit)

    def rank(self, mood_id: str, limit: int = 10) -> list[RankedMovie]:
        """Same as recommend, keeping the tier of each result."""
        mood = self._taxonomy.get(mood_id)
        return rank(self._catalog.movies, mood, limit)

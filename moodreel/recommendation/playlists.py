"""Curated mood playlists and random picks over the catalog."""

import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from moodreel.catalog.models import MovieRecord
from moodreel.recommendation.engine import recommend
from moodreel.recommendation.moods import LIBRARY_MOODS

if TYPE_CHECKING:
    from moodreel.catalog.repository import MovieCatalog

# =============================================================================
# CONSTANTS
# =============================================================================

PLAYLIST_OVERVIEW_SIZE = 12
"""Movies per playlist when listing every playlist."""

PLAYLIST_DETAIL_SIZE = 20
"""Movies in a single playlist fetched by id."""

RANDOM_POOL_SIZE = 100
"""Random picks are drawn from this many best-rated movies."""


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class MoodPlaylist:
    """Named selection of movies for a library mood.

    Attributes:
        id: Playlist identifier.
        name: Display name.
        description: One-line pitch.
        mood: Library mood id feeding the playlist.
        cover_image: Relative cover image path.
        movies: Recommended movies, empty until populated.
    """

    id: str
    name: str
    description: str
    mood: str
    cover_image: str
    movies: tuple[MovieRecord, ...] = field(default=())


def _playlist(mood: str, name: str, description: str) -> MoodPlaylist:
    return MoodPlaylist(
        id=mood,
        name=name,
        description=description,
        mood=mood,
        cover_image=f"/images/moods/{mood}.jpg",
    )


MOOD_PLAYLISTS: tuple[MoodPlaylist, ...] = (
    _playlist("happy", "Sunny Day", "Cheerful movies that will make you smile."),
    _playlist(
        "sad", "Rainy Day Thoughts", "When you need a good cry, these films feel it with you."
    ),
    _playlist("excited", "Adrenaline Rush", "Thrilling, tense, high-energy picks."),
    _playlist("relaxed", "Quiet Time", "Slow down and enjoy a calm viewing."),
    _playlist("romantic", "Date Night", "Sweet and bittersweet love stories."),
    _playlist("thoughtful", "Deep Thinking", "Films that question life and society."),
    _playlist("nostalgic", "Time Machine", "Back to the past and its fond memories."),
    _playlist("adventurous", "Into the Unknown", "Journeys, quests and far-away worlds."),
    _playlist("inspired", "Uplifting Stories", "Stories that push you forward."),
)


# =============================================================================
# PLAYLIST SERVICE
# =============================================================================


class PlaylistService:
    """Fill playlists and random selections from a catalog."""

    def __init__(self, catalog: "MovieCatalog", rng: random.Random | None = None) -> None:
        self._catalog = catalog
        self._rng = rng or random.Random()

    def populated_playlists(self, size: int = PLAYLIST_OVERVIEW_SIZE) -> list[MoodPlaylist]:
        """Every playlist with its recommended movies."""
        return [self._populate(playlist, size) for playlist in MOOD_PLAYLISTS]

    def playlist_by_id(
        self, playlist_id: str, size: int = PLAYLIST_DETAIL_SIZE
    ) -> MoodPlaylist | None:
        """One playlist with a longer selection, None for unknown ids."""
        for playlist in MOOD_PLAYLISTS:
            if playlist.id == playlist_id:
                return self._populate(playlist, size)
        return None

    def random_recommendations(self, count: int = 8) -> list[MovieRecord]:
        """Random sample among the best-rated movies.

        Args:
            count: Number of movies, capped by the pool size.

        Returns:
            Distinct movies in random order.
        """
        pool = sorted(self._catalog.movies, key=lambda m: m.vote_average, reverse=True)
        pool = pool[:RANDOM_POOL_SIZE]
        return self._rng.sample(pool, min(count, len(pool)))

    def _populate(self, playlist: MoodPlaylist, size: int) -> MoodPlaylist:
        mood = LIBRARY_MOODS.get(playlist.mood)
        movies = recommend(self._catalog.movies, mood, size)
        return replace(playlist, movies=tuple(movies))

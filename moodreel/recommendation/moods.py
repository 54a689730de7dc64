"""Mood taxonomies.

Two closed vocabularies coexist and are never merged:

- LIBRARY_MOODS ranks the curated dataset (happy, sad, excited...).
- DISCOVERY_MOODS drives live TMDB discovery (cheerful, gloomy, tense...).

Their keyword and genre sets differ, so a mood id is only meaningful
together with the taxonomy it belongs to.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

# =============================================================================
# TMDB GENRES
# =============================================================================

TMDB_GENRES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}
"""TMDB movie genre ids and their English names."""


# =============================================================================
# DATA STRUCTURES
# =============================================================================


class UnknownMoodError(LookupError):
    """Raised when a mood id is not part of a taxonomy."""

    def __init__(self, mood_id: str, taxonomy: str) -> None:
        self.mood_id = mood_id
        self.taxonomy = taxonomy
        super().__init__(f"Unknown mood '{mood_id}' in {taxonomy} taxonomy")


@dataclass(frozen=True)
class MoodDefinition:
    """Matching criteria of one mood.

    Attributes:
        id: Identifier used in URLs and API calls.
        label: Display label, also matched inside AI mood tags.
        emoji: Presentation glyph.
        keywords: Lower-case stems matched as substrings.
        genres: Canonical genre names matched exactly.
        genre_ids: TMDB genre ids for live discovery.
    """

    id: str
    label: str
    emoji: str
    keywords: tuple[str, ...]
    genres: tuple[str, ...] = ()
    genre_ids: tuple[int, ...] = ()

    @property
    def tag_needles(self) -> tuple[str, ...]:
        """Lower-cased strings searched inside AI mood tags."""
        return (self.label.lower(), *(k.lower() for k in self.keywords))

    @property
    def keyword_needles(self) -> tuple[str, ...]:
        return tuple(k.lower() for k in self.keywords)


@dataclass(frozen=True)
class MoodTaxonomy:
    """Closed, named set of mood definitions."""

    name: str
    moods: tuple[MoodDefinition, ...]
    _index: dict[str, MoodDefinition] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {mood.id: mood for mood in self.moods})

    def get(self, mood_id: str) -> MoodDefinition:
        """Resolve a mood id.

        Args:
            mood_id: Identifier, matched case-insensitively.

        Returns:
            The mood definition.

        Raises:
            UnknownMoodError: If the id is not part of this taxonomy.
        """
        mood = self._index.get(mood_id.lower())
        if mood is None:
            raise UnknownMoodError(mood_id, self.name)
        return mood

    @property
    def ids(self) -> list[str]:
        return [mood.id for mood in self.moods]

    def __contains__(self, mood_id: object) -> bool:
        return isinstance(mood_id, str) and mood_id.lower() in self._index

    def __iter__(self) -> Iterator[MoodDefinition]:
        return iter(self.moods)

    def __len__(self) -> int:
        return len(self.moods)


def _genre_names(genre_ids: tuple[int, ...]) -> tuple[str, ...]:
    return tuple(TMDB_GENRES[genre_id] for genre_id in genre_ids)


def _discovery(
    mood_id: str, emoji: str, genre_ids: tuple[int, ...], keywords: tuple[str, ...]
) -> MoodDefinition:
    return MoodDefinition(
        id=mood_id,
        label=mood_id.capitalize(),
        emoji=emoji,
        keywords=keywords,
        genres=_genre_names(genre_ids),
        genre_ids=genre_ids,
    )


# =============================================================================
# LIBRARY TAXONOMY
# =============================================================================

LIBRARY_MOODS = MoodTaxonomy(
    name="library",
    moods=(
        MoodDefinition(
            id="happy",
            label="Happy",
            emoji="😊",
            keywords=("comedy", "fun", "light-hearted", "uplifting", "heartwarming"),
            genres=("Comedy", "Family", "Animation"),
            genre_ids=(35, 10751, 16),
        ),
        MoodDefinition(
            id="sad",
            label="Sad",
            emoji="😢",
            keywords=("drama", "emotional", "tearjerker", "melancholy", "tragedy"),
            genres=("Drama", "War", "History"),
            genre_ids=(18, 10752, 36),
        ),
        MoodDefinition(
            id="excited",
            label="Excited",
            emoji="🤩",
            keywords=("action", "thriller", "adventure", "suspense", "intense"),
            genres=("Action", "Adventure", "Science Fiction", "Thriller"),
            genre_ids=(28, 12, 878, 53),
        ),
        MoodDefinition(
            id="relaxed",
            label="Relaxed",
            emoji="😌",
            keywords=("animation", "family", "gentle", "peaceful", "calm"),
            genres=("Animation", "Family", "Fantasy", "Music"),
            genre_ids=(16, 10751, 14, 10402),
        ),
        MoodDefinition(
            id="romantic",
            label="Romantic",
            emoji="💖",
            keywords=("romance", "love", "relationship", "passion", "dating"),
            genres=("Romance", "Drama"),
            genre_ids=(10749, 18),
        ),
        MoodDefinition(
            id="thoughtful",
            label="Thoughtful",
            emoji="🤔",
            keywords=("documentary", "biography", "philosophical", "thought-provoking"),
            genres=("Documentary", "History", "War", "Drama"),
            genre_ids=(99, 36, 10752, 18),
        ),
        MoodDefinition(
            id="nostalgic",
            label="Nostalgic",
            emoji="🕰️",
            keywords=("classic", "retro", "vintage", "childhood", "memory"),
            genres=("Family", "Fantasy", "Music"),
            genre_ids=(10751, 14, 10402),
        ),
        MoodDefinition(
            id="adventurous",
            label="Adventurous",
            emoji="🚀",
            keywords=("adventure", "exploration", "journey", "quest", "discovery"),
            genres=("Adventure", "Action", "Fantasy", "Science Fiction"),
            genre_ids=(12, 28, 14, 878),
        ),
        MoodDefinition(
            id="inspired",
            label="Inspired",
            emoji="✨",
            keywords=("biography", "success", "achievement", "overcoming", "motivational"),
            # Biography and Sport are not TMDB genres and never match TMDB data
            genres=("Drama", "Biography", "History", "Sport"),
            genre_ids=(18, 36),
        ),
    ),
)


# =============================================================================
# DISCOVERY TAXONOMY
# =============================================================================

DISCOVERY_MOODS = MoodTaxonomy(
    name="discovery",
    moods=(
        _discovery("cheerful", "😊", (35, 10751), ("uplifting", "feel-good")),
        _discovery("reflective", "🤔", (18,), ("thought-provoking", "philosophical")),
        _discovery("gloomy", "😔", (18,), ("melancholic", "dark")),
        _discovery("humorous", "😂", (35,), ("comedy", "funny")),
        _discovery("melancholy", "🥺", (18,), ("emotional", "touching")),
        _discovery("idyllic", "🌈", (14, 12), ("fantasy", "magical")),
        _discovery("chill", "😎", (35, 10751), ("relaxing", "light-hearted")),
        _discovery("romantic", "❤️", (10749,), ("romance", "love")),
        _discovery("weird", "🌀", (878, 14), ("surreal", "bizarre")),
        _discovery("passionate", "🔥", (10749,), ("sensual", "romantic")),
        _discovery("sleepy", "😴", (18, 10751), ("calm", "soothing")),
        _discovery("angry", "😠", (28, 80), ("intense", "action-packed")),
        _discovery("fearful", "😨", (27, 53), ("suspense", "thriller")),
        _discovery("lonely", "🫂", (18,), ("connection", "friendship")),
        _discovery("tense", "😬", (53, 9648), ("suspense", "mystery")),
        _discovery("thoughtful", "🧠", (99, 18), ("documentary", "inspiring")),
        _discovery("thrill", "🎢", (28, 12), ("adventure", "exciting")),
        _discovery("playful", "🎈", (16, 35), ("animation", "fun")),
    ),
)


TAXONOMIES: dict[str, MoodTaxonomy] = {
    LIBRARY_MOODS.name: LIBRARY_MOODS,
    DISCOVERY_MOODS.name: DISCOVERY_MOODS,
}

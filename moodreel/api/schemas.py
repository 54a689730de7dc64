"""Pydantic schemas for API request/response validation.

Defines data transfer objects for movies, moods, playlists and chat.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from moodreel.catalog.models import CastMember, Director, Genre, Keyword, MovieRecord
from moodreel.recommendation.moods import MoodDefinition
from moodreel.recommendation.playlists import MoodPlaylist

# =============================================================================
# HEALTH
# =============================================================================


class CatalogComponentHealth(BaseModel):
    """Dataset health status."""

    loaded: bool = False
    movies: int = 0
    enriched: int = 0


class LLMComponentHealth(BaseModel):
    """LLM service health status."""

    configured: bool = False
    loaded: bool = False


class TMDBComponentHealth(BaseModel):
    """TMDB credentials status."""

    configured: bool = False


class HealthComponents(BaseModel):
    """Health status of all system components."""

    catalog: CatalogComponentHealth = Field(default_factory=CatalogComponentHealth)
    llm: LLMComponentHealth = Field(default_factory=LLMComponentHealth)
    tmdb: TMDBComponentHealth = Field(default_factory=TMDBComponentHealth)


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(examples=["healthy"])
    version: str = Field(examples=["1.0.0"])
    components: HealthComponents = Field(default_factory=HealthComponents)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# MOVIES
# =============================================================================


class MovieResponse(BaseModel):
    """Movie as served to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    original_title: str = ""
    overview: str = ""
    release_date: str | None = None
    release_year: int | None = None
    era: str = "unknown"
    runtime: int | None = None
    genres: list[Genre] = Field(default_factory=list)
    keywords: list[Keyword] = Field(default_factory=list)
    vote_average: float = 0.0
    vote_count: int = 0
    score_percent: int = 0
    poster_url: str | None = None
    backdrop_url: str | None = None
    trailer_url: str | None = None
    cast: list[CastMember] = Field(default_factory=list)
    directors: list[Director] = Field(default_factory=list)
    ai_review: str | None = None
    mood_tags: list[str] | None = None
    watch_suggestion: str | None = None

    @classmethod
    def from_record(cls, movie: MovieRecord) -> "MovieResponse":
        return cls.model_validate(movie)


class RankedMovieResponse(MovieResponse):
    """Recommended movie with the tier that selected it."""

    tier: str = Field(examples=["ai_tags", "keywords", "genres", "fallback"])


# =============================================================================
# MOODS
# =============================================================================


class MoodResponse(BaseModel):
    """Mood of a taxonomy."""

    id: str
    label: str
    emoji: str
    keywords: list[str]
    genres: list[str]

    @classmethod
    def from_definition(cls, mood: MoodDefinition) -> "MoodResponse":
        return cls(
            id=mood.id,
            label=mood.label,
            emoji=mood.emoji,
            keywords=list(mood.keywords),
            genres=list(mood.genres),
        )


class TagCountResponse(BaseModel):
    """Number of movies carrying a mood tag."""

    tag: str
    count: int


class PersonalizedRequest(BaseModel):
    """Preferences for a personalized recommendation."""

    preferred_genres: list[str] = Field(default_factory=list, max_length=10)
    min_score_percent: int = Field(default=0, ge=0, le=100)
    prompt: str | None = Field(default=None, max_length=500)
    limit: int = Field(default=5, ge=1, le=50)


class PersonalizedResponse(BaseModel):
    """Personalized recommendation with its explanation."""

    mood: str
    reasoning: str
    suggested_prompt: str
    movies: list[MovieResponse]
    scores: dict[int, int]


# =============================================================================
# PLAYLISTS
# =============================================================================


class PlaylistResponse(BaseModel):
    """Mood playlist with its movies."""

    id: str
    name: str
    description: str
    mood: str
    cover_image: str
    movies: list[MovieResponse]

    @classmethod
    def from_playlist(cls, playlist: MoodPlaylist) -> "PlaylistResponse":
        return cls(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            mood=playlist.mood,
            cover_image=playlist.cover_image,
            movies=[MovieResponse.from_record(m) for m in playlist.movies],
        )


# =============================================================================
# DISCOVERY
# =============================================================================


class DiscoverResponse(BaseModel):
    """Live TMDB discovery result."""

    mood: str
    movies: list[MovieResponse]


# =============================================================================
# CHAT SCHEMAS
# =============================================================================


class ChatMessage(BaseModel):
    """One turn of the conversation."""

    role: str = Field(pattern="^(user|assistant)$")
    content: str = Field(min_length=1, max_length=2000)


class ChatRequest(BaseModel):
    """Chat endpoint request schema."""

    messages: list[ChatMessage] = Field(min_length=1, max_length=20)


class ChatResponse(BaseModel):
    """Chat response schema."""

    reply: str = Field(description="Assistant text, possibly empty")
    filters: dict | None = Field(default=None, description="TMDB discover filters used")
    movies: list[dict] = Field(default_factory=list, description="TMDB discover results")
    total_results: int = 0

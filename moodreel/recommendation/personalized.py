"""Preference-weighted recommendations with a short explanation.

Complements the tiered engine when the user also states preferred
genres, a rating floor or a free-text wish.
"""

import random
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from moodreel.catalog.models import MovieRecord
from moodreel.recommendation.moods import MoodDefinition

# =============================================================================
# CONSTANTS
# =============================================================================

MOOD_KEYWORD_WEIGHT = 2
PREFERRED_GENRE_WEIGHT = 3
PROMPT_WORD_WEIGHT = 1
MIN_PROMPT_WORD_LENGTH = 4

PERSONALIZED_KEYWORDS: dict[str, tuple[str, ...]] = {
    "happy": (
        "comedy", "adventure", "fun", "uplifting", "heartwarming", "joy", "happiness",
        "light-hearted",
    ),
    "sad": ("drama", "emotional", "touching", "melancholy", "tragic", "tear-jerker", "moving"),
    "excited": (
        "action", "thriller", "adventure", "suspense", "high-energy", "exhilarating", "intense",
    ),
    "relaxed": (
        "relax", "calm", "peaceful", "soothing", "gentle", "comfort", "tranquil", "serene",
    ),
    "romantic": (
        "romance", "love", "relationship", "romantic comedy", "passion", "dramatic", "emotional",
    ),
    "thoughtful": (
        "documentary", "drama", "thought-provoking", "philosophical", "intellectual", "complex",
        "meaningful",
    ),
    "nostalgic": (
        "classic", "retro", "past", "childhood", "memory", "reminiscent", "vintage", "timeless",
    ),
    "adventurous": (
        "adventure", "action", "exploration", "journey", "quest", "expedition", "discovery",
        "travel",
    ),
    "inspired": (
        "inspiring", "motivational", "uplifting", "empowering", "visionary", "achievement",
        "triumph", "success",
    ),
}
"""Words searched in title, overview, genres and keywords when scoring.

Broader than the library mood keywords, which only rank AI mood tags.
"""

_INTROS: dict[str, tuple[str, ...]] = {
    "happy": (
        "You seem to be in a good mood! Here are a few films to keep you smiling.",
        "Since you feel happy, these light and joyful movies should suit you well.",
    ),
    "sad": (
        "In low moments the right film can be a comfort. These might resonate with you.",
        "Sometimes a moving film helps let emotions out. Try these heartfelt picks.",
    ),
    "excited": (
        "High energy calls for matching movies! These will keep the adrenaline going.",
        "Since you are excited, try these action-packed adventures.",
    ),
    "relaxed": (
        "Relaxing time deserves gentle films. These will keep you calm.",
        "Slow-paced and cosy, these movies are perfect to unwind.",
    ),
    "romantic": (
        "A romantic mood and romantic movies, a perfect match.",
        "These love stories will sweep you away.",
    ),
    "thoughtful": (
        "Thoughtful moments call for films with depth.",
        "These thought-provoking movies echo what is on your mind.",
    ),
    "nostalgic": (
        "Nostalgia pairs best with classics. These films take you back in time.",
        "These timeless movies carry the memories of their era.",
    ),
    "adventurous": (
        "An adventurous heart needs adventurous movies!",
        "These films will take you on journeys to unknown worlds.",
    ),
    "inspired": (
        "Looking for inspiration? These films will spark your drive.",
        "These uplifting stories will give you a fresh push forward.",
    ),
}
_DEFAULT_INTROS = ("Here are a few films matching your mood.",)

_HIGHLIGHTS: dict[str, tuple[str, ...]] = {
    "happy": (
        "its light, funny story will have you laughing out loud.",
        "it is packed with cheerful moments that lift any mood.",
    ),
    "sad": (
        "its honest emotions may well echo your own.",
        "it faces life's hardships yet ends on a note of hope.",
    ),
    "excited": (
        "its tense plot keeps the energy up from start to finish.",
        "its action scenes are built to satisfy a craving for thrills.",
    ),
    "relaxed": (
        "its slow, quiet pace is made for calm evenings.",
        "its gentle storytelling and soft visuals help you unwind.",
    ),
    "romantic": (
        "its tender love story goes straight to the heart.",
        "it captures both the beauty and the complexity of love.",
    ),
    "thoughtful": (
        "the questions it raises stay with you long after.",
        "it looks at human nature from an unusual angle.",
    ),
    "nostalgic": (
        "it captures the spirit of its era perfectly.",
        "its period feel brings back fond memories.",
    ),
    "adventurous": (
        "its gripping quest feeds the urge to explore.",
        "its journey and its sights feel like a real expedition.",
    ),
    "inspired": (
        "its story of perseverance gives a real push forward.",
        "it shows how its characters overcome their obstacles.",
    ),
}
_DEFAULT_HIGHLIGHTS = ("it fits your mood well.",)

_VIEWING_TIPS: dict[str, tuple[str, ...]] = {
    "happy": (
        "Grab your favourite snacks and watch with friends, laughter doubles when shared.",
        "Try a daytime screening, sunshine and comedy go well together.",
    ),
    "sad": (
        "Set up a cosy corner, a hot tea and a warm blanket would be perfect.",
        "Afterwards, some soft music or a chat with a friend can help you settle.",
    ),
    "excited": (
        "Turn the sound system up, the audio is half the experience.",
        "Get the popcorn ready and pick the biggest screen you have.",
    ),
    "relaxed": (
        "Pick a quiet spot and a warm drink, and let yourself slow down.",
        "Watch in the evening with dim lights to deepen the calm.",
    ),
    "romantic": (
        "A few candles and soft lighting will set the scene.",
        "These are perfect to share with a partner, or to watch while missing someone.",
    ),
    "thoughtful": (
        "Choose a quiet place without interruptions so you can fully take it in.",
        "Keep a notebook nearby for the lines that strike you.",
    ),
    "nostalgic": (
        "Invite the friends or family who share these memories.",
        "Flip through some old photos afterwards to round off the evening.",
    ),
    "adventurous": (
        "Try watching somewhere new, an outdoor projection makes a great setting.",
        "Plan a small adventure of your own for after the credits.",
    ),
    "inspired": (
        "Write down the lines or scenes that motivate you.",
        "Set yourself a small goal afterwards to turn inspiration into action.",
    ),
}
_DEFAULT_VIEWING_TIPS = ("Get comfortable and enjoy the show.",)


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class PersonalizedResult:
    """Recommended movies with the reasoning shown to the user.

    Attributes:
        movies: Movies, best match first.
        reasoning: Human-readable explanation.
        suggested_prompt: Viewing tip for the mood.
        scores: Match score per movie id.
    """

    movies: list[MovieRecord]
    reasoning: str
    suggested_prompt: str
    scores: dict[int, int] = field(default_factory=dict)


# =============================================================================
# SCORING
# =============================================================================


def _searchable_text(movie: MovieRecord) -> str:
    parts = [movie.title, movie.overview]
    parts.extend(genre.name for genre in movie.genres)
    parts.extend(keyword.name for keyword in movie.keywords)
    return " ".join(parts).lower()


def _prompt_words(prompt: str | None) -> list[str]:
    if not prompt:
        return []
    words = re.split(r"\s+", prompt.lower())
    return [w for w in words if len(w) >= MIN_PROMPT_WORD_LENGTH]


def match_score(
    movie: MovieRecord,
    mood: MoodDefinition,
    preferred_genres: Iterable[str] = (),
    prompt: str | None = None,
) -> int:
    """Weighted count of mood keywords, preferred genres and prompt words."""
    text = _searchable_text(movie)
    preferred = set(preferred_genres)
    keywords = PERSONALIZED_KEYWORDS.get(mood.id, mood.keyword_needles)

    score = sum(MOOD_KEYWORD_WEIGHT for kw in keywords if kw in text)
    score += sum(PREFERRED_GENRE_WEIGHT for genre in movie.genres if genre.name in preferred)
    score += sum(PROMPT_WORD_WEIGHT for word in _prompt_words(prompt) if word in text)
    return score


def personalized_recommend(
    movies: Sequence[MovieRecord],
    mood: MoodDefinition,
    preferred_genres: Sequence[str] = (),
    min_score_percent: int = 0,
    prompt: str | None = None,
    limit: int = 5,
    rng: random.Random | None = None,
) -> PersonalizedResult:
    """Rank movies by match score, then score_percent.

    Args:
        movies: Dataset to rank.
        mood: Resolved mood definition.
        preferred_genres: Genre names the user likes.
        min_score_percent: Rating floor on the 0-100 scale.
        prompt: Free-text wish, words shorter than 4 letters are ignored.
        limit: Maximum number of results.
        rng: Random source for the explanation and tip wording.

    Returns:
        Ranked movies, their explanation and a viewing tip.
    """
    candidates = [m for m in movies if m.score_percent >= min_score_percent]
    scores = {m.id: match_score(m, mood, preferred_genres, prompt) for m in candidates}
    candidates.sort(key=lambda m: (scores[m.id], m.score_percent), reverse=True)

    selected = candidates[:limit]
    rng = rng or random.Random()
    reasoning = _build_reasoning(mood, selected, preferred_genres, prompt, rng)
    return PersonalizedResult(
        movies=selected,
        reasoning=reasoning,
        suggested_prompt=rng.choice(_VIEWING_TIPS.get(mood.id, _DEFAULT_VIEWING_TIPS)),
        scores={m.id: scores[m.id] for m in selected},
    )


def _build_reasoning(
    mood: MoodDefinition,
    movies: list[MovieRecord],
    preferred_genres: Sequence[str],
    prompt: str | None,
    rng: random.Random,
) -> str:
    parts = [rng.choice(_INTROS.get(mood.id, _DEFAULT_INTROS))]

    if prompt:
        parts.append(f'You mentioned "{prompt}", which I took into account.')
    if preferred_genres:
        parts.append(f"Picks lean towards {', '.join(preferred_genres)}.")
    highlights = _HIGHLIGHTS.get(mood.id, _DEFAULT_HIGHLIGHTS)
    if movies:
        parts.append(f"{movies[0].title} stands out in particular: {rng.choice(highlights)}")
    if len(movies) > 1:
        parts.append(f"As for {movies[1].title}, {rng.choice(highlights)}")
    parts.append("Hope these films suit your mood!")

    return " ".join(parts)

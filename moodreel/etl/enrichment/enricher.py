"""AI enrichment of dataset movies.

Three independent generations per movie: a short critic review, five
mood tags and a one-sentence viewing suggestion. A generation that still
fails after its retries leaves the corresponding field empty.
"""

import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from moodreel.etl.enrichment.retry import RetryPolicy, build_retrying
from moodreel.services.llm.llm_service import LLMService, LLMServiceError
from moodreel.settings import settings
from moodreel.utils.logger import setup_logger

T = TypeVar("T")

logger = setup_logger("etl.enrichment")

# =============================================================================
# PROMPTS
# =============================================================================

REVIEW_PROMPT = (
    "As a professional film critic, write a concise yet insightful review "
    "(around 100 words) for the following movie. Focus on its artistic merit, "
    "cultural impact, and standout elements:\n{info}"
)

MOOD_TAGS_PROMPT = (
    "Based on the following movie information, list 5 emotional/atmospheric tags "
    "that best describe this film, separated by commas. For example: heartwarming, "
    "thrilling, suspenseful, romantic, etc.\n{info}"
)

SUGGESTION_PROMPT = (
    "Provide a single sentence recommendation for when and by whom this movie "
    "should be watched:\n{info}"
)

MOOD_TAG_COUNT = 5

_TAG_SEPARATORS = re.compile(r"[,،\n]")
_TAG_STRIP = " \t.\"'*-•"


class TagParseError(ValueError):
    """Raised when a generation does not contain enough mood tags."""


def parse_mood_tags(text: str, count: int = MOOD_TAG_COUNT) -> list[str]:
    """Extract mood tags from a comma-separated generation.

    Args:
        text: Model output.
        count: Number of tags expected.

    Returns:
        The first `count` non-empty tags.

    Raises:
        TagParseError: If fewer than `count` tags are found.
    """
    tags = [tag.strip(_TAG_STRIP) for tag in _TAG_SEPARATORS.split(text)]
    tags = [tag for tag in tags if tag]
    if len(tags) < count:
        raise TagParseError(f"Expected {count} mood tags, got {len(tags)}: {text!r}")
    return tags[:count]


def build_movie_info(movie: dict[str, Any]) -> str:
    """Describe a movie for the prompts."""
    release_date = movie.get("release_date") or ""
    year = release_date.split("-")[0] if release_date else "Unknown"
    directors = ", ".join(d["name"] for d in movie.get("directors") or []) or "Unknown"
    genres = ", ".join(g["name"] for g in movie.get("genres") or []) or "Unknown"
    return (
        f"Title: {movie.get('title')} ({year})\n"
        f"Director: {directors}\n"
        f"Genres: {genres}\n"
        f"Rating: {movie.get('vote_average', 0)}/10 ({movie.get('vote_count', 0)} votes)\n"
        f"Overview: {movie.get('overview') or ''}"
    )


# =============================================================================
# ENRICHER
# =============================================================================


@dataclass
class Enrichment:
    """Generated fields for one movie, None when generation failed."""

    ai_review: str | None = None
    mood_tags: list[str] | None = None
    watch_suggestion: str | None = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.ai_review, self.mood_tags, self.watch_suggestion)

    def as_fields(self) -> dict[str, Any]:
        return {
            "ai_review": self.ai_review,
            "mood_tags": self.mood_tags,
            "watch_suggestion": self.watch_suggestion,
        }


class MovieEnricher:
    """Generate review, mood tags and suggestion with the local LLM."""

    def __init__(
        self,
        llm: LLMService,
        policy: RetryPolicy | None = None,
        call_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize enricher.

        Args:
            llm: Text generation service.
            policy: Retry budgets (default from settings).
            call_delay: Pause between two generations (default from settings).
            sleep: Sleep function (replaced in tests).
        """
        self._llm = llm
        self._policy = policy or RetryPolicy.from_settings()
        self._call_delay = settings.pipeline.call_delay if call_delay is None else call_delay
        self._sleep = sleep

    def enrich(self, movie: dict[str, Any]) -> Enrichment:
        """Run the three generations for a movie.

        Args:
            movie: Dataset record (title, directors, genres, overview...).

        Returns:
            Generated fields; failed generations are None.
        """
        info = build_movie_info(movie)
        title = movie.get("title")

        review = self._attempt(title, "review", lambda: self._generate(REVIEW_PROMPT, info))
        self._sleep(self._call_delay)
        tags = self._attempt(
            title, "mood tags", lambda: parse_mood_tags(self._generate(MOOD_TAGS_PROMPT, info))
        )
        self._sleep(self._call_delay)
        suggestion = self._attempt(
            title, "suggestion", lambda: self._generate(SUGGESTION_PROMPT, info)
        )

        return Enrichment(ai_review=review, mood_tags=tags, watch_suggestion=suggestion)

    def _generate(self, template: str, info: str) -> str:
        result = self._llm.generate_chat([{"role": "user", "content": template.format(info=info)}])
        text = result["text"].strip()
        if not text:
            raise LLMServiceError("Empty generation")
        return text

    def _attempt(self, title: str | None, field_name: str, call: Callable[[], T]) -> T | None:
        retrying = build_retrying(self._policy, sleep=self._sleep)
        try:
            return retrying(call)
        except Exception as e:
            logger.error(f"Generating {field_name} for '{title}' failed: {e}")
            return None

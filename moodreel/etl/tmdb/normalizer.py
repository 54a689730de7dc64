"""TMDB data normalizer.

Transforms raw TMDB detail responses (with appended videos, credits,
keywords, release dates and watch providers) into dataset records.
"""

import logging
from datetime import date
from typing import Any

from moodreel.catalog.models import (
    YOUTUBE_WATCH_URL,
    build_image_url,
    era_for_year,
    score_from_vote_average,
    year_from_date,
)
from moodreel.settings import TMDBSettings, settings

logger = logging.getLogger(__name__)


class TMDBNormalizer:
    """Normalizes TMDB API data into MovieRecord-shaped dicts.

    The output is plain JSON-ready data: the raw harvest file keeps
    extra fields (certifications, providers) that the dataset build
    later drops.
    """

    DIRECTOR_JOBS = {"Director"}

    # Maximum actors to keep per film
    MAX_ACTORS = 10

    # Preferred YouTube video types, in order
    TRAILER_TYPES = ("Trailer", "Teaser")

    def __init__(self, config: TMDBSettings | None = None) -> None:
        self._config = config or settings.tmdb

    # -------------------------------------------------------------------------
    # Film Normalization
    # -------------------------------------------------------------------------

    def normalize_movie(
        self,
        raw: dict[str, Any],
        harvest_group: str | None = None,
    ) -> dict[str, Any]:
        """Normalize a detailed TMDB movie.

        Args:
            raw: Movie details with appended sub-resources.
            harvest_group: Label of the discovery query that found the movie.

        Returns:
            Dataset record.
        """
        release_date = self._parse_date(raw.get("release_date"))
        release_year = year_from_date(release_date)
        vote_average = raw.get("vote_average") or 0.0
        credits = raw.get("credits") or {}
        trailer_key = self.find_trailer_key(raw.get("videos") or {})

        return {
            "id": raw["id"],
            "imdb_id": raw.get("imdb_id"),
            "title": self._clean_string(raw["title"]) or str(raw["id"]),
            "original_title": raw.get("original_title") or raw["title"],
            "overview": self._clean_string(raw.get("overview")) or "",
            "tagline": self._clean_string(raw.get("tagline")),
            "release_date": release_date,
            "release_year": release_year,
            "runtime": self._validate_runtime(raw.get("runtime")),
            "original_language": raw.get("original_language"),
            "genres": [{"id": g["id"], "name": g["name"]} for g in raw.get("genres") or []],
            "keywords": self.normalize_keywords(raw.get("keywords") or {}),
            "vote_average": vote_average,
            "vote_count": raw.get("vote_count") or 0,
            "popularity": raw.get("popularity") or 0.0,
            "score_percent": score_from_vote_average(vote_average),
            "poster_url": build_image_url(self._config.image_base_url, raw.get("poster_path")),
            "backdrop_url": build_image_url(
                self._config.backdrop_base_url, raw.get("backdrop_path")
            ),
            "trailer_url": f"{YOUTUBE_WATCH_URL}{trailer_key}" if trailer_key else None,
            "cast": self.normalize_cast(credits.get("cast") or []),
            "directors": self.normalize_directors(credits.get("crew") or []),
            "certifications": self.normalize_certifications(raw.get("release_dates") or {}),
            "watch_providers": self.normalize_watch_providers(raw.get("watch/providers") or {}),
            "era": era_for_year(release_year),
            "harvest_group": harvest_group,
        }

    def normalize_movies(
        self,
        raw_movies: list[dict[str, Any]],
        harvest_group: str | None = None,
    ) -> list[dict[str, Any]]:
        """Normalize multiple movies, skipping malformed ones."""
        normalized = []
        for raw in raw_movies:
            try:
                normalized.append(self.normalize_movie(raw, harvest_group))
            except (KeyError, TypeError) as e:
                logger.warning(f"Failed to normalize movie {raw.get('id')}: {e}")
        return normalized

    # -------------------------------------------------------------------------
    # Sub-resources
    # -------------------------------------------------------------------------

    def normalize_cast(self, cast: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Top billed actors as ``{id, name, character}``."""
        sorted_cast = sorted(cast, key=lambda x: x.get("order", 999))
        return [
            {"id": member.get("id"), "name": member["name"], "character": member.get("character")}
            for member in sorted_cast[: self.MAX_ACTORS]
        ]

    def normalize_directors(self, crew: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Crew members credited as director."""
        return [
            {"id": member.get("id"), "name": member["name"]}
            for member in crew
            if member.get("job") in self.DIRECTOR_JOBS
        ]

    @staticmethod
    def normalize_keywords(keywords: dict[str, Any]) -> list[dict[str, Any]]:
        """Flatten the appended keywords resource."""
        return [{"id": k.get("id"), "name": k["name"]} for k in keywords.get("keywords") or []]

    @classmethod
    def find_trailer_key(cls, videos: dict[str, Any]) -> str | None:
        """Pick the first YouTube trailer, else the first teaser.

        Args:
            videos: Appended videos resource (``{"results": [...]}``).

        Returns:
            YouTube video key or None.
        """
        youtube = [v for v in videos.get("results") or [] if v.get("site") == "YouTube"]
        for video_type in cls.TRAILER_TYPES:
            for video in youtube:
                if video.get("type") == video_type and video.get("key"):
                    return video["key"]
        return None

    @staticmethod
    def normalize_certifications(release_dates: dict[str, Any]) -> list[dict[str, Any]]:
        """Age ratings per country."""
        certifications = []
        for country in release_dates.get("results") or []:
            for release in country.get("release_dates") or []:
                if release.get("certification"):
                    certifications.append(
                        {
                            "country": country.get("iso_3166_1"),
                            "certification": release["certification"],
                            "release_date": release.get("release_date"),
                        }
                    )
        return certifications

    def normalize_watch_providers(self, providers: dict[str, Any]) -> list[str]:
        """Names of the streaming providers in the configured region."""
        region = (providers.get("results") or {}).get(self._config.watch_region) or {}
        names = [p["provider_name"] for p in region.get("flatrate") or [] if "provider_name" in p]
        return list(dict.fromkeys(names))

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    @staticmethod
    def _clean_string(value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned if cleaned else None

    @staticmethod
    def _parse_date(date_str: str | None) -> str | None:
        """Validate an ISO date string.

        Args:
            date_str: Date string in YYYY-MM-DD format.

        Returns:
            The same string if valid, else None.
        """
        if not date_str:
            return None
        try:
            return date.fromisoformat(date_str).isoformat()
        except ValueError:
            logger.debug(f"Invalid date format: {date_str}")
            return None

    @staticmethod
    def _validate_runtime(runtime: int | None) -> int | None:
        if runtime is None or runtime <= 0:
            return None
        if runtime > 1000:
            logger.debug(f"Suspicious runtime: {runtime}")
            return None
        return runtime

"""Dataset build: rank raw movies, enrich the best ones, compute stats.

The build is a sequential loop. Progress is written to a side file
every batch so an interrupted run resumes where it stopped; the side
file is removed once the dataset is written.
"""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from moodreel.catalog.models import (
    MovieCollection,
    MovieRecord,
    era_for_year,
    score_from_vote_average,
    year_from_date,
)
from moodreel.etl.enrichment.enricher import MovieEnricher
from moodreel.settings import settings
from moodreel.utils.logger import setup_logger
from moodreel.utils.progress_store import ProgressStore

logger = setup_logger("etl.builder")

PROGRESS_NAME = "dataset_build"

MAX_CAST = 5
MAX_KEYWORDS = 10


# =============================================================================
# RECORD SHAPING
# =============================================================================


def ranking_score(movie: dict[str, Any]) -> float:
    """score_percent, or vote_average on the same scale when missing."""
    return movie.get("score_percent") or (movie.get("vote_average") or 0) * 10


def rank_candidates(movies: list[dict[str, Any]], top_n: int) -> list[dict[str, Any]]:
    """Sort by score then vote_count (both descending) and keep `top_n`."""
    ranked = sorted(
        movies,
        key=lambda m: (ranking_score(m), m.get("vote_count") or 0),
        reverse=True,
    )
    return ranked[:top_n]


def slim_movie(movie: dict[str, Any]) -> dict[str, Any]:
    """Keep only the fields the dataset serves.

    Args:
        movie: Raw harvested movie.

    Returns:
        Dataset record without AI fields.
    """
    release_date = movie.get("release_date")
    release_year = year_from_date(release_date)
    return {
        "id": movie["id"],
        "title": movie["title"],
        "original_title": movie.get("original_title") or movie["title"],
        "overview": movie.get("overview") or "",
        "release_date": release_date,
        "release_year": release_year,
        "poster_url": movie.get("poster_url"),
        "backdrop_url": movie.get("backdrop_url"),
        "trailer_url": movie.get("trailer_url"),
        "genres": movie.get("genres") or [],
        "vote_average": movie.get("vote_average") or 0.0,
        "vote_count": movie.get("vote_count") or 0,
        "score_percent": movie.get("score_percent")
        or score_from_vote_average(movie.get("vote_average")),
        "cast": [
            {"id": a.get("id"), "name": a["name"], "character": a.get("character")}
            for a in (movie.get("cast") or [])[:MAX_CAST]
        ],
        "directors": [
            {"id": d.get("id"), "name": d["name"]} for d in movie.get("directors") or []
        ],
        "keywords": (movie.get("keywords") or [])[:MAX_KEYWORDS],
        "era": movie.get("era") or era_for_year(release_year),
        "runtime": movie.get("runtime"),
    }


def compute_statistics(movies: list[MovieRecord]) -> dict[str, Any]:
    """Aggregate figures stored alongside the dataset.

    Returns:
        avg_rating (mean score_percent), oldest_movie and newest_movie
        titles, total_runtime in minutes.
    """
    dated = [m for m in movies if m.release_date]
    return {
        "avg_rating": (
            round(sum(m.score_percent for m in movies) / len(movies), 2) if movies else 0.0
        ),
        "oldest_movie": min(dated, key=lambda m: m.release_date).title if dated else None,
        "newest_movie": max(dated, key=lambda m: m.release_date).title if dated else None,
        "total_runtime": sum(m.runtime or 0 for m in movies),
    }


# =============================================================================
# BUILDER
# =============================================================================


@dataclass
class BuildReport:
    """Summary of a build run.

    Attributes:
        collection: Final dataset.
        resumed_from: Movies recovered from a previous run.
        enriched: Movies with every AI field generated in this run.
        partially_enriched: Movies with at least one AI field missing.
    """

    collection: MovieCollection
    resumed_from: int = 0
    enriched: int = 0
    partially_enriched: int = 0


class DatasetBuilder:
    """Turn a raw harvest into the served dataset."""

    def __init__(
        self,
        enricher: MovieEnricher | None = None,
        progress: ProgressStore | None = None,
        top_n: int | None = None,
        batch_size: int | None = None,
        batch_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize builder.

        Args:
            enricher: AI enricher, None to build without AI fields.
            progress: Side-file store for resumable runs.
            top_n: Movies kept (default from settings).
            batch_size: Movies between two progress saves (default from settings).
            batch_delay: Pause between batches (default from settings).
            sleep: Sleep function (replaced in tests).
        """
        config = settings.pipeline
        self._enricher = enricher
        self._progress = progress or ProgressStore(prefix="build")
        self._top_n = top_n or config.top_n
        self._batch_size = batch_size or config.batch_size
        self._batch_delay = config.batch_delay if batch_delay is None else batch_delay
        self._sleep = sleep

    def build(self, raw_movies: list[dict[str, Any]]) -> BuildReport:
        """Rank, slim and enrich movies into a collection.

        Args:
            raw_movies: Harvested movies.

        Returns:
            Build report with the final collection.
        """
        start = time.monotonic()
        selected = rank_candidates(raw_movies, self._top_n)
        logger.info(f"Selected {len(selected)}/{len(raw_movies)} highest-rated movies")

        processed = self._resume(selected)
        report_resumed = len(processed)
        enriched = partial = 0

        for index in range(len(processed), len(selected)):
            movie = selected[index]
            logger.info(f"Processing movie {index + 1}/{len(selected)}: {movie.get('title')}")

            record = slim_movie(movie)
            if self._enricher is not None:
                enrichment = self._enricher.enrich(movie)
                record.update(enrichment.as_fields())
                if enrichment.is_complete:
                    enriched += 1
                else:
                    partial += 1
            processed.append(record)

            is_last = index == len(selected) - 1
            if (index + 1) % self._batch_size == 0 or is_last:
                self._save_progress(processed, index)
                if not is_last:
                    logger.info(f"Waiting {self._batch_delay}s before next batch")
                    self._sleep(self._batch_delay)

        movies = [MovieRecord.model_validate(record) for record in processed]
        collection = MovieCollection(
            count=len(movies),
            generated_at=datetime.now().isoformat(),
            processing_time_seconds=round(time.monotonic() - start, 2),
            movies=movies,
            **compute_statistics(movies),
        )
        return BuildReport(
            collection=collection,
            resumed_from=report_resumed,
            enriched=enriched,
            partially_enriched=partial,
        )

    def build_file(self, source: Path, target: Path) -> BuildReport:
        """Build from a harvest file and write the dataset.

        The progress file is deleted only after the dataset is written.

        Raises:
            ValueError: If the source has no movie array.
        """
        with open(source, encoding="utf-8") as f:
            raw = json.load(f)
        raw_movies = raw.get("movies") if isinstance(raw, dict) else raw
        if not isinstance(raw_movies, list):
            raise ValueError(f"{source} does not contain a movie array")

        report = self.build(raw_movies)
        write_collection(report.collection, target)
        self._progress.delete(PROGRESS_NAME)

        stats = report.collection
        logger.info(
            f"Dataset written to {target}: {stats.count} movies, "
            f"avg rating {stats.avg_rating}%, oldest '{stats.oldest_movie}', "
            f"newest '{stats.newest_movie}'"
        )
        return report

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def _resume(self, selected: list[dict[str, Any]]) -> list[dict[str, Any]]:
        saved = self._progress.load(PROGRESS_NAME)
        if not saved:
            return []

        movies = saved.get("movies") or []
        expected_ids = [m["id"] for m in selected[: len(movies)]]
        if [m.get("id") for m in movies] != expected_ids:
            logger.warning("Progress file does not match the current selection, starting over")
            return []

        logger.info(f"Resuming after {len(movies)} already processed movies")
        return list(movies)

    def _save_progress(self, processed: list[dict[str, Any]], last_index: int) -> None:
        self._progress.save(
            PROGRESS_NAME,
            {"count": len(processed), "last_processed": last_index, "movies": processed},
        )
        logger.info(f"Progress saved: {len(processed)} movies processed")


def write_collection(collection: MovieCollection, path: Path) -> Path:
    """Serialize a collection as the dataset JSON document."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(collection.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
    return path

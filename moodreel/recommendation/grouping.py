"""Mood tag statistics over a movie collection.

Pure functions over sequences of records. Tags are free text produced by
the enrichment step, so every comparison happens on lower-cased values.
"""

from collections import Counter
from collections.abc import Iterable, Sequence

from moodreel.catalog.models import MovieRecord


def extract_mood_tags(movies: Iterable[MovieRecord]) -> list[str]:
    """Return the distinct lower-cased mood tags, sorted ascending."""
    tags = {tag.lower() for movie in movies for tag in movie.mood_tags or ()}
    return sorted(tags)


def group_by_mood_tags(movies: Iterable[MovieRecord]) -> dict[str, list[MovieRecord]]:
    """Index movies under every tag they carry.

    A movie tagged ``["Uplifting", "TENSE"]`` appears under both
    ``uplifting`` and ``tense``. Each group is sorted by vote_average
    descending.

    Args:
        movies: Records to index.

    Returns:
        Mapping of lower-cased tag to records.
    """
    groups: dict[str, list[MovieRecord]] = {}
    for movie in movies:
        # a record repeating a tag is listed once in its group
        for tag in dict.fromkeys(t.lower() for t in movie.mood_tags or ()):
            groups.setdefault(tag, []).append(movie)

    for group in groups.values():
        group.sort(key=lambda m: m.vote_average, reverse=True)
    return groups


def count_mood_tags(groups: dict[str, Sequence[MovieRecord]], limit: int = 10) -> list[dict]:
    """Rank tags by the number of movies carrying them.

    Args:
        groups: Output of group_by_mood_tags.
        limit: Maximum number of entries.

    Returns:
        ``[{"tag": str, "count": int}]`` sorted by count descending.
    """
    counts = Counter({tag: len(movies) for tag, movies in groups.items()})
    return [{"tag": tag, "count": count} for tag, count in counts.most_common(limit)]


def filter_by_mood_tags(movies: Sequence[MovieRecord], tags: Iterable[str]) -> list[MovieRecord]:
    """Keep the movies carrying at least one of the given tags.

    Tags match exactly, ignoring case. An empty tag list keeps everything.
    """
    wanted = {tag.lower() for tag in tags}
    if not wanted:
        return list(movies)
    return [
        movie
        for movie in movies
        if any(tag.lower() in wanted for tag in movie.mood_tags or ())
    ]


def recommend_by_tag(movies: Sequence[MovieRecord], tag: str, limit: int = 6) -> list[MovieRecord]:
    """Best-rated movies carrying a given mood tag.

    Args:
        movies: Candidate records.
        tag: Mood tag, matched exactly ignoring case.
        limit: Maximum number of results.

    Returns:
        Matching records sorted by vote_average descending.
    """
    matches = filter_by_mood_tags(movies, [tag])
    matches.sort(key=lambda m: m.vote_average, reverse=True)
    return matches[:limit]

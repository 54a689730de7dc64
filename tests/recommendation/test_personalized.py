"""Unit tests for preference-weighted recommendations."""

import random

import pytest

from moodreel.recommendation.moods import LIBRARY_MOODS
from moodreel.recommendation.personalized import (
    PERSONALIZED_KEYWORDS,
    match_score,
    personalized_recommend,
)

HAPPY = LIBRARY_MOODS.get("happy")


class TestMatchScore:
    @staticmethod
    def test_mood_keyword_in_text(make_movie) -> None:
        movie = make_movie(1, overview="A fun comedy about a dog.")
        # "fun" and "comedy" are both mood keywords
        assert match_score(movie, HAPPY) == 4

    @staticmethod
    def test_preferred_genre_weight(make_movie) -> None:
        movie = make_movie(1, genres=["Drama"])
        assert match_score(movie, HAPPY, preferred_genres=["Drama"]) == 3

    @staticmethod
    def test_short_prompt_words_ignored(make_movie) -> None:
        movie = make_movie(1, overview="A dog and a cat in space")
        assert match_score(movie, HAPPY, prompt="a dog in space") == 1

    @staticmethod
    def test_happy_counts_joy_and_happiness(make_movie) -> None:
        movie = make_movie(1, overview="A story full of joy and happiness")
        assert match_score(movie, HAPPY) == 4

    @staticmethod
    def test_relaxed_ignores_animation_genre(make_movie) -> None:
        relaxed = LIBRARY_MOODS.get("relaxed")
        assert match_score(make_movie(1, genres=["Animation"]), relaxed) == 0
        assert match_score(make_movie(2, overview="A soothing tale"), relaxed) == 2

    @staticmethod
    @pytest.mark.parametrize(
        ("mood_id", "overview"),
        [
            ("happy", "pure happiness"),
            ("sad", "a touching farewell"),
            ("excited", "an exhilarating race"),
            ("relaxed", "a tranquil lake"),
            ("romantic", "a romantic comedy in paris"),
            ("thoughtful", "an intellectual puzzle"),
            ("nostalgic", "memories of childhood"),
            ("adventurous", "a long expedition"),
            ("inspired", "a visionary founder"),
        ],
    )
    def test_each_library_mood_has_its_keywords(make_movie, mood_id: str, overview: str) -> None:
        movie = make_movie(1, "X", overview=overview)
        assert match_score(movie, LIBRARY_MOODS.get(mood_id)) >= 2

    @staticmethod
    def test_every_library_mood_is_covered() -> None:
        assert set(PERSONALIZED_KEYWORDS) == set(LIBRARY_MOODS.ids)


class TestPersonalizedRecommend:
    @staticmethod
    def test_orders_by_score_then_rating(make_movie) -> None:
        movies = [
            make_movie(1, genres=["Drama"], score_percent=95),
            make_movie(2, genres=["Comedy"], overview="fun", score_percent=60),
            make_movie(3, genres=["Comedy"], overview="fun", score_percent=70),
        ]
        result = personalized_recommend(
            movies, HAPPY, preferred_genres=["Comedy"], rng=random.Random(0)
        )
        assert [m.id for m in result.movies] == [3, 2, 1]
        assert result.scores == {3: 7, 2: 7, 1: 0}

    @staticmethod
    def test_rating_floor(make_movie) -> None:
        movies = [make_movie(1, score_percent=50), make_movie(2, score_percent=80)]
        result = personalized_recommend(movies, HAPPY, min_score_percent=70)
        assert [m.id for m in result.movies] == [2]

    @staticmethod
    def test_reasoning_mentions_inputs(make_movie) -> None:
        movies = [make_movie(1, "Paddington", genres=["Family"])]
        result = personalized_recommend(
            movies, HAPPY, preferred_genres=["Family"], prompt="something cosy"
        )
        assert '"something cosy"' in result.reasoning
        assert "Family" in result.reasoning
        assert "Paddington" in result.reasoning

    @staticmethod
    def test_reasoning_highlights_first_two_movies(make_movie) -> None:
        movies = [
            make_movie(1, "Paddington", overview="fun", score_percent=90),
            make_movie(2, "Amelie", overview="fun", score_percent=80),
            make_movie(3, "Up", score_percent=70),
        ]
        result = personalized_recommend(movies, HAPPY, rng=random.Random(1))
        assert "Paddington stands out in particular:" in result.reasoning
        assert "As for Amelie," in result.reasoning
        assert "Up" not in result.reasoning

    @staticmethod
    def test_suggested_prompt_is_a_mood_tip(make_movie) -> None:
        sad = LIBRARY_MOODS.get("sad")
        first = personalized_recommend([make_movie(1)], sad, rng=random.Random(3))
        again = personalized_recommend([make_movie(1)], sad, rng=random.Random(3))
        happy = personalized_recommend([make_movie(1)], HAPPY, rng=random.Random(3))

        assert first.suggested_prompt
        assert first.suggested_prompt == again.suggested_prompt
        assert first.suggested_prompt != happy.suggested_prompt

    @staticmethod
    def test_limit(sample_movies) -> None:
        result = personalized_recommend(sample_movies, HAPPY, limit=2)
        assert len(result.movies) == 2

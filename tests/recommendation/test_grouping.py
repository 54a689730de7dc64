"""Unit tests for mood tag grouping and statistics."""

from moodreel.recommendation.grouping import (
    count_mood_tags,
    extract_mood_tags,
    filter_by_mood_tags,
    group_by_mood_tags,
    recommend_by_tag,
)


class TestExtractMoodTags:
    @staticmethod
    def test_sorted_distinct_lowercase(sample_movies) -> None:
        tags = extract_mood_tags(sample_movies)
        assert tags == sorted(set(tags))
        assert "heartwarming" in tags
        assert "tense" in tags
        assert all(tag == tag.lower() for tag in tags)

    @staticmethod
    def test_no_tags_gives_empty_list(make_movie) -> None:
        movies = [make_movie(1), make_movie(2, mood_tags=[])]
        assert extract_mood_tags(movies) == []


class TestGroupByMoodTags:
    @staticmethod
    def test_record_listed_under_each_tag(make_movie) -> None:
        movie = make_movie(1, mood_tags=["Heartwarming", "TENSE"])
        groups = group_by_mood_tags([movie])
        assert groups["heartwarming"] == [movie]
        assert groups["tense"] == [movie]

    @staticmethod
    def test_groups_sorted_by_vote_average(sample_movies) -> None:
        group = group_by_mood_tags(sample_movies)["heartwarming"]
        assert [m.id for m in group] == [12, 10]

    @staticmethod
    def test_repeated_tag_counts_once(make_movie) -> None:
        movie = make_movie(1, mood_tags=["Warm", "warm", "WARM"])
        assert group_by_mood_tags([movie])["warm"] == [movie]

    @staticmethod
    def test_every_record_in_every_group(sample_movies) -> None:
        groups = group_by_mood_tags(sample_movies)
        for movie in sample_movies:
            for tag in movie.mood_tags or []:
                assert movie in groups[tag.lower()]


class TestCountMoodTags:
    @staticmethod
    def test_most_common_first(sample_movies) -> None:
        counts = count_mood_tags(group_by_mood_tags(sample_movies), limit=3)
        assert counts[0] == {"tag": "heartwarming", "count": 2}
        assert len(counts) == 3

    @staticmethod
    def test_empty_groups() -> None:
        assert count_mood_tags({}) == []


class TestFilterAndRecommendByTag:
    @staticmethod
    def test_exact_match_ignoring_case(sample_movies) -> None:
        result = filter_by_mood_tags(sample_movies, ["THRILLING"])
        assert [m.id for m in result] == [11]

    @staticmethod
    def test_partial_tag_does_not_match(sample_movies) -> None:
        assert filter_by_mood_tags(sample_movies, ["thrill"]) == []

    @staticmethod
    def test_empty_filter_keeps_all(sample_movies) -> None:
        assert filter_by_mood_tags(sample_movies, []) == sample_movies

    @staticmethod
    def test_recommend_by_tag_sorted_and_limited(sample_movies) -> None:
        result = recommend_by_tag(sample_movies, "Heartwarming", limit=1)
        assert [m.id for m in result] == [12]

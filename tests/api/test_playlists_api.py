"""Tests for the playlist endpoints."""

from fastapi.testclient import TestClient

from moodreel.recommendation.playlists import MOOD_PLAYLISTS


class TestPlaylists:
    @staticmethod
    def test_list(client: TestClient) -> None:
        response = client.get("/api/v1/playlists")

        assert response.status_code == 200
        playlists = response.json()
        assert [p["id"] for p in playlists] == [p.id for p in MOOD_PLAYLISTS]
        assert all(len(p["movies"]) == 4 for p in playlists)

    @staticmethod
    def test_get_by_id(client: TestClient) -> None:
        response = client.get("/api/v1/playlists/happy")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Sunny Day"
        assert body["cover_image"] == "/images/moods/happy.jpg"
        assert [m["id"] for m in body["movies"]] == [12, 10, 13, 11]

    @staticmethod
    def test_unknown_playlist(client: TestClient) -> None:
        response = client.get("/api/v1/playlists/gloomy")
        assert response.status_code == 404

    @staticmethod
    def test_empty_dataset(empty_client: TestClient) -> None:
        playlists = empty_client.get("/api/v1/playlists").json()
        assert all(p["movies"] == [] for p in playlists)


class TestRandomMovies:
    @staticmethod
    def test_distinct_picks(client: TestClient) -> None:
        response = client.get("/api/v1/movies/random", params={"count": 3})

        assert response.status_code == 200
        ids = [m["id"] for m in response.json()]
        assert len(ids) == 3
        assert len(set(ids)) == 3
        assert set(ids) <= {10, 11, 12, 13}

    @staticmethod
    def test_count_capped_by_dataset(client: TestClient) -> None:
        assert len(client.get("/api/v1/movies/random", params={"count": 20}).json()) == 4

    @staticmethod
    def test_invalid_count(client: TestClient) -> None:
        assert client.get("/api/v1/movies/random", params={"count": 0}).status_code == 422

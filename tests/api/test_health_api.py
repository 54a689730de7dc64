"""Tests for the health endpoint and application wiring."""

from fastapi.testclient import TestClient

from moodreel.settings import settings


class TestHealth:
    @staticmethod
    def test_healthy_with_movies(client: TestClient) -> None:
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == settings.api.version
        assert body["components"]["catalog"] == {"loaded": True, "movies": 4, "enriched": 3}
        assert body["components"]["llm"]["loaded"] is False

    @staticmethod
    def test_degraded_without_movies(empty_client: TestClient) -> None:
        body = empty_client.get("/api/v1/health").json()
        assert body["status"] == "degraded"


class TestApplication:
    @staticmethod
    def test_openapi_lists_routes(client: TestClient) -> None:
        paths = client.get("/api/openapi.json").json()["paths"]
        assert "/api/v1/moods/{mood}/movies" in paths
        assert "/api/v1/chat" in paths
        assert "/api/v1/discover/{mood}" in paths

    @staticmethod
    def test_metrics_exposed(client: TestClient) -> None:
        client.get("/api/v1/moods/happy/movies", params={"limit": 1})

        response = client.get("/metrics/")

        assert response.status_code == 200
        assert "moodreel_http_requests_total" in response.text
        assert 'method="GET"' in response.text
        assert "moodreel_recommendation_tier_total" in response.text

"""CORS behaviour of the generate endpoint as seen by the browser client."""

from fastapi.testclient import TestClient

from main import validate_cors_origins


FRONTEND = "http://localhost:5173"


def _preflight(client: TestClient, path: str, origin: str):
    return client.options(
        path,
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )


class TestGeneratePreflight:
    def test_allowed_origin_may_post(self, client: TestClient) -> None:
        response = _preflight(client, "/api/v1/generate", FRONTEND)

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == FRONTEND
        assert response.headers["Access-Control-Allow-Credentials"] == "true"
        assert "POST" in response.headers["Access-Control-Allow-Methods"]

    def test_legacy_path_is_covered_too(self, client: TestClient) -> None:
        response = _preflight(client, "/generate", FRONTEND)

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == FRONTEND

    def test_unknown_origin_is_refused(self, client: TestClient) -> None:
        response = _preflight(client, "/api/v1/generate", "http://evil.example")

        assert response.status_code == 400
        assert "Access-Control-Allow-Origin" not in response.headers


def test_health_response_echoes_allowed_origin(client: TestClient) -> None:
    response = client.get("/api/v1/health", headers={"Origin": FRONTEND})

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == FRONTEND


def test_invalid_origins_are_dropped() -> None:
    origins = validate_cors_origins(
        ["http://localhost:5173", "ftp://files.example", "not a url", "https://app.example"]
    )

    assert origins == ["http://localhost:5173", "https://app.example"]

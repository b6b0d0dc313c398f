# tests/test_main.py
from fastapi import status
from fastapi.testclient import TestClient


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert "timestamp" in data
    assert data["uptime"] >= 0


def test_unknown_route_returns_json_error(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Not Found", "message": "Route not found"}


def test_database_opened_with_lifespan(app, test_settings):
    assert not app.state.database.is_open
    with TestClient(app):
        assert app.state.database.is_open
    assert not app.state.database.is_open


def test_storage_layout_created(test_settings):
    assert test_settings.TEMP_PATH == test_settings.STORAGE_PATH / "temp"
    assert test_settings.DOCUMENTS_PATH.is_dir()
    assert test_settings.KPIS_PATH.is_dir()


def test_cors_origins_split(test_settings):
    test_settings.CORS_ORIGIN = "http://localhost:3000, http://example.com"
    assert test_settings.cors_origins == ["http://localhost:3000", "http://example.com"]

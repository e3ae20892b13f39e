from fastapi.testclient import TestClient

from catalog_browser.config import Settings
from catalog_browser.main import create_app


def test_health_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_response_schema(client):
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"


def test_health_ignores_api_prefix(data_path):
    client = TestClient(create_app(Settings(data_path=data_path, api_prefix="/api")))
    assert client.get("/health").status_code == 200
    assert client.get("/api/items").status_code == 200
    assert client.get("/items").status_code == 404

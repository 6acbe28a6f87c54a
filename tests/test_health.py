"""Tests for the health endpoints and application lifecycle."""

from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from books_api.api.http.app_data import ApplicationDependencies


def test_liveness(client: TestClient):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "healthy", "service": "books-api"}


def test_readiness_with_database(client: TestClient):
    response = client.get("/health/ready")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["status"] == "ready"
    assert body["environment"] == "test"
    assert body["checks"]["database"]["status"] == "healthy"
    assert body["checks"]["database"]["type"] == "sqlite"


def test_readiness_without_database(app: FastAPI, client: TestClient, monkeypatch):
    database_service = app.state.app_dependencies.database_service
    monkeypatch.setattr(database_service, "health_check", lambda: False)

    response = client.get("/health/ready")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["checks"]["database"]["status"] == "unhealthy"


def test_lifespan_creates_and_disposes_database_service(app: FastAPI, monkeypatch):
    with TestClient(app):
        deps = app.state.app_dependencies
        assert isinstance(deps, ApplicationDependencies)
        disposed = []
        monkeypatch.setattr(deps.database_service, "dispose", lambda: disposed.append(True))

    assert disposed == [True]

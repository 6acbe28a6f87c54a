from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from books_api.api.http.app import create_app
from books_api.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    LoggingConfig,
)


@pytest.fixture
def test_config() -> ConfigData:
    """Configuration for a private in-memory database."""
    return ConfigData(
        app=AppConfig(environment="test"),
        logging=LoggingConfig(level="WARNING", format="plain", file=None),
        database=DatabaseConfig(
            url="sqlite://",
            environment_mode="test",
            create_tables=True,
        ),
    )


@pytest.fixture
def app(test_config: ConfigData) -> FastAPI:
    return create_app(test_config)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client; entering it runs the application lifespan."""
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(client: TestClient, sample_book_data: dict[str, Any]) -> TestClient:
    """Client whose database already holds the sample book."""
    response = client.post("/books", json=sample_book_data)
    assert response.status_code == 201
    return client

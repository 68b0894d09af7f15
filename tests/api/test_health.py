from unittest.mock import AsyncMock

import pytest

from base0.boundary.db import get_async_db


@pytest.fixture
def db_session():
    return AsyncMock()


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client, db_session):
    client.app.dependency_overrides[get_async_db] = lambda: db_session

    response = client.get("/api/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    db_session.execute.assert_awaited_once()


def test_health_check_db_failure(client, db_session):
    db_session.execute.side_effect = RuntimeError("connection refused")
    client.app.dependency_overrides[get_async_db] = lambda: db_session

    response = client.get("/api/health/db")

    assert response.json() == {"status": "unhealthy", "message": "Database error: connection refused"}

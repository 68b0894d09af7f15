"""
API test fixtures.

The app is built with create_app() and its service cache swapped for one
over local storage and the in-memory registry. Clients are used without a
context manager so the lifespan (table creation on the real database) does
not run.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from base0.api.deps import ServiceCache, get_history_service, get_service_cache
from base0.api.main import create_app
from base0.configs import Settings
from base0.configs.image_api import ImageApiSettings


@pytest.fixture
def service_cache(filecoin_settings) -> ServiceCache:
    settings = Settings(filecoin=filecoin_settings, image_api=ImageApiSettings(deepai_api_key=None))
    return ServiceCache(settings)


@pytest.fixture
def mock_history_service():
    return AsyncMock()


@pytest.fixture
def app(service_cache, mock_history_service):
    app = create_app()
    app.dependency_overrides[get_service_cache] = lambda: service_cache
    app.dependency_overrides[get_history_service] = lambda: mock_history_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)

"""API test fixtures."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from moodreel.api.dependencies.rate_limit import check_rate_limit
from moodreel.api.dependencies.services import provide_catalog
from moodreel.api.main import create_app
from moodreel.catalog.repository import MovieCatalog


@pytest.fixture
def app(catalog: MovieCatalog) -> FastAPI:
    """Application serving the sample catalog, without rate limiting.

    The client is used outside a ``with`` block so the lifespan never
    reads the dataset from disk.
    """
    application = create_app()
    application.dependency_overrides[provide_catalog] = lambda: catalog
    application.dependency_overrides[check_rate_limit] = lambda: None
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def empty_client(app: FastAPI) -> TestClient:
    app.dependency_overrides[provide_catalog] = lambda: MovieCatalog.from_movies([])
    return TestClient(app)

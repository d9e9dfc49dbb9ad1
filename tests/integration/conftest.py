"""Shared fixtures for API integration tests."""

import pytest
from fastapi.testclient import TestClient

from psalter.api.main import create_app


@pytest.fixture
def client(loader, settings):
    """Test client running the app lifespan (data loaded at startup)."""
    app = create_app(loader, settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_client(tmp_path):
    """Test client whose data directory is empty."""
    from psalter.config import Settings

    app = create_app(settings=Settings(data_dir=tmp_path / "empty"))
    with TestClient(app) as test_client:
        yield test_client

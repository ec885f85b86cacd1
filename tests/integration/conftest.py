"""
Integration test fixtures
"""

import pytest
from fastapi.testclient import TestClient

from pharminfo.api.main import create_app


@pytest.fixture
def client(store):
    """Site client over the sample content from the shared fixtures."""
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


@pytest.fixture
def degraded_client(tmp_path):
    """Site client whose content directory does not exist."""
    app = create_app(content_dir=tmp_path / "missing")
    with TestClient(app) as test_client:
        yield test_client

"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fastapi.testclient import TestClient  # noqa: E402

from app.config import Settings  # noqa: E402
from main import create_app  # noqa: E402
from services import ServiceContainer  # noqa: E402
from test_fixtures import TEST_MAX_UPLOAD_BYTES  # noqa: E402


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    """
    Settings pointing every file the app touches into a temp directory.

    The JSON backend is used so tests need no database server.
    """
    return Settings(
        _env_file=None,
        environment="testing",
        storage_backend="json",
        data_file=tmp_path / "data.json",
        upload_dir=tmp_path / "uploads",
        max_upload_bytes=TEST_MAX_UPLOAD_BYTES,
        log_level="WARNING",
    )


@pytest.fixture
def container(app_settings) -> ServiceContainer:
    return ServiceContainer.build(app_settings)


@pytest.fixture
def meal_service(container):
    return container.meals


@pytest.fixture
def heading_service(container):
    return container.headings


@pytest.fixture
def client(app_settings, container):
    """TestClient over an app sharing the ``container`` fixture"""
    app = create_app(app_settings, container)
    with TestClient(app) as c:
        yield c

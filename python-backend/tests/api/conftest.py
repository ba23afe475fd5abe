"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient

from config import ProcessingSettings, Settings


def build_client(settings):
    """Create a test client with app state initialized from settings"""
    from main import app
    from services.ink_service import InkService

    # Small processing width keeps requests fast
    app.state.settings = settings
    app.state.ink_service = InkService(process_width=64, band_rows=16)
    app.state.config = settings.to_dict()

    # No context manager so the lifespan does not replace the test state
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    yield build_client(Settings())


@pytest.fixture
def limited_client():
    """Client whose upload limit is 1 MB"""
    yield build_client(Settings(processing=ProcessingSettings(max_upload_mb=1)))


@pytest.fixture
def upload(red_png):
    """Multipart file payload for the red test layout"""
    return {"file": ("layout.png", red_png, "image/png")}

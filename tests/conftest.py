import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from backend.main import app
from backend.services.database import DatabaseService, get_db
from backend.services.player import count_plays, get_player
from core.controls import PlaybackQueueController
from core.models import TrackSource
from fastapi.testclient import TestClient
from hypothesis import settings
from tests.helpers.tracks import make_track
from tests.mocks import MockAudioBackend

# Hypothesis profiles for property-based testing
settings.register_profile("fast", max_examples=50, deadline=None)
settings.register_profile("thorough", max_examples=1000, deadline=None)
settings.load_profile("fast")  # Default to fast profile


def pytest_collection_modifyitems(items):
    """Automatically order tests: unit tests first, then property tests, then API tests."""
    for item in items:
        # Skip if item already has explicit order marker
        if item.get_closest_marker('order'):
            continue

        test_file = str(item.fspath)
        if 'test_unit_' in test_file:
            item.add_marker(pytest.mark.order(1))
        elif 'test_props_' in test_file:
            item.add_marker(pytest.mark.order(2))
        elif 'test_api_' in test_file:
            item.add_marker(pytest.mark.order(3))


@pytest.fixture
def tracks():
    """Four catalog tracks: T1..T4."""
    return [make_track(n) for n in range(1, 5)]


@pytest.fixture
def upload_track():
    return make_track(99, title="My Upload", source=TrackSource.UPLOAD, uri="file:///uploads/mine.m4a")


@pytest.fixture
def mock_backend():
    return MockAudioBackend()


@pytest.fixture
def controller(mock_backend):
    """PlaybackQueueController bound to a mocked audio backend."""
    return PlaybackQueueController(mock_backend)


# ==================== API fixtures ====================


@pytest.fixture
def api_db(tmp_path):
    """DatabaseService on a throwaway SQLite file."""
    return DatabaseService(tmp_path / "cadence.db")


@pytest.fixture
def catalog(api_db, tracks):
    """Store T1..T4 in the API database and return them."""
    for track in tracks:
        api_db.add_track(track.to_dict())
    return tracks


@pytest.fixture
def client(api_db, controller):
    """TestClient wired to the test database and a mocked-backend controller.

    Not entered as a context manager, so the lifespan (and libvlc) never runs;
    play counting is wired up the way the lifespan does it.
    """
    count_plays(controller, api_db)
    app.dependency_overrides[get_db] = lambda: api_db
    app.dependency_overrides[get_player] = lambda: controller
    yield TestClient(app)
    app.dependency_overrides.clear()

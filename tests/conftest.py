"""
Global pytest configuration and fixtures for playlist block tests

Provides:
- Recording player factory and mount points
- Playlist builders
- Mock NATS client
"""

import pytest
import pytest_asyncio

from amp.player import PlayerController
from amp.playlist import AudioItem, BlobRegistry, InMemoryBlockStore

from tests.fixtures.fake_player import MountPoint, RecordingFactory
from tests.fixtures.mock_nats import create_mock_nats


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom settings"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


# ============================================================================
# Player Fixtures
# ============================================================================

@pytest.fixture
def factory():
    """Player factory recording every created player"""
    return RecordingFactory()


@pytest.fixture
def controller(factory):
    """Player controller using the recording factory"""
    return PlayerController(factory)


@pytest.fixture
def mount():
    return MountPoint("first")


@pytest.fixture
def other_mount():
    return MountPoint("second")


# ============================================================================
# Playlist Fixtures
# ============================================================================

@pytest.fixture
def blobs():
    return BlobRegistry()


@pytest.fixture
def store():
    store = InMemoryBlockStore()
    store.add_container("playlist-1")
    return store


@pytest.fixture
def playlist():
    """Persisted three-track playlist"""
    return [
        AudioItem(identity=1, url="https://example.com/a.mp3", is_persisted=True),
        AudioItem(identity=2, url="https://example.com/b.mp3", is_persisted=True),
        AudioItem(identity=3, url="https://example.com/c.mp3", is_persisted=True),
    ]


# ============================================================================
# NATS Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def nats_client():
    """In-process NATS client"""
    client = create_mock_nats()
    yield client
    await client.close()

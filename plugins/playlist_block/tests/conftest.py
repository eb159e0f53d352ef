"""
pytest configuration for playlist block plugin tests.
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from amp.player import PlayerController
from amp.playlist import InMemoryBlockStore, InnerBlock

from tests.fixtures.fake_player import MountPoint, RecordingFactory


@pytest.fixture
def mock_nats():
    """Mock NATS client for testing."""
    mock = MagicMock()
    mock.subscribe = AsyncMock()
    mock.publish = AsyncMock()
    mock.request = AsyncMock()
    return mock


@pytest.fixture
def block_config():
    """Default playlist block configuration."""
    return {
        "emit_events": True,
        "clear_on_empty_library": True,
        "render_timeout": 2.0,
        "player_subject_prefix": "amp.player",
        "skins": {
            "cdn_hosts": {"webamp.org": "webampskins.org"},
        },
    }


@pytest.fixture
def factory():
    return RecordingFactory()


@pytest.fixture
def mount():
    return MountPoint("editor-canvas")


@pytest.fixture
def saved_blocks():
    """Inner blocks of a saved two-track playlist."""
    return [
        InnerBlock(
            client_id="saved-1",
            attributes={"id": 1, "src": "https://example.com/1.mp3"},
            original_content="<figure class=\"wp-block-audio\"></figure>",
        ),
        InnerBlock(
            client_id="saved-2",
            attributes={"id": 2, "src": "https://example.com/2.mp3"},
            original_content="<figure class=\"wp-block-audio\"></figure>",
        ),
    ]


@pytest.fixture
def store(saved_blocks):
    store = InMemoryBlockStore()
    store.add_container("block-1", saved_blocks)
    store.add_container("empty-block")
    return store


@pytest.fixture
def controller(factory):
    return PlayerController(factory)


def make_msg(data: dict, reply: str = "reply.subject"):
    """Create a mock NATS message."""
    msg = MagicMock()
    msg.reply = reply
    msg.data = json.dumps(data).encode()
    return msg


@pytest.fixture
def msg_factory():
    return make_msg

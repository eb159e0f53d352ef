"""
Tests for inner block storage.
"""

import pytest

from amp.playlist import (
    AUDIO_BLOCK_NAME,
    BlockNotFoundError,
    InMemoryBlockStore,
    InnerBlock,
    audio_from_blocks,
    create_block,
)


class TestCreateBlock:
    """Test create_block."""

    def test_new_block_is_not_saved_content(self):
        block = create_block(AUDIO_BLOCK_NAME, {"id": 1, "src": "u1"})

        assert block.name == "core/audio"
        assert block.attributes == {"id": 1, "src": "u1"}
        assert block.original_content is None
        assert block.client_id

    def test_explicit_client_id(self):
        assert create_block(AUDIO_BLOCK_NAME, client_id="fixed").client_id == "fixed"


class TestInMemoryBlockStore:
    """Test InMemoryBlockStore."""

    def test_saved_blocks(self):
        store = InMemoryBlockStore()
        saved = [InnerBlock(client_id="a", attributes={"id": 1}, original_content="<audio>")]
        store.add_container("c", saved)

        assert store.get_inner_blocks("c") == saved
        assert "c" in store
        assert store.replacements["c"] == 0

    def test_replace_inner_blocks(self, store):
        blocks = [create_block(AUDIO_BLOCK_NAME, {"id": 2}), create_block(AUDIO_BLOCK_NAME, {"id": 1})]

        store.replace_inner_blocks("playlist-1", blocks)

        assert [b.attributes["id"] for b in store.get_inner_blocks("playlist-1")] == [2, 1]
        assert store.replacements["playlist-1"] == 1

    def test_returned_list_is_a_copy(self, store):
        store.get_inner_blocks("playlist-1").append(create_block(AUDIO_BLOCK_NAME))
        assert store.get_inner_blocks("playlist-1") == []

    def test_unknown_container(self):
        store = InMemoryBlockStore()

        with pytest.raises(BlockNotFoundError):
            store.get_inner_blocks("missing")
        with pytest.raises(BlockNotFoundError):
            store.replace_inner_blocks("missing", [])

    def test_remove_container(self, store):
        store.remove_container("playlist-1")
        assert "playlist-1" not in store


def test_audio_from_blocks():
    blocks = [
        InnerBlock(client_id="x", attributes={"id": 7, "src": "u7"}, original_content="<audio>"),
        InnerBlock(client_id="y", attributes={"src": "blob:local/z"}),
    ]

    audio = audio_from_blocks(blocks)

    assert [item.identity for item in audio] == [7, None]
    assert [item.client_id for item in audio] == ["x", "y"]
    assert [item.is_persisted for item in audio] == [True, False]

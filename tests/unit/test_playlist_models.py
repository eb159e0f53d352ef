"""
Tests for playlist data models.
"""

import pytest

from amp.playlist import (
    AUDIO_BLOCK_NAME,
    AudioItem,
    InnerBlock,
    SelectedMedia,
    Selection,
    SelectionError,
    SelectionKind,
)


class TestInnerBlock:
    """Test InnerBlock."""

    def test_with_attributes_keeps_client_id(self):
        block = InnerBlock(client_id="b1", attributes={"src": "blob:local/x"}, original_content=None)

        updated = block.with_attributes(id=5, src="https://example.com/5.mp3")

        assert updated is not block
        assert updated.client_id == "b1"
        assert updated.attributes == {"id": 5, "src": "https://example.com/5.mp3"}
        assert block.attributes == {"src": "blob:local/x"}

    def test_dict_roundtrip(self):
        block = InnerBlock(
            client_id="b2",
            attributes={"id": 3, "src": "https://example.com/3.mp3"},
            original_content="<!-- wp:audio -->",
        )
        assert InnerBlock.from_dict(block.to_dict()) == block

    def test_from_dict_defaults(self):
        block = InnerBlock.from_dict({"attributes": {"id": 1}})

        assert block.client_id
        assert block.name == AUDIO_BLOCK_NAME
        assert block.original_content is None


class TestAudioItem:
    """Test AudioItem."""

    def test_from_saved_block(self):
        block = InnerBlock(
            client_id="c1",
            attributes={"id": 12, "src": "https://example.com/12.mp3", "caption": "intro"},
            original_content="<figure>...</figure>",
        )

        item = AudioItem.from_block(block)

        assert item.identity == 12
        assert item.url == "https://example.com/12.mp3"
        assert item.source_attributes["caption"] == "intro"
        assert item.is_persisted is True
        assert item.client_id == "c1"

    def test_from_new_block(self):
        item = AudioItem.from_block(InnerBlock(client_id="c2", attributes={"src": "blob:local/y"}))

        assert item.identity is None
        assert not item.has_identity
        assert item.is_persisted is False

    def test_items_compare_by_object(self):
        first = AudioItem(identity=None, url="blob:local/same")
        second = AudioItem(identity=None, url="blob:local/same")

        assert first != second
        assert first.client_id != second.client_id

    def test_to_dict(self):
        item = AudioItem(identity=4, url="u4", source_attributes={"id": 4, "src": "u4"}, client_id="c4")

        assert item.to_dict() == {
            "client_id": "c4",
            "id": 4,
            "url": "u4",
            "attributes": {"id": 4, "src": "u4"},
            "from_saved_content": False,
        }


class TestSelectedMedia:
    """Test SelectedMedia."""

    def test_coerce_library_mapping(self):
        media = SelectedMedia.coerce({"id": 3, "url": "u3", "title": "Song"})

        assert media.identity == 3
        assert media.url == "u3"
        assert media.file is None
        assert media.attributes == {"title": "Song"}

    def test_coerce_raw_file(self):
        media = SelectedMedia.coerce(b"payload")

        assert media.file == b"payload"
        assert media.identity is None
        assert media.is_usable

    def test_empty_url_is_not_usable(self):
        assert not SelectedMedia.coerce({"id": 3, "url": ""}).is_usable


class TestSelection:
    """Test Selection constructors."""

    def test_uploads(self):
        selection = Selection.uploads([b"a", b"b"])

        assert selection.kind is SelectionKind.UPLOAD_BATCH
        assert selection.is_upload_batch
        assert len(selection.entries) == 2

    def test_library(self):
        selection = Selection.library([{"id": 1, "url": "u1"}])

        assert selection.kind is SelectionKind.LIBRARY_SET
        assert not selection.is_upload_batch

    def test_none_is_empty(self):
        assert Selection.library(None).entries == ()

    @pytest.mark.parametrize("kind,expected", [
        ("upload", SelectionKind.UPLOAD_BATCH),
        ("library", SelectionKind.LIBRARY_SET),
    ])
    def test_from_payload(self, kind, expected):
        assert Selection.from_payload(kind, []).kind is expected

    def test_from_payload_unknown_kind(self):
        with pytest.raises(SelectionError):
            Selection.from_payload("gallery", [])

"""
Playlist Models

Data models for audio playlist items, media selections and the inner
blocks that persist them.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, Mapping, Optional, Tuple, Union

from .errors import SelectionError


AUDIO_BLOCK_NAME = "core/audio"


def new_client_id() -> str:
    """Generate a client id for a new inner block."""
    return str(uuid.uuid4())


class SelectionKind(Enum):
    """Where a media selection came from."""
    UPLOAD_BATCH = "upload"
    LIBRARY_SET = "library"


@dataclass(frozen=True)
class InnerBlock:
    """
    Child content node persisting one playlist entry.

    Blocks are never mutated; an update produces a new record with the
    same client_id.

    Attributes:
        client_id: Editor-local key of the block
        name: Block type name
        attributes: Block attributes ('id' and 'src' for audio blocks)
        original_content: Serialized content when loaded from saved content
    """
    client_id: str
    name: str = AUDIO_BLOCK_NAME
    attributes: Mapping[str, Any] = field(default_factory=dict)
    original_content: Optional[str] = None

    def with_attributes(self, **updates: Any) -> "InnerBlock":
        """Return a copy of this block with some attributes replaced."""
        attributes = dict(self.attributes)
        attributes.update(updates)
        return InnerBlock(
            client_id=self.client_id,
            name=self.name,
            attributes=attributes,
            original_content=self.original_content,
        )

    def to_dict(self) -> dict:
        return {
            "client_id": self.client_id,
            "name": self.name,
            "attributes": dict(self.attributes),
            "original_content": self.original_content,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InnerBlock":
        return cls(
            client_id=data.get("client_id") or new_client_id(),
            name=data.get("name", AUDIO_BLOCK_NAME),
            attributes=dict(data.get("attributes", {})),
            original_content=data.get("original_content"),
        )


@dataclass(frozen=True, eq=False)
class AudioItem:
    """
    One playlist entry.

    Items compare by object identity: two pending uploads may share a URL
    pattern and must still be told apart.

    Attributes:
        identity: Persisted media reference (None while uploading)
        url: Playable source, possibly a temporary blob: URL
        source_attributes: Attribute bag of the inner block
        is_persisted: Whether the item came from saved content
        client_id: Client id of the inner block holding this item
    """
    identity: Optional[Hashable]
    url: Optional[str]
    source_attributes: Mapping[str, Any] = field(default_factory=dict)
    is_persisted: bool = False
    client_id: str = field(default_factory=new_client_id)

    @property
    def has_identity(self) -> bool:
        return self.identity is not None

    @classmethod
    def from_block(cls, block: InnerBlock) -> "AudioItem":
        """Read an audio item from an inner block."""
        return cls(
            identity=block.attributes.get("id"),
            url=block.attributes.get("src"),
            source_attributes=dict(block.attributes),
            is_persisted=bool(block.original_content),
            client_id=block.client_id,
        )

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict for NATS messages."""
        return {
            "client_id": self.client_id,
            "id": self.identity,
            "url": self.url,
            "attributes": dict(self.source_attributes),
            "from_saved_content": self.is_persisted,
        }


@dataclass(frozen=True)
class SelectedMedia:
    """
    One entry of a media selection.

    Library entries carry an identity and a URL. Raw uploads carry only a
    file payload until a temporary URL is assigned.
    """
    identity: Optional[Hashable] = None
    url: Optional[str] = None
    file: Any = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_usable(self) -> bool:
        """Whether the entry can produce a playable source."""
        return bool(self.url) or self.file is not None

    @classmethod
    def coerce(cls, raw: Any) -> "SelectedMedia":
        """
        Build a SelectedMedia from a mapping, an existing entry or a raw file.

        Mappings use the media library field names: 'id', 'url' and 'file'.
        Anything else is treated as a raw file payload.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, Mapping):
            extra = {k: v for k, v in raw.items() if k not in ("id", "url", "file")}
            return cls(
                identity=raw.get("id"),
                url=raw.get("url") or None,
                file=raw.get("file"),
                attributes=extra,
            )
        return cls(file=raw)


RawSelection = Union[Any, Iterable[Any]]


@dataclass(frozen=True)
class Selection:
    """
    A media selection event.

    Attributes:
        kind: UPLOAD_BATCH for raw files, LIBRARY_SET for the full desired
            set picked in the media library
        entries: Selected media in the order the user arranged them
    """
    kind: SelectionKind
    entries: Tuple[SelectedMedia, ...] = ()

    @classmethod
    def uploads(cls, files: RawSelection) -> "Selection":
        """Selection of freshly dropped or uploaded files."""
        return cls(SelectionKind.UPLOAD_BATCH, _coerce_entries(files))

    @classmethod
    def library(cls, media: RawSelection) -> "Selection":
        """Selection of already known media from the library picker."""
        return cls(SelectionKind.LIBRARY_SET, _coerce_entries(media))

    @classmethod
    def from_payload(cls, kind: Union[str, SelectionKind], raw: RawSelection) -> "Selection":
        """
        Build a selection from a wire payload.

        Raises:
            SelectionError: If kind is not a known selection kind
        """
        try:
            kind = SelectionKind(kind)
        except ValueError:
            raise SelectionError(f"Unknown selection kind: {kind!r}")
        return cls(kind, _coerce_entries(raw))

    @property
    def is_upload_batch(self) -> bool:
        return self.kind is SelectionKind.UPLOAD_BATCH


def _coerce_entries(raw: RawSelection) -> Tuple[SelectedMedia, ...]:
    # A single entry is accepted as a batch of one
    if raw is None:
        return ()
    if isinstance(raw, (Mapping, SelectedMedia, str, bytes)):
        return (SelectedMedia.coerce(raw),)
    try:
        items = list(raw)
    except TypeError:
        return (SelectedMedia.coerce(raw),)
    return tuple(SelectedMedia.coerce(item) for item in items)


def attributes_for(media: SelectedMedia) -> Dict[str, Any]:
    """Inner block attributes for a newly selected media entry."""
    return {"id": media.identity, "src": media.url}

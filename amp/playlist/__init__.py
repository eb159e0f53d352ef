"""
amp/playlist

Audio playlist state for the playlist block.

This module provides:
- AudioItem, Selection, SelectedMedia, InnerBlock: playlist data model
- reconcile: merge a media selection into the current playlist
- BlobRegistry: temporary URLs for in-flight uploads
- InMemoryBlockStore: inner block storage with ordered replacement
- Exception hierarchy for playlist errors
"""

from .blob import BlobRegistry, is_blob_url
from .blocks import BlockStore, InMemoryBlockStore, audio_from_blocks, create_block
from .errors import BlockNotFoundError, PlaylistError, SelectionError
from .models import (
    AUDIO_BLOCK_NAME,
    AudioItem,
    InnerBlock,
    SelectedMedia,
    Selection,
    SelectionKind,
)
from .reconciler import build_order_map, normalize_selection, reconcile

__all__ = [
    "AUDIO_BLOCK_NAME",
    "AudioItem",
    "InnerBlock",
    "SelectedMedia",
    "Selection",
    "SelectionKind",
    "BlobRegistry",
    "is_blob_url",
    "BlockStore",
    "InMemoryBlockStore",
    "audio_from_blocks",
    "create_block",
    "build_order_map",
    "normalize_selection",
    "reconcile",
    "PlaylistError",
    "SelectionError",
    "BlockNotFoundError",
]

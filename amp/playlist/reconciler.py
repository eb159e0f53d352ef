"""
Playlist reconciliation.

Merges a media selection into the existing playlist. Existing items are
reused rather than recreated, so the ordering chosen in the media library
has to be reapplied after the merge.

Upload batches and library sets follow different rules and are kept as
separate paths:

- UPLOAD_BATCH: raw files are appended; no existing item is dropped.
- LIBRARY_SET: the library picker returns the full desired set, so any
  existing item missing from it is dropped.
"""

import logging
from typing import Dict, Hashable, List, Optional, Sequence, Set

from .blob import BlobRegistry
from .models import AudioItem, SelectedMedia, Selection, SelectionKind, attributes_for


logger = logging.getLogger(__name__)


def normalize_selection(
    selection: Selection,
    blobs: Optional[BlobRegistry] = None,
) -> List[SelectedMedia]:
    """
    Give every selected entry a playable URL.

    Entries without a URL but with a file payload get a temporary blob:
    URL. Entries with neither are dropped.

    Args:
        selection: Media selection
        blobs: Registry used to create temporary URLs

    Returns:
        Usable entries in selection order
    """
    blobs = blobs if blobs is not None else BlobRegistry()
    processed = []
    for media in selection.entries:
        if not media.is_usable:
            logger.debug(f"Dropping unusable selection entry: {media!r}")
            continue
        if not media.url:
            media = SelectedMedia(
                identity=media.identity,
                url=blobs.create(media.file),
                file=media.file,
                attributes=media.attributes,
            )
        processed.append(media)
    return processed


def build_order_map(processed: Sequence[SelectedMedia]) -> Dict[Hashable, int]:
    """Map each selected identity to its position in the selection."""
    return {
        media.identity: index
        for index, media in enumerate(processed)
        if media.identity is not None
    }


def reconcile(
    previous: Sequence[AudioItem],
    selection: Selection,
    *,
    blobs: Optional[BlobRegistry] = None,
    clear_on_empty_library: bool = True,
) -> List[AudioItem]:
    """
    Compute the next playlist from the previous one and a selection.

    The previous playlist is never mutated. Kept items are returned as the
    same objects; new items get fresh client ids.

    Args:
        previous: Current playlist
        selection: Upload batch or library set
        blobs: Registry for temporary URLs of pending uploads
        clear_on_empty_library: Whether an empty library set removes every
            item (True) or leaves the playlist unchanged (False)

    Returns:
        Next playlist
    """
    processed = normalize_selection(selection, blobs)

    if not processed:
        if selection.kind is SelectionKind.LIBRARY_SET and clear_on_empty_library:
            logger.info(f"Empty library selection: removing {len(previous)} items")
            return []
        return list(previous)

    order_map = build_order_map(processed)

    if selection.kind is SelectionKind.UPLOAD_BATCH:
        kept = list(previous)
    else:
        kept = [
            item for item in previous
            if item.identity is not None and item.identity in order_map
        ]

    known: Set[Hashable] = {item.identity for item in kept if item.identity is not None}
    created = []
    for media in processed:
        if media.identity is not None:
            if media.identity in known:
                continue
            known.add(media.identity)
        created.append(
            AudioItem(
                identity=media.identity,
                url=media.url,
                source_attributes=attributes_for(media),
            )
        )

    dropped = len(previous) - len(kept)
    logger.debug(
        f"Reconciled {selection.kind.value} selection: "
        f"{len(kept)} kept, {len(created)} new, {dropped} dropped"
    )

    return sorted(kept + created, key=lambda item: _position(order_map, item))


def _position(order_map: Dict[Hashable, int], item: AudioItem):
    # Items the selection does not address keep their relative order at the end
    if item.identity is not None and item.identity in order_map:
        return (0, order_map[item.identity])
    return (1, 0)

"""
Playlist block editor session.

Wires a container block's inner audio blocks, its attributes and its live
player together:

- media selections are reconciled into a full ordered replacement of the
  inner blocks,
- upload errors replace the block notices with a single error,
- the skin attribute is pushed to the player controller,
- render() decides between preview, placeholder and player.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional

from amp.player import PlayerController
from amp.playlist import (
    AUDIO_BLOCK_NAME,
    AudioItem,
    BlobRegistry,
    BlockNotFoundError,
    BlockStore,
    InnerBlock,
    Selection,
    audio_from_blocks,
    create_block,
    is_blob_url,
    reconcile,
)

from .notices import NoticeBoard


logger = logging.getLogger(__name__)


class ViewKind(Enum):
    """What the block shows."""
    PREVIEW = "preview"
    PLACEHOLDER = "placeholder"
    PLAYER = "player"


@dataclass
class BlockView:
    """
    Result of rendering the block.

    Attributes:
        kind: Preview image, media placeholder or live player
        add_to_gallery: Placeholder adds to the existing playlist
        is_appender: Placeholder is shown as an appender below the player
        disable_media_buttons: Media buttons are disabled
        notices: Notices shown in the block
    """
    kind: ViewKind
    add_to_gallery: bool = False
    is_appender: bool = False
    disable_media_buttons: bool = False
    notices: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "add_to_gallery": self.add_to_gallery,
            "is_appender": self.is_appender,
            "disable_media_buttons": self.disable_media_buttons,
            "notices": list(self.notices),
        }


class PlaylistBlockEditor:
    """
    Editor session of one playlist block.

    Args:
        client_id: Client id of the container block
        store: Inner block storage
        controller: Live player controller of this block
        notices: Notice list (new NoticeBoard if None)
        blobs: Temporary URL registry (new BlobRegistry if None)
        attributes: Block attributes ('current_skin', 'preview')
        clear_on_empty_library: Empty library selection removes all tracks
    """

    def __init__(
        self,
        client_id: str,
        store: BlockStore,
        controller: PlayerController,
        notices: Optional[NoticeBoard] = None,
        blobs: Optional[BlobRegistry] = None,
        attributes: Optional[Dict[str, Any]] = None,
        clear_on_empty_library: bool = True,
    ):
        self.client_id = client_id
        self.store = store
        self.controller = controller
        self.notices = notices if notices is not None else NoticeBoard()
        self.blobs = blobs if blobs is not None else BlobRegistry()
        self.attributes: Dict[str, Any] = {"current_skin": "", "preview": False}
        self.attributes.update(attributes or {})
        self.clear_on_empty_library = clear_on_empty_library

    # =================================================================
    # Derived state
    # =================================================================

    @property
    def current_skin(self) -> str:
        return self.attributes.get("current_skin") or ""

    @property
    def inner_blocks(self) -> List[InnerBlock]:
        return self.store.get_inner_blocks(self.client_id)

    @property
    def audio(self) -> List[AudioItem]:
        """Current playlist, read from the inner blocks."""
        return audio_from_blocks(self.inner_blocks)

    @property
    def has_audio(self) -> bool:
        return bool(self.audio)

    @property
    def has_audio_ids(self) -> bool:
        return any(item.has_identity for item in self.audio)

    @property
    def audio_uploading(self) -> bool:
        """Whether some track is still a pending upload."""
        return any(
            not item.has_identity and is_blob_url(item.url)
            for item in self.audio
        )

    # =================================================================
    # Media selection
    # =================================================================

    def on_select_audio(self, selection: Selection) -> List[AudioItem]:
        """
        Merge a media selection into the playlist.

        Kept tracks reuse their inner block; new tracks get a new audio
        block. The container's children are replaced in a single call.

        Args:
            selection: Upload batch or library set

        Returns:
            The next playlist
        """
        blocks = self.inner_blocks
        previous = audio_from_blocks(blocks)
        playlist = reconcile(
            previous,
            selection,
            blobs=self.blobs,
            clear_on_empty_library=self.clear_on_empty_library,
        )

        existing = {block.client_id: block for block in blocks}
        next_blocks = [
            existing.get(item.client_id)
            or create_block(AUDIO_BLOCK_NAME, item.source_attributes, client_id=item.client_id)
            for item in playlist
        ]
        self.store.replace_inner_blocks(self.client_id, next_blocks)
        self._revoke_dropped(previous, playlist)

        logger.info(
            f"Block {self.client_id}: {len(previous)} -> {len(playlist)} tracks "
            f"({selection.kind.value})"
        )
        return playlist

    def _revoke_dropped(self, previous: List[AudioItem], playlist: List[AudioItem]) -> None:
        # Pending uploads removed from the playlist never complete
        remaining = {item.client_id for item in playlist}
        for item in previous:
            if item.client_id in remaining or item.has_identity:
                continue
            if is_blob_url(item.url) and self.blobs.revoke(item.url):
                logger.debug(f"Block {self.client_id}: released dropped upload {item.url}")

    def on_upload_error(self, message: str) -> None:
        """Show a selection error, replacing any previous notice."""
        self.notices.remove_all_notices()
        self.notices.create_error_notice(message)
        logger.warning(f"Block {self.client_id}: upload error: {message}")

    def on_upload_complete(self, item_client_id: str, identity: Hashable, url: str) -> AudioItem:
        """
        Swap a pending upload's temporary URL for its permanent source.

        Args:
            item_client_id: Client id of the inner block of the upload
            identity: Media id assigned by the upload
            url: Permanent media URL

        Returns:
            The updated playlist item

        Raises:
            BlockNotFoundError: If the inner block is not in this playlist
        """
        blocks = self.inner_blocks
        for index, block in enumerate(blocks):
            if block.client_id == item_client_id:
                break
        else:
            raise BlockNotFoundError(
                f"Inner block {item_client_id} not found in {self.client_id}"
            )

        temporary_url = block.attributes.get("src")
        updated = block.with_attributes(id=identity, src=url)
        next_blocks = list(blocks)
        next_blocks[index] = updated
        self.store.replace_inner_blocks(self.client_id, next_blocks)

        if is_blob_url(temporary_url):
            self.blobs.revoke(temporary_url)
        return AudioItem.from_block(updated)

    # =================================================================
    # Skin
    # =================================================================

    def set_skin(self, skin: Optional[str]) -> bool:
        """
        Set the skin attribute and apply it to the live player.

        Returns:
            True if the live player's skin changed
        """
        self.attributes["current_skin"] = skin or ""
        return self.controller.update_skin(self.current_skin)

    # =================================================================
    # Rendering
    # =================================================================

    def render(self, mount_point: Any = None, is_selected: bool = False) -> BlockView:
        """
        Render the block.

        With tracks, the live player is synced to the mount point; without
        tracks the player is unmounted and the media placeholder is shown.

        Args:
            mount_point: Drawable surface for the player (None = not attached)
            is_selected: Whether the block is selected in the editor
        """
        if self.attributes.get("preview"):
            return BlockView(kind=ViewKind.PREVIEW)

        audio = self.audio
        has_audio = bool(audio)
        view = BlockView(
            kind=ViewKind.PLAYER if has_audio else ViewKind.PLACEHOLDER,
            add_to_gallery=self.has_audio_ids,
            is_appender=has_audio,
            disable_media_buttons=(has_audio and not is_selected) or self.audio_uploading,
            notices=[notice.to_dict() for notice in self.notices.notices],
        )

        if has_audio:
            self.controller.sync(mount_point, audio, self.current_skin)
        else:
            self.controller.sync(None, audio, self.current_skin)
        return view

    def close(self) -> None:
        """Dispose the live player."""
        self.controller.dispose()

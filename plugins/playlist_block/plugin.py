"""
Playlist Block Plugin

Audio playlist block editing with NATS-based communication.

Each block (keyed by its client id) gets an editor session holding its
inner audio blocks, notices and live player controller.

NATS Subjects:
    Subscribe:
        amp.command.block.select - Merge a media selection into the playlist
        amp.command.block.error - Report a media selection failure
        amp.command.block.uploaded - Pending upload received its permanent source
        amp.command.block.skin - Change the player skin
        amp.command.block.mount - Render the block into a mount point
        amp.command.block.unmount - Detach the block from its mount point
        amp.command.block.state - Current playlist and view

    Publish:
        amp.block.playlist.replaced - After inner blocks were replaced
        amp.block.skin.changed - After the skin attribute changed
        amp.block.notice - After an error notice was shown
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from nats.aio.client import Client as NATS

from amp.player import (
    DEFAULT_SKIN_URL,
    PlayerConstructionError,
    PlayerController,
    PlayerFactory,
    SkinResolver,
)
from amp.playlist import BlobRegistry, InMemoryBlockStore, InnerBlock, Selection, SelectionError

from .editor import PlaylistBlockEditor
from .notices import NoticeBoard
from .remote_player import NatsPlayer, NatsPlayerFactory, nats_player_factory


logger = logging.getLogger(__name__)


@dataclass(eq=False)
class MountPoint:
    """Drawable surface identified by the widget host's element id."""
    element_id: str

    def __str__(self) -> str:
        return self.element_id


class PlaylistBlockPlugin:
    """
    Playlist block plugin.

    Manages playlist block editor sessions with support for:
    - Library reselection and upload batches
    - Upload completion and error notices
    - Live player mounting and skin hot-swap
    - Event emission

    This plugin communicates entirely via NATS messaging.
    """

    # Plugin metadata
    NAMESPACE = "playlist-block"
    VERSION = "1.0.0"
    DESCRIPTION = "Audio playlist block with live player"

    # NATS subjects
    SUBJECT_SELECT = "amp.command.block.select"
    SUBJECT_ERROR = "amp.command.block.error"
    SUBJECT_UPLOADED = "amp.command.block.uploaded"
    SUBJECT_SKIN = "amp.command.block.skin"
    SUBJECT_MOUNT = "amp.command.block.mount"
    SUBJECT_UNMOUNT = "amp.command.block.unmount"
    SUBJECT_STATE = "amp.command.block.state"

    # Events
    EVENT_PLAYLIST_REPLACED = "amp.block.playlist.replaced"
    EVENT_SKIN_CHANGED = "amp.block.skin.changed"
    EVENT_NOTICE = "amp.block.notice"

    def __init__(
        self,
        nats_client: NATS,
        config: Optional[Dict[str, Any]] = None,
        player_factory: Optional[PlayerFactory] = None,
        store: Optional[InMemoryBlockStore] = None,
    ):
        """
        Initialize playlist block plugin.

        Args:
            nats_client: Connected NATS client for messaging
            config: Plugin configuration dict
            player_factory: Live player factory (NatsPlayer if None)
            store: Inner block storage (new in-memory store if None)
        """
        self.nats = nats_client
        self.config = config or {}
        self.logger = logging.getLogger(f"{__name__}.{self.NAMESPACE}")
        self._initialized = False
        self._subscriptions: List[Any] = []

        # Load configuration
        self.emit_events = self.config.get("emit_events", True)
        self.clear_on_empty_library = self.config.get("clear_on_empty_library", True)
        skins = self.config.get("skins", {}) or {}
        self.skin_resolver = SkinResolver(
            default_url=skins.get("default_url") or DEFAULT_SKIN_URL,
            cdn_hosts=skins.get("cdn_hosts"),
            host=skins.get("host"),
        )
        self.player_factory = player_factory or nats_player_factory(
            nats_client,
            subject_prefix=self.config.get("player_subject_prefix", NatsPlayer.DEFAULT_SUBJECT_PREFIX),
            render_timeout=self.config.get("render_timeout", NatsPlayer.DEFAULT_RENDER_TIMEOUT),
        )

        self.store = store if store is not None else InMemoryBlockStore()
        self.blobs = BlobRegistry()
        self.editors: Dict[str, PlaylistBlockEditor] = {}
        self._mounts: Dict[str, MountPoint] = {}

        self.logger.info(f"{self.NAMESPACE} v{self.VERSION} initialized")

    async def setup(self) -> None:
        """Initialize plugin and register command handlers."""
        if self._initialized:
            return

        handlers: Dict[str, Callable] = {
            self.SUBJECT_SELECT: self._handle_select,
            self.SUBJECT_ERROR: self._handle_error,
            self.SUBJECT_UPLOADED: self._handle_uploaded,
            self.SUBJECT_SKIN: self._handle_skin,
            self.SUBJECT_MOUNT: self._handle_mount,
            self.SUBJECT_UNMOUNT: self._handle_unmount,
            self.SUBJECT_STATE: self._handle_state,
        }
        for subject, handler in handlers.items():
            self._subscriptions.append(
                await self.nats.subscribe(subject, cb=handler)
            )

        self._initialized = True
        self.logger.info(f"{self.NAMESPACE} plugin ready")

    async def teardown(self) -> None:
        """Cleanup plugin resources."""
        for editor in self.editors.values():
            editor.close()
        for editor in self.editors.values():
            await editor.controller.wait_closed()
        if isinstance(self.player_factory, NatsPlayerFactory):
            await self.player_factory.flush()

        for sub in self._subscriptions:
            try:
                await sub.unsubscribe()
            except Exception as e:
                self.logger.error(f"Error unsubscribing: {e}")

        self._subscriptions.clear()
        self.editors.clear()
        self._mounts.clear()
        self._initialized = False

        self.logger.info(f"{self.NAMESPACE} plugin shutdown")

    def get_editor(self, block_id: str, saved_blocks: Optional[List[dict]] = None) -> PlaylistBlockEditor:
        """
        Get or create the editor session of a block.

        Args:
            block_id: Client id of the container block
            saved_blocks: Inner blocks loaded from saved content (new blocks only)
        """
        if block_id not in self.editors:
            if block_id not in self.store:
                blocks = [InnerBlock.from_dict(raw) for raw in saved_blocks or []]
                self.store.add_container(block_id, blocks)
            self.editors[block_id] = PlaylistBlockEditor(
                block_id,
                self.store,
                PlayerController(self.player_factory, skin_resolver=self.skin_resolver),
                notices=NoticeBoard(),
                blobs=self.blobs,
                clear_on_empty_library=self.clear_on_empty_library,
            )
        return self.editors[block_id]

    def _mount_point(self, block_id: str, element_id: Optional[str]) -> Optional[MountPoint]:
        """Same element id keeps the same mount point; a new one replaces it."""
        if not element_id:
            self._mounts.pop(block_id, None)
            return None
        current = self._mounts.get(block_id)
        if current is None or current.element_id != element_id:
            current = MountPoint(element_id)
            self._mounts[block_id] = current
        return current

    async def _publish_event(self, event_name: str, data: dict) -> None:
        """Publish event to NATS if events enabled."""
        if not self.emit_events:
            return

        data["event"] = event_name
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
        try:
            await self.nats.publish(event_name, json.dumps(data).encode())
        except Exception as e:
            self.logger.error(f"Error publishing event {event_name}: {e}")

    async def _reply(self, msg, response: dict) -> None:
        """Send reply to NATS request."""
        if not msg.reply:
            return
        try:
            await self.nats.publish(msg.reply, json.dumps(response).encode())
        except Exception as e:
            self.logger.error(f"Error sending reply: {e}")

    async def _reply_error(self, msg, error: str) -> None:
        """Send error response."""
        await self._reply(msg, {"success": False, "error": error})

    async def _reply_success(self, msg, message: str, data: Optional[dict] = None) -> None:
        """Send success response."""
        response = {"success": True, "message": message}
        if data:
            response["data"] = data
        await self._reply(msg, response)

    def _playlist_data(self, editor: PlaylistBlockEditor) -> dict:
        return {
            "block": editor.client_id,
            "playlist": [item.to_dict() for item in editor.audio],
            "uploading": editor.audio_uploading,
        }

    # =================================================================
    # Command Handlers
    # =================================================================

    async def _handle_select(self, msg) -> None:
        """Handle a media selection."""
        try:
            data = json.loads(msg.data.decode())
            block_id = data.get("block", "")
            if not block_id:
                return await self._reply_error(msg, "Missing block id")

            editor = self.get_editor(block_id, data.get("saved_blocks"))
            selection = Selection.from_payload(data.get("kind", ""), data.get("media"))
            playlist = editor.on_select_audio(selection)

            result = self._playlist_data(editor)
            await self._reply_success(msg, f"Playlist has {len(playlist)} tracks", result)
            await self._publish_event(self.EVENT_PLAYLIST_REPLACED, result)

        except SelectionError as e:
            await self._reply_error(msg, str(e))
        except Exception as e:
            self.logger.error(f"Error in _handle_select: {e}", exc_info=True)
            await self._reply_error(msg, "Internal error updating playlist")

    async def _handle_error(self, msg) -> None:
        """Handle a media selection failure."""
        try:
            data = json.loads(msg.data.decode())
            block_id = data.get("block", "")
            message = data.get("message", "")
            if not block_id or not message:
                return await self._reply_error(msg, "Missing block id or message")

            editor = self.get_editor(block_id)
            editor.on_upload_error(message)

            notices = [notice.to_dict() for notice in editor.notices.notices]
            await self._reply_success(msg, "Notice shown", {"notices": notices})
            await self._publish_event(self.EVENT_NOTICE, {
                "block": block_id,
                "notices": notices,
            })

        except Exception as e:
            self.logger.error(f"Error in _handle_error: {e}", exc_info=True)
            await self._reply_error(msg, "Internal error showing notice")

    async def _handle_uploaded(self, msg) -> None:
        """Handle upload completion of a pending track."""
        try:
            data = json.loads(msg.data.decode())
            block_id = data.get("block", "")
            item_id = data.get("item", "")
            if not block_id or not item_id or not data.get("url"):
                return await self._reply_error(msg, "Missing block id, item or url")

            editor = self.get_editor(block_id)
            item = editor.on_upload_complete(item_id, data.get("id"), data["url"])

            result = self._playlist_data(editor)
            await self._reply_success(msg, "Upload complete", {"item": item.to_dict(), **result})
            await self._publish_event(self.EVENT_PLAYLIST_REPLACED, result)

        except Exception as e:
            self.logger.error(f"Error in _handle_uploaded: {e}", exc_info=True)
            await self._reply_error(msg, "Internal error completing upload")

    async def _handle_skin(self, msg) -> None:
        """Handle a skin change."""
        try:
            data = json.loads(msg.data.decode())
            block_id = data.get("block", "")
            if not block_id:
                return await self._reply_error(msg, "Missing block id")

            editor = self.get_editor(block_id)
            skin = data.get("skin") or ""
            applied = editor.set_skin(skin)

            await self._reply_success(msg, "Skin updated", {"skin": skin, "applied": applied})
            await self._publish_event(self.EVENT_SKIN_CHANGED, {
                "block": block_id,
                "skin": skin,
                "applied": applied,
            })

        except Exception as e:
            self.logger.error(f"Error in _handle_skin: {e}", exc_info=True)
            await self._reply_error(msg, "Internal error updating skin")

    async def _handle_mount(self, msg) -> None:
        """Handle rendering into a mount point."""
        try:
            data = json.loads(msg.data.decode())
            block_id = data.get("block", "")
            if not block_id or not data.get("mount"):
                return await self._reply_error(msg, "Missing block id or mount")

            editor = self.get_editor(block_id, data.get("saved_blocks"))
            mount_point = self._mount_point(block_id, data["mount"])
            view = editor.render(mount_point, is_selected=bool(data.get("selected", False)))

            await self._reply_success(msg, f"Block rendered as {view.kind.value}", {
                "view": view.to_dict(),
                "player": editor.controller.state.value,
                **self._playlist_data(editor),
            })

        except PlayerConstructionError as e:
            await self._reply_error(msg, str(e))
        except Exception as e:
            self.logger.error(f"Error in _handle_mount: {e}", exc_info=True)
            await self._reply_error(msg, "Internal error rendering block")

    async def _handle_unmount(self, msg) -> None:
        """Handle removal of the block's mount point."""
        try:
            data = json.loads(msg.data.decode())
            block_id = data.get("block", "")
            editor = self.editors.get(block_id)
            if editor is None:
                return await self._reply_error(msg, f"Block '{block_id}' not found")

            self._mount_point(block_id, None)
            editor.close()

            await self._reply_success(msg, "Block unmounted", {
                "player": editor.controller.state.value,
            })

        except Exception as e:
            self.logger.error(f"Error in _handle_unmount: {e}", exc_info=True)
            await self._reply_error(msg, "Internal error unmounting block")

    async def _handle_state(self, msg) -> None:
        """Handle a state query."""
        try:
            data = json.loads(msg.data.decode())
            block_id = data.get("block", "")
            editor = self.editors.get(block_id)
            if editor is None:
                return await self._reply_error(msg, f"Block '{block_id}' not found")

            await self._reply_success(msg, "Block state", {
                "skin": editor.current_skin,
                "player": editor.controller.state.value,
                "notices": [notice.to_dict() for notice in editor.notices.notices],
                **self._playlist_data(editor),
            })

        except Exception as e:
            self.logger.error(f"Error in _handle_state: {e}", exc_info=True)
            await self._reply_error(msg, "Internal error fetching state")

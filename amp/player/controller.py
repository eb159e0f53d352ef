"""
Player lifecycle controller.

Owns the single live player of a mount point:

    UNMOUNTED -> INITIALIZING -> READY -> DISPOSED

The player is created once per mount point, from a snapshot of the
playlist and skin at that moment. Afterwards only the skin follows the
block attributes; playlist edits are not pushed into a running player.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional, Sequence, Set

from ..playlist.models import AudioItem
from .base import LivePlayer, PlayerConfig, PlayerFactory, PlayerOptions
from .errors import PlayerConstructionError, PlayerRenderError
from .skins import SkinResolver


logger = logging.getLogger(__name__)


class PlayerState(Enum):
    """Lifecycle states of a live player."""
    UNMOUNTED = "unmounted"
    INITIALIZING = "initializing"
    READY = "ready"
    DISPOSED = "disposed"


class PlayerController:
    """
    Mount-once controller for a live player.

    Usage:
        controller = PlayerController(factory)
        controller.sync(mount_point, audio, skin)   # on every render
        await controller.wait_ready()
        controller.sync(mount_point, audio, new_skin)  # skin hot-swap
        controller.dispose()                         # on unmount

    Args:
        player_factory: Builds a LivePlayer from PlayerOptions
        skin_resolver: Skin identifier resolution (default settings if None)
    """

    def __init__(
        self,
        player_factory: PlayerFactory,
        skin_resolver: Optional[SkinResolver] = None,
    ):
        self.player_factory = player_factory
        self.skin_resolver = skin_resolver or SkinResolver()
        self.state = PlayerState.UNMOUNTED
        self.config: Optional[PlayerConfig] = None
        self.instances_created = 0
        self._player: Optional[LivePlayer] = None
        self._mount_point: Any = None
        self._skin: Optional[str] = None
        self._render_task: Optional[asyncio.Task] = None
        self._render_tasks: Set[asyncio.Task] = set()
        self._render_failure: Optional[Exception] = None

    @property
    def player(self) -> Optional[LivePlayer]:
        """The live player, None when there is none."""
        return self._player

    @property
    def mount_point(self) -> Any:
        return self._mount_point

    @property
    def is_live(self) -> bool:
        return self._player is not None

    # =================================================================
    # Render-time synchronization
    # =================================================================

    def sync(self, mount_point: Any, audio: Sequence[AudioItem], skin: Optional[str]) -> None:
        """
        Reconcile the controller with the current render.

        A new mount point (compared by identity) replaces the player; None
        disposes it. Otherwise a changed skin identifier is applied to the
        running player.

        Args:
            mount_point: Drawable surface, None when unavailable
            audio: Current playlist
            skin: Current skin identifier
        """
        skin = skin or ""
        skin_changed = skin != self._skin
        self._skin = skin

        if mount_point is not self._mount_point:
            if self._player is not None:
                self.dispose()
            self._mount_point = None
            if mount_point is not None:
                self.mount(mount_point, audio, skin)
            return

        if skin_changed:
            self.update_skin(skin)

    def mount(self, mount_point: Any, audio: Sequence[AudioItem], skin: Optional[str]) -> LivePlayer:
        """
        Create the live player for a mount point and start rendering.

        Must be called from a running event loop. Rendering is not awaited.

        Args:
            mount_point: Drawable surface
            audio: Playlist snapshot used for the initial tracks
            skin: Skin identifier used for the initial skin

        Returns:
            The new live player

        Raises:
            RuntimeError: If a player is already live
            PlayerConstructionError: If the factory fails
        """
        if self.state in (PlayerState.INITIALIZING, PlayerState.READY):
            raise RuntimeError(f"Player already {self.state.value}; dispose it first")

        loop = asyncio.get_running_loop()
        config = PlayerConfig.from_playlist(audio, skin)
        options = PlayerOptions.from_config(config, self.skin_resolver.resolve(config.skin_identifier))

        self._mount_point = mount_point
        self._skin = config.skin_identifier
        self._render_failure = None

        try:
            player = self.player_factory(options)
        except Exception as e:
            self.state = PlayerState.UNMOUNTED
            self.config = None
            logger.error(f"Failed to create player for {mount_point!r}: {e}")
            raise PlayerConstructionError(f"Failed to create player: {e}") from e

        self._player = player
        self.config = config
        self.instances_created += 1
        self.state = PlayerState.INITIALIZING
        self._render_task = loop.create_task(self._render(player, mount_point))
        self._render_tasks.add(self._render_task)
        self._render_task.add_done_callback(self._render_tasks.discard)

        logger.info(
            f"Player created for {mount_point!r} "
            f"({len(config.track_urls)} tracks, skin={config.skin_identifier or 'default'})"
        )
        return player

    async def _render(self, player: LivePlayer, mount_point: Any) -> None:
        try:
            await player.render_when_ready(mount_point)
        except Exception as e:
            logger.error(f"Player failed to render into {mount_point!r}: {e}", exc_info=True)
            self._release(player)
            if self._player is player:
                self._render_failure = e
                self._player = None
                self.config = None
                self.state = PlayerState.UNMOUNTED
            return

        if self._player is not player:
            # Disposed while rendering
            self._release(player)
            return

        self.state = PlayerState.READY
        logger.info(f"Player ready in {mount_point!r}")

    # =================================================================
    # Skin updates
    # =================================================================

    def update_skin(self, skin: Optional[str]) -> bool:
        """
        Apply a skin identifier to the running player.

        Args:
            skin: Skin identifier ('' = default skin)

        Returns:
            True if a skin was applied, False if there is no live player or
            the identifier is not a skin page
        """
        self._skin = skin or ""
        if self._player is None:
            logger.debug("No live player; skin update skipped")
            return False

        url = self.skin_resolver.resolve(skin)
        if url is None:
            return False

        self._player.set_skin_from_url(url)
        logger.info(f"Skin changed to {url}")
        return True

    # =================================================================
    # Teardown
    # =================================================================

    def dispose(self) -> None:
        """
        Release the live player.

        Safe to call repeatedly. While rendering, the player is released as
        soon as the render settles; the controller reports no live player
        immediately. The mount point is forgotten, so a later sync() with the
        same mount point mounts a new player.
        """
        self._mount_point = None
        player = self._player
        if player is None:
            if self.state is not PlayerState.UNMOUNTED:
                self.state = PlayerState.DISPOSED
            return

        self._player = None
        self.config = None
        self.state = PlayerState.DISPOSED

        if self._render_task is not None and not self._render_task.done():
            logger.info("Player disposal deferred until render settles")
            return

        self._release(player)

    def _release(self, player: LivePlayer) -> None:
        try:
            player.dispose()
        except Exception as e:
            logger.error(f"Error disposing player: {e}", exc_info=True)
        else:
            logger.info("Player disposed")

    async def wait_ready(self) -> None:
        """
        Wait for the pending render.

        Raises:
            PlayerRenderError: If the player failed to render
        """
        if self._render_task is not None:
            await asyncio.shield(self._render_task)
        if self._render_failure is not None:
            raise PlayerRenderError(
                f"Failed to render player: {self._render_failure}"
            ) from self._render_failure

    async def wait_closed(self) -> None:
        """Wait until pending renders settled and deferred releases ran."""
        if self._render_tasks:
            await asyncio.gather(*self._render_tasks)

    def __repr__(self) -> str:
        return f"<PlayerController {self.state.value} mount={self._mount_point!r}>"

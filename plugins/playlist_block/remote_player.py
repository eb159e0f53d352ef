"""
NATS-backed live player.

The player widget is drawn by a widget host (the page embedding the
block). This player forwards its lifecycle to that host over NATS:

    <prefix>.<mount>.render   request, host replies once the widget is drawn
    <prefix>.<mount>.skin     publish, skin archive URL
    <prefix>.<mount>.dispose  publish, widget must be torn down
"""

import asyncio
import json
import logging
import weakref
from typing import Any, Optional, Set

from nats.aio.client import Client as NATS
from nats.errors import TimeoutError as NatsTimeoutError

from amp.player import LivePlayer, PlayerOptions, PlayerRenderError


logger = logging.getLogger(__name__)


class NatsPlayer(LivePlayer):
    """
    Live player driven through a remote widget host.

    Args:
        nats_client: Connected NATS client
        options: Initial tracks and skin
        subject_prefix: Subject prefix for widget commands
        render_timeout: Seconds to wait for the host's render reply
    """

    DEFAULT_SUBJECT_PREFIX = "amp.player"
    DEFAULT_RENDER_TIMEOUT = 10.0

    def __init__(
        self,
        nats_client: NATS,
        options: PlayerOptions,
        subject_prefix: str = DEFAULT_SUBJECT_PREFIX,
        render_timeout: float = DEFAULT_RENDER_TIMEOUT,
    ):
        super().__init__(options)
        self.nats = nats_client
        self.subject_prefix = subject_prefix
        self.render_timeout = render_timeout
        self.mount_id: Optional[str] = None
        self._pending: Set[asyncio.Task] = set()

    def _subject(self, action: str) -> str:
        return f"{self.subject_prefix}.{self.mount_id}.{action}"

    async def render_when_ready(self, mount_point: Any) -> None:
        """
        Ask the widget host to draw the player into a mount point.

        Raises:
            PlayerRenderError: If the host does not reply in time or reports
                a failure
        """
        self.mount_id = getattr(mount_point, "element_id", None) or str(mount_point)
        payload = json.dumps(self.options.to_dict()).encode()

        try:
            reply = await self.nats.request(
                self._subject("render"), payload, timeout=self.render_timeout
            )
        except (NatsTimeoutError, asyncio.TimeoutError):
            raise PlayerRenderError(
                f"Widget host did not render {self.mount_id} within {self.render_timeout}s"
            )

        response = json.loads(reply.data.decode()) if reply.data else {}
        if not response.get("success", True):
            raise PlayerRenderError(response.get("error", "Widget host failed to render"))
        logger.debug(f"Widget rendered in {self.mount_id}")

    def set_skin_from_url(self, url: str) -> None:
        self._send("skin", {"url": url})

    def dispose(self) -> None:
        self._send("dispose", {})

    def _send(self, action: str, data: dict) -> None:
        # Widget commands must not block the caller
        task = asyncio.get_running_loop().create_task(self._publish(action, data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _publish(self, action: str, data: dict) -> None:
        try:
            await self.nats.publish(self._subject(action), json.dumps(data).encode())
        except Exception as e:
            logger.error(f"Error publishing {action} for {self.mount_id}: {e}")

    async def flush(self) -> None:
        """Wait for queued widget commands to be published."""
        if self._pending:
            await asyncio.gather(*self._pending)


class NatsPlayerFactory:
    """
    PlayerController factory creating NatsPlayer instances.

    Keeps a weak reference to every player it created so queued widget
    commands can be flushed on shutdown, including those of players the
    controller already released.
    """

    def __init__(
        self,
        nats_client: NATS,
        subject_prefix: str = NatsPlayer.DEFAULT_SUBJECT_PREFIX,
        render_timeout: float = NatsPlayer.DEFAULT_RENDER_TIMEOUT,
    ):
        self.nats = nats_client
        self.subject_prefix = subject_prefix
        self.render_timeout = render_timeout
        self._players: "weakref.WeakSet[NatsPlayer]" = weakref.WeakSet()

    def __call__(self, options: PlayerOptions) -> NatsPlayer:
        player = NatsPlayer(
            self.nats,
            options,
            subject_prefix=self.subject_prefix,
            render_timeout=self.render_timeout,
        )
        self._players.add(player)
        return player

    async def flush(self) -> None:
        """Wait for the queued widget commands of every player."""
        for player in list(self._players):
            await player.flush()


def nats_player_factory(
    nats_client: NATS,
    subject_prefix: str = NatsPlayer.DEFAULT_SUBJECT_PREFIX,
    render_timeout: float = NatsPlayer.DEFAULT_RENDER_TIMEOUT,
) -> NatsPlayerFactory:
    """Build a PlayerController factory creating NatsPlayer instances."""
    return NatsPlayerFactory(
        nats_client,
        subject_prefix=subject_prefix,
        render_timeout=render_timeout,
    )

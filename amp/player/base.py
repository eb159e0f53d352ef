"""
amp/player/base.py

Abstract live player and its configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from ..playlist.models import AudioItem


@dataclass(frozen=True)
class PlayerConfig:
    """
    Player configuration derived from the playlist and the skin attribute.

    Rebuilt on every render and never persisted.
    """
    track_urls: Tuple[str, ...] = ()
    skin_identifier: str = ""

    @classmethod
    def from_playlist(cls, audio: Sequence[AudioItem], skin_identifier: Optional[str] = "") -> "PlayerConfig":
        return cls(
            track_urls=tuple(item.url for item in audio),
            skin_identifier=skin_identifier or "",
        )


@dataclass(frozen=True)
class PlayerOptions:
    """
    Construction options of a live player.

    Attributes:
        initial_tracks: Tracks loaded when the player is created
        initial_skin: Skin loaded when the player is created (None = built-in)
    """
    initial_tracks: Tuple[Dict[str, Any], ...] = ()
    initial_skin: Optional[Dict[str, str]] = None

    @classmethod
    def from_config(cls, config: PlayerConfig, skin_url: Optional[str]) -> "PlayerOptions":
        return cls(
            initial_tracks=tuple({"url": url} for url in config.track_urls),
            initial_skin={"url": skin_url} if skin_url else None,
        )

    @property
    def track_urls(self) -> List[str]:
        return [track["url"] for track in self.initial_tracks]

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"initialTracks": [dict(track) for track in self.initial_tracks]}
        if self.initial_skin:
            data["initialSkin"] = dict(self.initial_skin)
        return data


class LivePlayer(ABC):
    """
    Abstract live player bound to one mount point.

    Lifecycle:
        1. __init__(options) - Construct player (fast, no I/O)
        2. render_when_ready(mount_point) - Draw into the mount point (async)
        3. set_skin_from_url(url) - Swap skin without interrupting playback
        4. dispose() - Release the player and its resources

    Only PlayerController calls these methods.
    """

    def __init__(self, options: PlayerOptions):
        self.options = options

    @abstractmethod
    def render_when_ready(self, mount_point: Any) -> Awaitable[None]:
        """
        Render the player into a mount point.

        Returns an awaitable that settles once rendering is complete.
        """

    @abstractmethod
    def set_skin_from_url(self, url: str) -> None:
        """Apply a skin archive to the running player."""

    @abstractmethod
    def dispose(self) -> None:
        """Release the player. Must not be called before the render settles."""


PlayerFactory = Callable[[PlayerOptions], LivePlayer]

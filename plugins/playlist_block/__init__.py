"""
Playlist Block Plugin

Audio playlist block for the editor: media selection, upload
completion, error notices, and a live player with a selectable skin.
"""

from .editor import BlockView, PlaylistBlockEditor, ViewKind
from .notices import Notice, NoticeBoard
from .plugin import MountPoint, PlaylistBlockPlugin
from .remote_player import NatsPlayer, NatsPlayerFactory, nats_player_factory

__all__ = [
    "PlaylistBlockPlugin",
    "PlaylistBlockEditor",
    "BlockView",
    "ViewKind",
    "MountPoint",
    "Notice",
    "NoticeBoard",
    "NatsPlayer",
    "NatsPlayerFactory",
    "nats_player_factory",
]
__version__ = "1.0.0"

"""
amp/player

Live player lifecycle for the playlist block.

This module provides:
- LivePlayer: Abstract base class for live players
- PlayerController: Mount-once lifecycle and skin hot-swap
- SkinResolver: Skin identifier to skin resource URL
- Exception hierarchy for player errors
"""

from .base import LivePlayer, PlayerConfig, PlayerFactory, PlayerOptions
from .controller import PlayerController, PlayerState
from .errors import PlayerConstructionError, PlayerError, PlayerRenderError
from .skins import DEFAULT_SKIN_URL, SkinResolver, resolve_skin_url

__all__ = [
    "LivePlayer",
    "PlayerConfig",
    "PlayerFactory",
    "PlayerOptions",
    "PlayerController",
    "PlayerState",
    "SkinResolver",
    "resolve_skin_url",
    "DEFAULT_SKIN_URL",
    "PlayerError",
    "PlayerConstructionError",
    "PlayerRenderError",
]

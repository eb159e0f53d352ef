"""
amp/player/errors.py

Live player exceptions.
"""


class PlayerError(Exception):
    """Base exception for live player errors."""
    pass


class PlayerConstructionError(PlayerError):
    """Live player could not be constructed for a mount point."""
    pass


class PlayerRenderError(PlayerError):
    """Live player failed to render into its mount point."""
    pass

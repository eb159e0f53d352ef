"""
amp/playlist/errors.py

Playlist-specific exceptions.
"""


class PlaylistError(Exception):
    """Base exception for playlist errors."""
    pass


class SelectionError(PlaylistError):
    """Media selection payload is invalid or of an unknown kind."""
    pass


class BlockNotFoundError(PlaylistError):
    """Container or inner block not found in the block store."""
    pass

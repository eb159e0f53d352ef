"""
amp

Core library of the audio playlist block: playlist reconciliation
(amp.playlist) and live player lifecycle (amp.player).
"""

__version__ = "1.0.0"

"""Plugins served by the playlist block service."""

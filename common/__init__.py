"""Common utilities for the playlist block services."""
from .config import ConfigError, configure_logger, get_config, load_config

__all__ = ['get_config', 'load_config', 'configure_logger', 'ConfigError']

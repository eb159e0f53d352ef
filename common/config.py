#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import json
import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml
from packaging import version


LOG_FORMAT = '[%(asctime).19s] [%(name)s] [%(levelname)s] %(message)s'

SUPPORTED_CONFIG_VERSION = '1.0'

DEFAULTS = {
    'nats_url': 'nats://localhost:4222',
    'log_level': 'info',
    'emit_events': True,
    'clear_on_empty_library': True,
    'render_timeout': 10.0,
    'player_subject_prefix': 'amp.player',
}


class ConfigError(Exception):
    """Configuration file missing, unreadable or invalid."""
    pass


class RobustFileHandler(logging.FileHandler):
    """FileHandler that gracefully handles flush errors on Windows"""

    def flush(self):
        """Flush the stream, catching OSError on Windows file handles"""
        try:
            super().flush()
        except OSError as e:
            # Windows can fail to flush with "Invalid argument" (EINVAL)
            if e.errno == 22:
                pass
            else:
                raise


def configure_logger(logger,
                     log_file=None,
                     log_format=LOG_FORMAT,
                     log_level=logging.INFO):
    """Configure a logger with a file or stream handler

    Args:
        logger: Logger instance or logger name string
        log_file: File path string or file-like object (None for stderr)
        log_format: Format string for log messages
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)

    Returns:
        Configured logger instance
    """
    if isinstance(log_file, str):
        handler = RobustFileHandler(
            log_file,
            mode='a',
            encoding='utf-8',
            errors='replace'
        )
    else:
        handler = logging.StreamHandler(log_file)

    formatter = logging.Formatter(log_format)

    if isinstance(logger, str):
        logger = logging.getLogger(logger)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(log_level)

    return logger


def parse_log_level(name: str) -> int:
    """Parse a level name ('info', 'DEBUG'...) into a logging constant"""
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ConfigError(f'Unknown log level: {name}')
    return level


def load_config(config_file: Union[str, Path]) -> Dict[str, Any]:
    """Load a JSON or YAML configuration file

    Args:
        config_file: Path to the configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If the file cannot be read or has an unsupported version
    """
    path = Path(config_file)
    try:
        with path.open('r', encoding='utf-8') as fp:
            if path.suffix in ('.yaml', '.yml'):
                conf = yaml.safe_load(fp) or {}
            else:
                conf = json.load(fp)
    except FileNotFoundError:
        raise ConfigError(f'Config file not found: {path}')
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f'Invalid config file {path}: {e}')

    if not isinstance(conf, dict):
        raise ConfigError(f'Config file {path} must contain a mapping')

    config_version = str(conf.get('version', SUPPORTED_CONFIG_VERSION))
    try:
        parsed = version.parse(config_version)
    except version.InvalidVersion:
        raise ConfigError(f'Invalid config version: {config_version}')
    if parsed.major != version.parse(SUPPORTED_CONFIG_VERSION).major:
        raise ConfigError(
            f'Unsupported config version {config_version} '
            f'(expected {SUPPORTED_CONFIG_VERSION})'
        )

    return conf


def block_params(conf: Dict[str, Any]) -> Dict[str, Any]:
    """Extract playlist block parameters from a configuration dictionary

    Values come from the 'block' section, falling back to top-level keys
    and then to the defaults. Unset skin settings stay None; the plugin
    applies the built-in skin defaults.
    """
    section = conf.get('block', {}) or {}

    def pick(key):
        return section.get(key, conf.get(key, DEFAULTS[key]))

    skins = section.get('skins', conf.get('skins', {})) or {}
    cdn_hosts = skins.get('cdn_hosts')

    return {
        'nats_url': conf.get('nats_url', DEFAULTS['nats_url']),
        'emit_events': bool(pick('emit_events')),
        'clear_on_empty_library': bool(pick('clear_on_empty_library')),
        'render_timeout': float(pick('render_timeout')),
        'player_subject_prefix': pick('player_subject_prefix'),
        'skins': {
            'default_url': skins.get('default_url'),
            'cdn_hosts': cdn_hosts if cdn_hosts is None else dict(cdn_hosts),
            'host': skins.get('host'),
        },
    }


def get_config(config_file: Union[str, Path]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Load configuration and set up logging

    Returns:
        Tuple of (conf, params) where:
            conf: Full configuration dictionary from config file
            params: Playlist block parameters extracted from config
    """
    conf = load_config(config_file)

    logging_config = conf.get('logging', {}) or {}
    log_level = parse_log_level(logging_config.get('level', conf.get('log_level', DEFAULTS['log_level'])))

    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    log_file = logging_config.get('file')
    if log_file:
        configure_logger(logging.getLogger(), log_file=log_file, log_level=log_level)

    return conf, block_params(conf)

#!/usr/bin/env python3
"""
Playlist block service orchestrator.

This file does ONE thing: coordinate component startup and shutdown.
All editing logic lives in plugins/playlist_block and amp/.
"""

import argparse
import asyncio
import logging
from typing import Optional

import nats
from nats.aio.client import Client as NATS

from common.config import get_config
from plugins.playlist_block import PlaylistBlockPlugin


logger = logging.getLogger(__name__)


class AmpBlockService:
    """
    Playlist block service.

    Responsibilities:
    1. Connect to NATS
    2. Start the playlist block plugin
    3. Coordinate graceful shutdown
    """

    def __init__(self, config_path: str = "config.json"):
        self.config_dict, self.params = get_config(config_path)
        self.nats: Optional[NATS] = None
        self.plugin: Optional[PlaylistBlockPlugin] = None

    async def start(self):
        """Start all components in correct order"""
        try:
            logger.info(f"Connecting to NATS at {self.params['nats_url']}...")
            self.nats = await nats.connect(self.params["nats_url"])

            logger.info("Starting playlist block plugin...")
            self.plugin = PlaylistBlockPlugin(self.nats, self.params)
            await self.plugin.setup()

            logger.info("✅ Playlist block service started")

        except Exception as e:
            logger.error(f"Failed to start playlist block service: {e}", exc_info=True)
            await self.stop()
            raise

    async def stop(self):
        """Stop all components in reverse order"""
        logger.info("Shutting down playlist block service...")

        if self.plugin:
            await self.plugin.teardown()
            self.plugin = None
        if self.nats:
            await self.nats.drain()
            self.nats = None

        logger.info("✅ Playlist block service stopped")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Audio playlist block service")
    parser.add_argument("config", nargs="?", default="config.json",
                        help="JSON or YAML config file (default: config.json)")
    return parser.parse_args(argv)


async def run(config_path: str):
    service = AmpBlockService(config_path)

    try:
        await service.start()
        # Run until interrupted
        await asyncio.Event().wait()
    finally:
        await service.stop()


def main(argv=None):
    """Entry point"""
    args = parse_args(argv)
    try:
        asyncio.run(run(args.config))
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")


if __name__ == "__main__":
    main()

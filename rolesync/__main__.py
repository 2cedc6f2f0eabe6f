#!/usr/bin/env python3
"""
Connection check

Builds a client from the MONGO_* environment, pings the admin database and
exits non-zero if either step fails.

Usage:
    python -m rolesync
"""
import asyncio
import logging
import sys

from rolesync.config import get_settings
from rolesync.core.exceptions import ConfigurationError
from rolesync.database.connections import build_client, verify_connection

logger = logging.getLogger("rolesync")


async def main() -> int:
    """Main entry point."""
    settings = get_settings()
    try:
        client = build_client(settings)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration ({e.field}): {e}")
        return 2

    try:
        await verify_connection(client)
        logger.info(f"Connected to MongoDB at {settings.host}:{settings.port}")
        return 0
    except Exception as e:
        logger.error(f"Connection check failed: {e}")
        return 1
    finally:
        client.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level.upper()),
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    sys.exit(asyncio.run(main()))

#!/usr/bin/env python3
"""
Create the itinerary and user tables for the configured DB_URL
"""

import asyncio
import logging
import sys

from hangout_planner.core.exceptions import ConfigurationError
from hangout_planner.core.settings import Settings
from hangout_planner.db.session import DatabaseManager

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_database(settings: Settings) -> None:
    manager = DatabaseManager(settings)
    try:
        await manager.initialize()
        await manager.init_db()
    finally:
        await manager.close()


if __name__ == "__main__":
    try:
        asyncio.run(init_database(Settings()))
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        sys.exit(1)
    logger.info("✅ Database tables created successfully")

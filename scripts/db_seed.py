"""Create the storefront tables and seed the demo catalog.

Idempotent: tables are created only if missing and products are inserted
only into an empty catalog.

Usage:
    python scripts/db_seed.py

The script reads DATABASE_URL from the environment; default matches docker-compose.
"""
import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path so the script also runs from a plain checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import structlog

from storefront.database import Base, async_session_maker, engine
from storefront.logging import configure_logging
from storefront.seed import seed_products

logger = structlog.get_logger("db_seed")


async def main():
    configure_logging()
    logger.info("DB seed starting", database=engine.url.render_as_string(hide_password=True))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session_maker() as session:
        added = await seed_products(session)
    await engine.dispose()
    logger.info("DB seed complete", added=added)


if __name__ == "__main__":
    asyncio.run(main())

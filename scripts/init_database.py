#!/usr/bin/env python3
"""Create the ledger tables (transactions, user_balances) if missing."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from verifier.config.database import create_engine
from verifier.models import Base

logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create every table of the model metadata."""
    engine = create_engine(null_pool=True)
    tables = ", ".join(sorted(Base.metadata.tables))
    logger.info(f"Creating tables on {engine.url.host}: {tables}")

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    finally:
        await engine.dispose()

    logger.success("Ledger tables ready")


if __name__ == "__main__":
    asyncio.run(init_database())

"""
Server main entry point.

Initializes logging and the ledger store connection, then serves the
deposit verification API with aiohttp.
"""

import sys
import warnings
from pathlib import Path


# Suppress eth_utils network warnings about invalid ChainId
# Must be set BEFORE importing any modules that use eth_utils
warnings.filterwarnings(
    "ignore",
    message=".*does not have a valid ChainId.*",
    category=UserWarning,
)

from aiohttp import web  # noqa: E402
from loguru import logger  # noqa: E402


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server.initialization.app import create_app  # noqa: E402
from server.initialization.logging import setup_logging  # noqa: E402
from verifier.config.database import (  # noqa: E402
    create_engine,
    create_session_maker,
)
from verifier.config.settings import settings  # noqa: E402
from verifier.utils.exceptions import ConfigurationError  # noqa: E402


def main() -> None:
    """Build the application and run it until interrupted."""
    setup_logging(settings.log_level)

    engine = create_engine()
    session_factory = create_session_maker(engine)

    app = create_app(settings, session_factory)

    async def dispose_engine(_: web.Application) -> None:
        await engine.dispose()
        logger.info("Database engine disposed")

    app.on_cleanup.append(dispose_engine)

    try:
        settings.require_chain_config()
    except ConfigurationError as e:
        # Reported per request as well; the server still starts
        logger.warning(f"⚠️ {e}")

    logger.info(f"Deposit verification API on http://{settings.host}:{settings.port}")
    logger.info(f"  - Verify: http://{settings.host}:{settings.port}/verify-deposit")
    logger.info(f"  - Health: http://{settings.host}:{settings.port}/health")

    web.run_app(
        app,
        host=settings.host,
        port=settings.port,
        print=None,
    )


if __name__ == "__main__":
    main()

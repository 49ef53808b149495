"""
Health check endpoints.

/liveness answers while the event loop runs. /readiness additionally
requires the ledger store to answer a trivial query. /health reports
which parts of the configuration are present.
"""

from aiohttp import web
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from server.initialization.keys import SESSION_FACTORY_KEY, SETTINGS_KEY


async def _ledger_reachable(app: web.Application) -> bool:
    """Run SELECT 1 against the ledger store."""
    try:
        async with app[SESSION_FACTORY_KEY]() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Ledger store unreachable: {e}")
        return False
    return True


async def health_handler(request: web.Request) -> web.Response:
    """Configuration summary; degraded while chain settings are missing."""
    settings = request.app[SETTINGS_KEY]
    chain_configured = bool(settings.bsc_rpc_url and settings.deposit_address)

    return web.json_response(
        {
            "status": "healthy" if chain_configured else "degraded",
            "chain_configured": chain_configured,
            "auth_configured": bool(settings.jwt_secret),
            "environment": settings.environment,
        }
    )


async def readiness_handler(request: web.Request) -> web.Response:
    """503 until the ledger store answers."""
    ready = await _ledger_reachable(request.app)
    return web.json_response(
        {"status": "ready" if ready else "not_ready", "ready": ready},
        status=200 if ready else 503,
    )


async def liveness_handler(request: web.Request) -> web.Response:
    """Always 200 while the process serves requests."""
    return web.json_response({"status": "alive", "alive": True})

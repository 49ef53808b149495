"""
Server Initialization - Application Module.

Module: app.py
Builds the aiohttp application: shared services, middlewares and routes.
Middleware order is critical:
1. CORS (outermost, decorates error responses too)
2. Error handler
3. Auth
"""

from aiohttp import web
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from server.handlers.health import (
    health_handler,
    liveness_handler,
    readiness_handler,
)
from server.handlers.verify_deposit import verify_deposit_handler
from server.initialization.keys import (
    SESSION_FACTORY_KEY,
    SETTINGS_KEY,
    VERIFICATION_SERVICE_KEY,
)
from server.middlewares.auth import auth_middleware
from server.middlewares.cors import cors_middleware
from server.middlewares.error_handler import error_middleware
from verifier.config.settings import Settings
from verifier.services.blockchain.rpc_client import RpcClient
from verifier.services.deposit import VerificationService


async def _close_services(app: web.Application) -> None:
    """Release the RPC client on shutdown."""
    await app[VERIFICATION_SERVICE_KEY].close()
    logger.info("Verification service closed")


def create_app(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    rpc_client: RpcClient | None = None,
) -> web.Application:
    """
    Create the verification web application.

    Args:
        settings: Application settings
        session_factory: Ledger store session factory
        rpc_client: Optional pre-built RPC client

    Returns:
        Configured application
    """
    app = web.Application(
        middlewares=[cors_middleware, error_middleware, auth_middleware]
    )
    app[SETTINGS_KEY] = settings
    app[SESSION_FACTORY_KEY] = session_factory
    app[VERIFICATION_SERVICE_KEY] = VerificationService(
        settings, session_factory, rpc_client=rpc_client
    )
    app.on_cleanup.append(_close_services)

    app.router.add_get("/verify-deposit", verify_deposit_handler)
    app.router.add_post("/verify-deposit", verify_deposit_handler)
    app.router.add_get("/health", health_handler)
    app.router.add_get("/readiness", readiness_handler)
    app.router.add_get("/liveness", liveness_handler)

    return app

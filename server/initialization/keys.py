"""
Server Initialization - Application Keys.

Typed keys for objects shared through the aiohttp application and
request mappings.
"""

from aiohttp import web
from sqlalchemy.ext.asyncio import async_sessionmaker

from verifier.config.settings import Settings
from verifier.services.deposit import VerificationService


SETTINGS_KEY = web.AppKey("settings", Settings)
SESSION_FACTORY_KEY = web.AppKey("session_factory", async_sessionmaker)
VERIFICATION_SERVICE_KEY = web.AppKey(
    "verification_service", VerificationService
)

# Request-scoped caller identity, None when unauthenticated
USER_ID = "user_id"

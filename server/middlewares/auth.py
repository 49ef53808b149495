"""
Authentication Middleware.

Resolves the caller identity from the bearer token. Requests without a
valid token continue unauthenticated; operations that need an identity
reject them further down.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from loguru import logger

from server.initialization.keys import SETTINGS_KEY, USER_ID
from verifier.utils.security import decode_access_token


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def auth_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Attach the authenticated user id (JWT sub claim) to the request."""
    request[USER_ID] = None

    authorization = request.headers.get("Authorization")
    if authorization:
        settings = request.app[SETTINGS_KEY]
        if not settings.jwt_secret:
            logger.warning(
                "Bearer token received but JWT_SECRET is not configured"
            )
        else:
            claims = decode_access_token(
                authorization,
                settings.jwt_secret,
                algorithm=settings.jwt_algorithm,
                audience=settings.jwt_audience,
            )
            subject = claims.get("sub") if claims else None
            if isinstance(subject, str) and subject:
                request[USER_ID] = subject

    return await handler(request)

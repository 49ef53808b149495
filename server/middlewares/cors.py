"""
CORS Middleware.

Answers preflight requests and adds CORS headers to every response,
error responses included, so browser clients can read them.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web

from verifier.config.constants import CORS_HEADERS


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def cors_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Handle OPTIONS preflight and decorate responses."""
    if request.method == "OPTIONS":
        return web.Response(text="ok", headers=CORS_HEADERS)

    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(CORS_HEADERS)
        raise

    response.headers.update(CORS_HEADERS)
    return response

"""
Global Error Handler Middleware.

Maps verification errors to JSON responses with their HTTP status.
Unexpected exceptions are logged with traceback and reported without
technical details.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from loguru import logger

from verifier.utils.exceptions import (
    DepositVerificationError,
    InvalidInput,
    Unauthorized,
    is_retryable,
)


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def error_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Execute handler and translate failures into {"error": message}."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except (InvalidInput, Unauthorized) as e:
        logger.info(f"Rejected {request.method} {request.path}: {e}")
        return web.json_response({"error": str(e)}, status=e.http_status)
    except DepositVerificationError as e:
        suffix = " (retryable)" if is_retryable(e) else ""
        logger.error(
            f"{type(e).__name__} on {request.method} {request.path}: {e}{suffix}"
        )
        return web.json_response({"error": str(e)}, status=e.http_status)
    except Exception as e:
        logger.exception(f"Unhandled exception: {e}")
        return web.json_response({"error": "Verification failed"}, status=500)

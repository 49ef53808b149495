"""
Deposit verification endpoint.

GET returns the public deposit configuration. POST either returns the
configuration ({"action": "config"}) or verifies and credits deposits
sent from the caller's wallet.
"""

import json
from typing import Any

from aiohttp import web

from server.initialization.keys import USER_ID, VERIFICATION_SERVICE_KEY


async def read_json_body(request: web.Request) -> dict[str, Any]:
    """Parse the request body; anything but a JSON object reads as {}."""
    if not request.can_read_body:
        return {}
    try:
        body = json.loads(await request.text())
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


async def verify_deposit_handler(request: web.Request) -> web.Response:
    """
    Handle GET/POST /verify-deposit.

    Errors raised by the service are rendered by the error middleware.
    """
    service = request.app[VERIFICATION_SERVICE_KEY]

    if request.method == "GET":
        return web.json_response(service.get_config().to_dict())

    body = await read_json_body(request)
    if body.get("action") == "config":
        return web.json_response(service.get_config().to_dict())

    result = await service.verify(
        user_id=request.get(USER_ID),
        from_address=body.get("fromAddress"),
        min_amount=body.get("minAmount"),
        lookback_blocks=body.get("lookbackBlocks"),
        min_confirmations=body.get("minConfirmations"),
    )
    return web.json_response(result.to_dict())

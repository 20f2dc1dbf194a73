"""ASGI handler: translates ASGI scope/messages to finch types.

The only component that touches raw HTTP messages directly. Reads the
body, builds the Request, matches the route, runs the handler chain and
sends the Response back through ASGI send().
"""

import logging

from finch._internal.asgi import Receive, Scope, Send
from finch.config import ServerConfig
from finch.errors import HTTPError
from finch.handlers import Handler
from finch.http.request import Request
from finch.http.response import Response
from finch.routing.router import Router
from finch.server.errors import handle_error
from finch.server.sender import send_response

logger = logging.getLogger("finch.server")


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: the request body exceeds ``max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")


class _Disconnected(Exception):  # noqa: N818
    """The client went away before the body was fully read."""


async def read_body(receive: Receive, limit: int) -> bytes:
    """Read the complete request body, enforcing *limit* (0 disables it)."""
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise _Disconnected
        chunk = message.get("body", b"")
        if chunk:
            size += len(chunk)
            if limit and size > limit:
                raise PayloadTooLarge(limit)
            chunks.append(chunk)
        if not message.get("more_body", False):
            return b"".join(chunks)


async def run_chain(chain: tuple[Handler, ...], request: Request, response: Response) -> None:
    """Run handlers in order until one raises or commits the response."""
    for handler in chain:
        await handler(request, response)
        if response.sent:
            return


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Handler, ...],
    config: ServerConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    response = Response()
    request = Request.from_asgi(scope)

    try:
        body = await read_body(receive, config.max_content_length)
    except _Disconnected:
        logger.debug("client disconnected: %s %s", request.method, request.path)
        return
    except HTTPError as exc:
        handle_error(exc, request, response)
    else:
        request = Request.from_asgi(scope, body)
        try:
            match = router.match(request.method, request.path)
            request = request.matched(match.route.pattern, match.path_params)
            await run_chain((*middleware, *match.route.chain), request, response)
        except Exception as exc:
            handle_error(exc, request, response)

    await send_response(response, send, head=request.method == "HEAD")

"""Error boundary for finch requests.

Every failure that escapes a handler chain is turned into exactly one
response here. The boundary writes into the request's own ``Response`` so
the pipeline has a single send path.
"""

import logging

from finch.errors import HTTPError, ServerError
from finch.http.payload import encode_json
from finch.http.request import Request
from finch.http.response import Response, valid_status

logger = logging.getLogger("finch.server")

INTERNAL_ERROR = 500


def handle_error(exc: Exception, request: Request, response: Response) -> None:
    """Write the response for *exc*, unless one was already sent."""
    if response.sent:
        logger.error(
            "%s %s failed after the response was sent: %s",
            request.method,
            request.path,
            exc,
            exc_info=exc,
        )
        return

    response.reset()
    if isinstance(exc, ServerError):
        handle_server_error(exc, request, response)
    elif isinstance(exc, HTTPError):
        handle_http_error(exc, request, response)
    else:
        handle_internal_error(exc, request, response)


def handle_server_error(exc: ServerError, request: Request, response: Response) -> None:
    """Tagged error: its own status, and ``{"err": ...}`` for JSON."""
    status = exc.status_code if valid_status(exc.status_code) else INTERNAL_ERROR
    if status >= INTERNAL_ERROR:
        logger.error("%d %s %s: %s", status, request.method, request.path, exc.message, exc_info=exc)
    else:
        logger.debug("%d %s %s: %s", status, request.method, request.path, exc.message)

    response.status(status).set_header("Content-Type", exc.content_type)
    if exc.is_json:
        response.send(encode_json({"err": exc.message}))
    else:
        response.send(exc.message)


def handle_http_error(exc: HTTPError, request: Request, response: Response) -> None:
    """Map an HTTPError to a plain-text response with its headers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    response.status(exc.status).set_header("Content-Type", "text/plain; charset=utf-8")
    for name, value in exc.headers:
        response.set_header(name, value)
    response.send(exc.detail or f"Error {exc.status}")


def handle_internal_error(exc: Exception, request: Request, response: Response) -> None:
    """Untagged failure: 500 with the error message as plain text."""
    logger.exception("500 %s %s", request.method, request.path, exc_info=exc)

    response.status(INTERNAL_ERROR).set_header("Content-Type", "text/plain; charset=utf-8")
    response.send(str(exc) or "Internal Server Error")

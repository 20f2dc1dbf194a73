"""ASGI response sending: translates a finished Response to ASGI messages."""

from finch._internal.asgi import Send
from finch.http.response import Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a finch Response into ASGI send() calls.

    With *head* set the body is dropped but ``content-length`` still
    reports what a GET would have sent.
    """
    status = response.status_code
    body = response.body if _body_allowed(status) else b""

    raw_headers = encode_headers(response.headers)
    if body and not any(name == b"content-type" for name, _ in raw_headers):
        raw_headers.append((b"content-type", b"text/plain; charset=utf-8"))
    if _body_allowed(status):
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )

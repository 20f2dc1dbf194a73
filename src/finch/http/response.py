"""Response writer handed to handlers.

Handlers and middleware share one ``Response`` per request. It buffers
status, headers and body; the server pipeline turns it into ASGI messages
once the chain finishes. ``send`` commits the response: headers and
status written after that are ignored, mirroring a real HTTP writer
where the status line has already gone out.
"""

from __future__ import annotations

import logging
from typing import Any

from finch.http.headers import MutableHeaders
from finch.http.payload import encode_json

logger = logging.getLogger("finch.server")

DEFAULT_STATUS = 200
_MIN_STATUS = 100
_MAX_STATUS = 511

_MAGIC_TYPES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF-", "application/pdf"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
)

_HTML_PREFIXES: tuple[bytes, ...] = (
    b"<!doctype html",
    b"<html",
    b"<head",
    b"<body",
    b"<div",
    b"<p",
    b"<h1",
    b"<table",
    b"<script",
)


def detect_content_type(data: bytes) -> str:
    """Best-effort content type for an untyped body.

    Recognizes common binary signatures and HTML openers; anything else
    that decodes as UTF-8 is ``text/plain``.
    """
    for magic, content_type in _MAGIC_TYPES:
        if data.startswith(magic):
            return content_type
    head = data[:512].lstrip().lower()
    if head.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    if any(head.startswith(prefix) for prefix in _HTML_PREFIXES):
        return "text/html; charset=utf-8"
    try:
        data[:512].decode("utf-8")
    except UnicodeDecodeError:
        # A multibyte sequence may be cut at the 512-byte boundary.
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            return "application/octet-stream"
    return "text/plain; charset=utf-8"


def valid_status(status: int) -> bool:
    return _MIN_STATUS <= status <= _MAX_STATUS


class Response:
    """A buffered, chainable HTTP response writer.

    Usage inside a handler::

        async def create(req: Request, res: Response) -> None:
            res.status(201).json({"created": True})
    """

    __slots__ = ("_body", "_headers", "_sent", "_status")

    def __init__(self) -> None:
        self._status: int = DEFAULT_STATUS
        self._headers = MutableHeaders()
        self._body = bytearray()
        self._sent = False

    # -- Inspection --

    @property
    def status_code(self) -> int:
        """The status that will be sent; invalid codes fall back to 200."""
        return self._status if valid_status(self._status) else DEFAULT_STATUS

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return self._headers.items()

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    @property
    def sent(self) -> bool:
        """True once ``send``/``json``/``send_status`` committed the response."""
        return self._sent

    def get_header(self, name: str) -> str | None:
        return self._headers.get(name)

    # -- Building --

    def status(self, status: int) -> Response:
        """Set the status code and return self for chaining."""
        if self._sent:
            logger.debug("status %d ignored: response already sent", status)
            return self
        self._status = status
        return self

    def set_header(self, name: str, value: str) -> Response:
        """Set header *name*, replacing any earlier value."""
        if self._sent:
            logger.debug("header %s ignored: response already sent", name)
            return self
        self._headers.set(name, value)
        return self

    def add_header(self, name: str, value: str) -> Response:
        """Append a value for header *name* (e.g. multiple ``Set-Cookie``)."""
        if self._sent:
            logger.debug("header %s ignored: response already sent", name)
            return self
        self._headers.add(name, value)
        return self

    # -- Sending --

    def send(self, data: bytes | str = b"") -> None:
        """Write *data* as the body and commit the response.

        When no ``Content-Type`` was set, one is detected from the bytes.
        Calling ``send`` again appends to the body.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not self._sent and data and "content-type" not in self._headers:
            self._headers.set("Content-Type", detect_content_type(data))
        self._body.extend(data)
        self._sent = True

    def send_string(self, text: str) -> None:
        self.send(text.encode("utf-8"))

    def send_status(self, status: int) -> None:
        """Commit an empty response with *status*."""
        self.status(status)
        self._sent = True

    def json(self, data: Any) -> None:
        """Encode *data* as JSON and commit it as the body."""
        body = encode_json(data)
        if not self._sent:
            self._headers.set("Content-Type", "application/json")
        self._body.extend(body)
        self._sent = True

    def reset(self) -> None:
        """Drop everything written so far (used by the error boundary)."""
        self._status = DEFAULT_STATUS
        self._headers = MutableHeaders()
        self._body = bytearray()
        self._sent = False

    def __repr__(self) -> str:
        return f"<Response {self.status_code} sent={self._sent} {len(self._body)} bytes>"

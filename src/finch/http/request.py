"""Request view handed to handlers.

Metadata is frozen at creation. The body is read in full by the server
pipeline before dispatch, so every accessor here is synchronous and safe
to call from sync or async handlers alike.
"""

from __future__ import annotations

import io
import json as json_module
from dataclasses import dataclass, field, replace
from typing import Any

from finch.http.headers import Headers
from finch.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path_params`` holds the placeholders captured by the router and
    ``pattern`` the registered route pattern that matched (empty before
    routing). ``state`` is a per-request scratch dict that middleware can
    use to hand values to later handlers in the chain.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    body: bytes = b""
    path_params: dict[str, str] = field(default_factory=dict)
    pattern: str = ""
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    state: dict[str, Any] = field(default_factory=dict, compare=False)

    # -- Accessors --

    def header(self, name: str, default: str = "") -> str:
        """Return the first value of header *name* (case-insensitive)."""
        value = self.headers.get(name)
        return default if value is None else value

    def param(self, name: str, default: str = "") -> str:
        """Return the path parameter *name* captured by the router."""
        return self.path_params.get(name, default)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    def body_buffer(self) -> io.BytesIO:
        """The body in a fresh buffer, positioned at the start."""
        return io.BytesIO(self.body)

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding)

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)

    # -- Factories --

    def matched(self, pattern: str, path_params: dict[str, str]) -> Request:
        """Copy of this request carrying the route that matched it.

        ``state`` is shared with the original so values set before routing
        survive.
        """
        return replace(self, pattern=pattern, path_params=path_params, state=self.state)

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], body: bytes = b"") -> Request:
        """Create a Request from an ASGI scope and the already-read body."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"] or "/",
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            body=body,
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )

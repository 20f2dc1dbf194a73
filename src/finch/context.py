"""Per-request facade over the request and response views.

A ``Context`` is built for each call of a context-style handler and lives
for exactly one request/response cycle::

    def show_account(ctx: Context) -> None:
        account = accounts.get(ctx.param("name"))
        if account is None:
            ctx.send_status(404)
            return
        ctx.json({"account": account})
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from finch.binding import bind_values
from finch.http.forms import FormData, UploadFile, parse_form_data
from finch.http.payload import decode_json
from finch.http.request import Request
from finch.http.response import Response
from finch.routing.pattern import extract_params


class Context:
    """Request data, response writing and parameter binding in one object."""

    __slots__ = ("_form", "_params", "request", "response")

    def __init__(self, request: Request, response: Response) -> None:
        self.request = request
        self.response = response
        self._params: dict[str, str] | None = None
        self._form: FormData | None = None

    # -- Request data --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def params(self) -> dict[str, str]:
        """Path parameters captured by the router (cached).

        Falls back to matching the registered pattern against the path
        when the request was built without routing.
        """
        if self._params is None:
            params = dict(self.request.path_params)
            if not params and self.request.pattern:
                params = extract_params(self.request.pattern, self.request.path)
            self._params = params
        return self._params

    def param(self, name: str, default: str = "") -> str:
        """Return path parameter *name*, or *default* when missing or empty."""
        value = self.params.get(name, "")
        return value or default

    def query(self, name: str, default: str = "") -> str:
        """Return the first value of query parameter *name*, or *default*."""
        value = self.request.query.get(name)
        return value or default

    def header(self, name: str) -> str:
        return self.request.header(name)

    @property
    def ip(self) -> str:
        """Client address, honoring ``X-Real-IP`` then ``X-Forwarded-For``."""
        if ip := self.request.header("x-real-ip"):
            return ip
        if forwarded := self.request.header("x-forwarded-for"):
            return forwarded
        client = self.request.client
        return client[0] if client else ""

    @property
    def ips(self) -> list[str]:
        """Every address in ``X-Forwarded-For``, or just ``ip``."""
        forwarded = self.request.header("x-forwarded-for")
        if not forwarded:
            return [self.ip]
        return [part.strip() for part in forwarded.split(",") if part.strip()]

    def body(self) -> bytes:
        return self.request.body

    # -- Forms --

    def form(self) -> FormData:
        """Parse the body as a URL-encoded or multipart form (cached).

        Raises ``ValueError`` for a non-form body and ``ConfigurationError``
        for a multipart body when ``python-multipart`` is not installed.
        """
        if self._form is None:
            content_type = self.request.content_type or "application/x-www-form-urlencoded"
            self._form = parse_form_data(self.request.body, content_type)
        return self._form

    def form_value(self, key: str, default: str = "") -> str:
        return self.form().get(key) or default

    def form_file(self, key: str) -> UploadFile | None:
        """Return the file uploaded under *key*, or None when there is none."""
        return self.form().files.get(key)

    # -- Binding --

    def bind_params(self, dest: Any) -> Any:
        """Populate *dest* from path parameters (metadata tag ``param``)."""
        return bind_values(dest, self.params, "param")

    def bind_query(self, dest: Any) -> Any:
        """Populate *dest* from the query string (metadata tag ``query``)."""
        return bind_values(dest, self.request.query.first_values(), "query")

    def bind_headers(self, dest: Any) -> Any:
        """Populate *dest* from request headers (metadata tag ``header``)."""
        headers = {name: self.request.headers[name] for name in self.request.headers}
        return bind_values(dest, headers, "header", case_insensitive=True)

    def bind_body(self, dest: Any) -> Any:
        """Decode the JSON body into *dest*. Raises ``DecodeError`` on bad input."""
        return decode_json(self.request.body, dest)

    # -- Response --

    def status(self, status: int) -> Context:
        """Set the response status and return self for chaining."""
        self.response.status(status)
        return self

    def set_header(self, name: str, value: str) -> Context:
        self.response.set_header(name, value)
        return self

    def send(self, data: bytes | str) -> None:
        self.response.send(data)

    def send_string(self, text: str) -> None:
        self.response.send_string(text)

    def send_file(self, file_path: str | Path) -> None:
        """Send the contents of *file_path*. ``OSError`` propagates."""
        self.response.send(Path(file_path).read_bytes())

    def send_status(self, status: int) -> None:
        self.response.send_status(status)

    def json(self, data: Any) -> None:
        self.response.json(data)

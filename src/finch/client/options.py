"""Request options for the outbound client.

Header and query values are stringified on construction, so callers can
pass ints, bools or anything else with a sensible ``str()``::

    Options(
        headers=[Header("Authorization", f"Bearer {token}")],
        query_params=[QueryParam("page", 2)],
        body=JSON({"name": "Ann Lee"}),
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import IO

from finch.http.payload import JSON, SupportsBytes

type Body = bytes | bytearray | str | JSON | SupportsBytes | IO[bytes]


@dataclass(frozen=True, slots=True)
class Header:
    key: str
    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", str(self.value))


@dataclass(frozen=True, slots=True)
class QueryParam:
    key: str
    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", str(self.value))


@dataclass(frozen=True, slots=True)
class Options:
    """Headers, query parameters and body for one outbound call.

    Entries keep their order; repeated keys are all sent.
    """

    headers: Sequence[Header] = ()
    query_params: Sequence[QueryParam] = ()
    body: Body | None = None

    def header_pairs(self) -> list[tuple[str, str]]:
        return [(h.key, h.value) for h in self.headers]

    def query_pairs(self) -> list[tuple[str, str]]:
        return [(q.key, q.value) for q in self.query_params]

    def has_header(self, name: str) -> bool:
        name = name.lower()
        return any(h.key.lower() == name for h in self.headers)

    def content(self) -> bytes | None:
        """The body as bytes, or None when there is no body."""
        body = self.body
        if body is None:
            return None
        if isinstance(body, (bytes, bytearray)):
            return bytes(body)
        if isinstance(body, str):
            return body.encode("utf-8")
        if isinstance(body, JSON):
            return body.bytes()
        read = getattr(body, "read", None)
        if callable(read):
            data = read()
            return data.encode("utf-8") if isinstance(data, str) else bytes(data)
        render = getattr(body, "bytes", None)
        if callable(render):
            return render()
        msg = f"unsupported body type: {type(body).__name__}"
        raise TypeError(msg)

    def default_content_type(self) -> str | None:
        """``application/json`` for JSON bodies without an explicit header."""
        if isinstance(self.body, JSON) and not self.has_header("content-type"):
            return "application/json"
        return None

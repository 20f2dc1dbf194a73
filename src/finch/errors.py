"""Finch exception hierarchy.

Shared across the router, server, handler normalizer, binder and client so
every module raises and catches the same types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class FinchError(Exception):
    """Base for all finch-specific errors."""


class ConfigurationError(FinchError):
    """Raised when the server setup is invalid.

    Always raised synchronously from the registration call that caused it,
    never deferred to request time.
    """


class InvalidHandlerType(ConfigurationError, TypeError):  # noqa: N818
    """A value passed as a handler matches none of the accepted shapes.

    ``position`` and ``role`` are filled in when the value was part of a
    handler list, so callers can tell a malformed middleware from a
    malformed terminal handler.
    """

    def __init__(
        self,
        value: Any,
        *,
        position: int | None = None,
        role: str | None = None,
        reason: str = "",
    ) -> None:
        self.value = value
        self.value_type = type(value)
        self.position = position
        self.role = role
        self.reason = reason
        super().__init__(self._message())

    def _message(self) -> str:
        type_name = _type_name(self.value)
        msg = (
            f"invalid handler type: {type_name} - must be a Handler, an object with "
            "handle(ctx), a (request, response) callable or a (ctx) callable"
        )
        if self.reason:
            msg = f"{msg} ({self.reason})"
        if self.role == "middleware":
            return f"middleware at position {self.position}: {msg}"
        if self.role == "handler":
            return f"final handler at position {self.position}: {msg}"
        return msg

    def at(self, position: int, role: str) -> InvalidHandlerType:
        """Return a copy of this error located inside a handler list."""
        return InvalidHandlerType(self.value, position=position, role=role, reason=self.reason)


class MissingHandler(ConfigurationError, ValueError):  # noqa: N818
    """A registration call received no handlers at all."""

    def __init__(self, detail: str = "at least one handler is required") -> None:
        super().__init__(detail)


@dataclass(frozen=True, slots=True)
class HTTPError(FinchError):
    """An error that maps directly to an HTTP status code.

    Raised by the router (404/405) and available to handlers that want a
    plain-text error response with a specific status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )


class ServerError(FinchError):
    """A handler failure tagged with its own status code and content type.

    With ``content_type="application/json"`` the response body is
    ``{"err": "<message>"}``; any other content type sends the message as
    the body::

        raise ServerError("account not found", status_code=404,
                          content_type="application/json")
    """

    def __init__(
        self,
        message: str | BaseException,
        *,
        status_code: int = 500,
        content_type: str = "text/plain; charset=utf-8",
    ) -> None:
        self.message = str(message)
        self.status_code = status_code
        self.content_type = content_type
        super().__init__(self.message)
        if isinstance(message, BaseException):
            self.__cause__ = message

    @property
    def is_json(self) -> bool:
        return self.content_type.split(";", 1)[0].strip().lower() == "application/json"


class RequestError(FinchError):
    """An outbound request came back with a status code >= 400.

    The full ``httpx.Response`` stays available on ``.response``.
    """

    def __init__(self, status_code: int, response: httpx.Response | None = None) -> None:
        self.status_code = status_code
        self.response = response
        body = ""
        if response is not None:
            body = response.text[:200]
        self.body = body
        msg = f"request failed with status {status_code}"
        if body:
            msg = f"{msg}: {body}"
        super().__init__(msg)


class BindError(FinchError, ValueError):
    """A string value could not be converted to a field's type."""

    def __init__(self, value: str, kind: str, field: str = "") -> None:
        self.value = value
        self.kind = kind
        self.field = field
        target = f" for field {field!r}" if field else ""
        super().__init__(f"cannot convert {value!r} to {kind}{target}")


class UnsupportedFieldType(FinchError, TypeError):  # noqa: N818
    """A destination field has a type the binder cannot populate."""

    def __init__(self, kind: str, field: str = "") -> None:
        self.kind = kind
        self.field = field
        target = f" (field {field!r})" if field else ""
        super().__init__(f"unsupported type: {kind}{target}")


class DecodeError(FinchError, ValueError):
    """JSON bytes were malformed or did not fit the destination."""


def _type_name(value: Any) -> str:
    if isinstance(value, type):
        return f"type[{value.__qualname__}]"
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"

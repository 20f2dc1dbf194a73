"""Handler normalization — every accepted handler shape becomes a ``Handler``.

Routes and middleware can be written in four shapes::

    # 1. Already canonical
    h = handler(lambda req, res: res.send("hi"))

    # 2. An object with a context-based handle() method
    class Hello:
        def handle(self, ctx: Context) -> None:
            ctx.send_string("hi")

    # 3. A (request, response) callable, sync or async
    async def hello(req: Request, res: Response) -> None:
        res.send("hi")

    # 4. A (ctx) callable, sync or async
    def hello(ctx: Context) -> None:
        ctx.send_string("hi")

Each shape has its own adapter constructor. ``normalize_handler`` only
decides which adapter applies; it runs once per value, at registration
time, so a malformed handler fails the registration call instead of the
first request.

A handler signals failure by raising. Returning an exception instance is
treated the same as raising it.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from finch._internal.invoke import invoke
from finch.context import Context
from finch.errors import InvalidHandlerType, MissingHandler
from finch.http.request import Request
from finch.http.response import Response

type HandlerFunc = Callable[[Request, Response], Awaitable[None]]


@runtime_checkable
class ContextHandler(Protocol):
    """An object that handles requests through a ``Context``."""

    def handle(self, ctx: Context) -> Any: ...


@dataclass(frozen=True, slots=True)
class Handler:
    """The canonical handler: an awaitable ``(request, response) -> None``.

    ``name`` describes the original value for logs and route listings;
    ``shape`` records which adapter produced it.
    """

    func: HandlerFunc
    name: str = ""
    shape: str = "handler"

    async def __call__(self, request: Request, response: Response) -> None:
        await _invoke(self.func, request, response)

    @classmethod
    def wrap(cls, func: HandlerFunc, name: str | None = None) -> Handler:
        """Wrap an async ``(request, response)`` coroutine function as-is."""
        return cls(func=func, name=name or _describe(func), shape="handler")


async def _invoke(func: Callable[..., Any], *args: Any) -> None:
    """Call a sync or async handler and surface a returned exception."""
    result = await invoke(func, *args)
    if isinstance(result, BaseException):
        raise result


# -- Adapter constructors (one per accepted shape) --


def from_request_response(func: Callable[[Request, Response], Any]) -> Handler:
    """Adapt a sync or async ``(request, response)`` callable."""

    async def call(request: Request, response: Response) -> None:
        await _invoke(func, request, response)

    return Handler(func=call, name=_describe(func), shape="request_response")


def from_context_function(func: Callable[[Context], Any]) -> Handler:
    """Adapt a sync or async ``(ctx)`` callable.

    A fresh ``Context`` is built from the request and response on every call.
    """

    async def call(request: Request, response: Response) -> None:
        await _invoke(func, Context(request, response))

    return Handler(func=call, name=_describe(func), shape="context")


def from_context_handler(obj: ContextHandler) -> Handler:
    """Adapt an object whose ``handle(ctx)`` method serves the request."""
    method = obj.handle

    async def call(request: Request, response: Response) -> None:
        await _invoke(method, Context(request, response))

    return Handler(func=call, name=_describe(obj), shape="context_handler")


def handler(func: Callable[..., Any]) -> Handler:
    """Decorator form of ``normalize_handler``::

    @handler
    def auth(req, res): ...
    """
    return normalize_handler(func)


# -- Shape detection --


def _arity(func: Callable[..., Any]) -> tuple[int, bool, str]:
    """Return (required positional count, accepts *args, problem)."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return 0, False, "signature cannot be inspected"

    required = 0
    var_positional = False
    for param in sig.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            if param.default is param.empty:
                required += 1
        elif param.kind is param.VAR_POSITIONAL:
            var_positional = True
        elif param.kind is param.KEYWORD_ONLY and param.default is param.empty:
            return required, var_positional, f"requires keyword-only argument {param.name!r}"
    return required, var_positional, ""


def normalize_handler(value: Any) -> Handler:
    """Turn any accepted handler shape into a ``Handler``.

    Shapes are tried in priority order: canonical ``Handler``, object with
    ``handle(ctx)``, ``(request, response)`` callable, ``(ctx)`` callable.

    Raises ``InvalidHandlerType`` for anything else.
    """
    if isinstance(value, Handler):
        return value

    if isinstance(value, type):
        raise InvalidHandlerType(value, reason="pass an instance, not a class")

    handle = getattr(value, "handle", None)
    if callable(handle) and not inspect.isroutine(value):
        required, var_positional, problem = _arity(handle)
        if problem or not (required == 1 or (required == 0 and var_positional)):
            reason = problem or f"handle() takes {required} required arguments, expected 1"
            raise InvalidHandlerType(value, reason=reason)
        return from_context_handler(value)

    if not callable(value):
        raise InvalidHandlerType(value, reason="not callable")

    required, var_positional, problem = _arity(value)
    if problem:
        raise InvalidHandlerType(value, reason=problem)
    if required == 2 or (required == 0 and var_positional):
        return from_request_response(value)
    if required == 1:
        return from_context_function(value)
    raise InvalidHandlerType(
        value, reason=f"takes {required} required arguments, expected 1 (ctx) or 2 (request, response)"
    )


def register_handlers(handlers: Sequence[Any]) -> tuple[Handler, tuple[Handler, ...]]:
    """Normalize a handler list into ``(terminal handler, middlewares)``.

    Every element but the last is a middleware; the last is the handler.

    Raises ``MissingHandler`` for an empty list and ``InvalidHandlerType``
    with ``position``/``role`` set for the first malformed element.
    """
    if not handlers:
        raise MissingHandler

    last = len(handlers) - 1
    middlewares: list[Handler] = []
    for position, value in enumerate(handlers[:last]):
        try:
            middlewares.append(normalize_handler(value))
        except InvalidHandlerType as exc:
            raise exc.at(position, "middleware") from None

    try:
        final = normalize_handler(handlers[last])
    except InvalidHandlerType as exc:
        raise exc.at(last, "handler") from None

    return final, tuple(middlewares)


def _describe(value: Any) -> str:
    name = getattr(value, "__qualname__", None) or getattr(value, "__name__", None)
    if name is None:
        name = type(value).__qualname__
    module = getattr(value, "__module__", None) or type(value).__module__
    if module and module != "builtins":
        return f"{module}.{name}"
    return name

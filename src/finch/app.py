"""Server: the central registration point and ASGI application.

Mutable during setup (route and middleware registration), frozen when it
starts serving. Registration errors surface from the call that caused
them, so a bad handler never reaches a request.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from finch._internal.asgi import Receive, Scope, Send
from finch._internal.invoke import invoke
from finch.config import ServerConfig
from finch.errors import InvalidHandlerType
from finch.handlers import Handler, normalize_handler, register_handlers
from finch.routing.group import RouteGroup
from finch.routing.pattern import normalize_pattern
from finch.routing.route import Route
from finch.routing.router import Router
from finch.server.handler import handle_request

logger = logging.getLogger("finch.server")


class Server:
    """A routing and middleware server.

    Usage::

        server = Server(5050)

        @handler
        async def hello(req: Request, res: Response) -> None:
            res.send("Hello, World!")

        server.get("/hello", hello)
        server.listen()

    Every registration method accepts handlers in any of the shapes
    understood by ``finch.handlers.normalize_handler``. All elements but
    the last are route middleware; the last one serves the request.

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread freezes the server, even when several ASGI workers deliver
        their first request concurrently.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, port: int | str | None = None, *, config: ServerConfig | None = None) -> None:
        config = config or ServerConfig()
        if port is not None:
            config = config.with_port(port)
        self.config: ServerConfig = config
        self._router = Router()
        self._middleware: list[Handler] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def add_route(self, method: str, path: str, *handlers: Any) -> Route:
        """Register *handlers* for ``method path`` and return the new route.

        Raises ``MissingHandler`` when no handler is given,
        ``InvalidHandlerType`` for a malformed element and
        ``ConfigurationError`` when the route conflicts with an existing
        one. Nothing is registered in any of those cases.
        """
        self._check_not_frozen()
        final, middlewares = register_handlers(handlers)
        route = Route(
            method=method.upper(),
            pattern=normalize_pattern(path),
            handler=final,
            middlewares=middlewares,
        )
        self._router.add(route)
        return route

    def get(self, path: str, *handlers: Any) -> Route:
        return self.add_route("GET", path, *handlers)

    def post(self, path: str, *handlers: Any) -> Route:
        return self.add_route("POST", path, *handlers)

    def put(self, path: str, *handlers: Any) -> Route:
        return self.add_route("PUT", path, *handlers)

    def patch(self, path: str, *handlers: Any) -> Route:
        return self.add_route("PATCH", path, *handlers)

    def delete(self, path: str, *handlers: Any) -> Route:
        return self.add_route("DELETE", path, *handlers)

    def group(self, base_path: str, *middlewares: Any) -> RouteGroup:
        """Return a route group rooted at *base_path*.

        *middlewares* run, in order, before the handlers of every route
        registered through the group (and its children).
        """
        return RouteGroup(server=self, base_path=base_path, middlewares=middlewares)

    def route(self, base_path: str, fn: Callable[[RouteGroup], Any]) -> None:
        """Call *fn* with a group at *base_path*::

        def accounts(r: RouteGroup) -> None:
            r.get("/:name", show_account)

        server.route("/accounts", accounts)
        """
        fn(self.group(base_path))

    def use(self, *middlewares: Any) -> None:
        """Register global middleware.

        Global middleware runs before the route's own chain on every
        route, including routes registered before this call.
        """
        self._check_not_frozen()
        normalized: list[Handler] = []
        for position, value in enumerate(middlewares):
            try:
                normalized.append(normalize_handler(value))
            except InvalidHandlerType as exc:
                raise exc.at(position, "middleware") from None
        self._middleware.extend(normalized)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run during ASGI lifespan startup.

        Sync and async functions are both accepted::

            @server.on_startup
            async def connect() -> None:
                ...
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run during ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Inspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes in registration order."""
        return self._router.routes

    @property
    def middleware(self) -> tuple[Handler, ...]:
        return tuple(self._middleware)

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Entry points --

    def listen(self, host: str | None = None, port: int | str | None = None) -> None:
        """Start serving on the configured address. Blocks until stopped."""
        config = self.config
        if port is not None:
            config = config.with_port(port)
        if host is not None:
            config = replace(config, host=host)
        self._ensure_frozen()

        from finch.server.serve import run_server

        run_server(self, config)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=tuple(self._middleware),
            config=self.config,
        )

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the server at startup, then runs the startup/shutdown
        hooks and signals completion back to the ASGI server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the route table. MUST only be called while holding _freeze_lock."""
        self._router.compile()
        self._frozen = True
        logger.debug(
            "server frozen: %d routes, %d global middleware",
            len(self._router),
            len(self._middleware),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the server after it has started serving requests. "
                "Register routes and middleware before calling listen()."
            )
            raise RuntimeError(msg)

    def __repr__(self) -> str:
        return f"<Server {self.config.address} routes={len(self._router)}>"

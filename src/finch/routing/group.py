"""Route groups — shared path prefixes and middleware without mutation.

A group holds a fully-resolved base path and middleware tuple. Nesting
creates a new group with both extended; the parent never changes::

    api = server.group("/api", auth)
    accounts = api.group("/accounts", audit)
    accounts.get("/:name", show_account)
    # GET /api/accounts/:name  ->  auth, audit, show_account

Registration always lands on the root server, the only owner of the
route table.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from finch.app import Server
    from finch.routing.route import Route


def join_paths(base: str, path: str) -> str:
    """Join a group base path and a relative path with exactly one slash.

    An empty or ``"/"`` relative path returns *base* unchanged.
    """
    if path in ("", "/"):
        return base
    return base.rstrip("/") + "/" + path.lstrip("/")


class RouteManager(Protocol):
    """Registration surface shared by ``Server`` and ``RouteGroup``."""

    def group(self, base_path: str, *middlewares: Any) -> RouteGroup: ...
    def route(self, base_path: str, fn: Callable[[RouteGroup], Any]) -> None: ...
    def use(self, *middlewares: Any) -> None: ...
    def get(self, path: str, *handlers: Any) -> Route: ...
    def post(self, path: str, *handlers: Any) -> Route: ...
    def put(self, path: str, *handlers: Any) -> Route: ...
    def patch(self, path: str, *handlers: Any) -> Route: ...
    def delete(self, path: str, *handlers: Any) -> Route: ...


@dataclass(frozen=True, slots=True)
class RouteGroup:
    """An immutable path prefix plus middleware chain.

    ``middlewares`` holds the raw handler-like values; they are normalized
    together with the route's own handlers when a route is registered.
    """

    server: Server
    base_path: str = ""
    middlewares: tuple[Any, ...] = ()

    def full_path(self, path: str) -> str:
        return join_paths(self.base_path, path)

    def group(self, base_path: str, *middlewares: Any) -> RouteGroup:
        """Return a child group; this group is left unchanged."""
        return RouteGroup(
            server=self.server,
            base_path=self.full_path(base_path),
            middlewares=(*self.middlewares, *middlewares),
        )

    def route(self, base_path: str, fn: Callable[[RouteGroup], Any]) -> None:
        """Call *fn* with a child group at *base_path*."""
        fn(self.group(base_path))

    def use(self, *middlewares: Any) -> None:
        """Register global middleware on the root server."""
        self.server.use(*middlewares)

    def _register(self, method: str, path: str, handlers: tuple[Any, ...]) -> Route:
        chain = (*self.middlewares, *handlers) if handlers else ()
        return self.server.add_route(method, self.full_path(path), *chain)

    def get(self, path: str, *handlers: Any) -> Route:
        return self._register("GET", path, handlers)

    def post(self, path: str, *handlers: Any) -> Route:
        return self._register("POST", path, handlers)

    def put(self, path: str, *handlers: Any) -> Route:
        return self._register("PUT", path, handlers)

    def patch(self, path: str, *handlers: Any) -> Route:
        return self._register("PATCH", path, handlers)

    def delete(self, path: str, *handlers: Any) -> Route:
        return self._register("DELETE", path, handlers)

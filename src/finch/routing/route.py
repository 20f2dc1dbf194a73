"""Route, PathSegment and RouteMatch frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from finch.handlers import Handler

METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``/users``                    (is_param=False)
    Param:   ``/{id}`` or ``/:id``         (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    ``middlewares`` run in order before ``handler``; both are already
    normalized. Created by the server's registration call, never mutated.
    """

    method: str
    pattern: str
    handler: Handler
    middlewares: tuple[Handler, ...] = ()

    @property
    def chain(self) -> tuple[Handler, ...]:
        """Middleware followed by the terminal handler."""
        return (*self.middlewares, self.handler)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]

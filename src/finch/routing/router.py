"""Route table with trie-based path matching.

Routes are added during setup, as each registration call happens, so
conflicts surface from the call that caused them. The table freezes when
the server starts serving.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from finch.errors import ConfigurationError, MethodNotAllowed, NotFound
from finch.routing.pattern import parse_pattern
from finch.routing.route import Route, RouteMatch

logger = logging.getLogger("finch.routing")


class _TrieNode:
    """A node in the route trie. Mutable during setup only."""

    __slots__ = ("children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (one placeholder name per level)
        self.param_child: _ParamEdge | None = None
        # Routes ending at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A placeholder edge in the trie."""

    param_name: str
    node: _TrieNode
    # Pattern that introduced the edge, for conflict messages
    origin: str


class Router:
    """Route table with static-over-placeholder precedence.

    Usage::

        router = Router()
        router.add(Route("GET", "/users/:id", handler))
        router.compile()
        match = router.match("GET", "/users/42")
        match.path_params  # {"id": "42"}
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile().

        Raises ``ConfigurationError`` when the route duplicates an existing
        ``(method, pattern)`` pair or names a placeholder differently from
        a route already sharing the same position. The table is left
        untouched in that case.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_pattern(route.pattern)

        # Validate the whole path first so a failure leaves no partial nodes.
        node: _TrieNode | None = self._root
        for seg in segments:
            if node is None:
                break
            if seg.is_param:
                edge = node.param_child
                if edge is not None and edge.param_name != seg.param_name:
                    msg = (
                        f"Route {route.pattern!r} names placeholder {seg.param_name!r} where "
                        f"{edge.origin!r} already uses {edge.param_name!r}."
                    )
                    raise ConfigurationError(msg)
                node = edge.node if edge is not None else None
            else:
                node = node.children.get(seg.value)
        if node is not None and route.method in node.routes_by_method:
            existing = node.routes_by_method[route.method]
            msg = (
                f"Duplicate route {route.method} {route.pattern!r}: "
                f"already registered as {existing.pattern!r}."
            )
            raise ConfigurationError(msg)

        node = self._root
        for seg in segments:
            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        node=_TrieNode(),
                        origin=route.pattern,
                    )
                node = node.param_child.node
            else:
                if seg.value not in node.children:
                    node.children[seg.value] = _TrieNode()
                node = node.children[seg.value]

        node.routes_by_method[route.method] = route
        self._routes.append(route)
        logger.debug("registered %s %s", route.method, route.pattern)

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes in registration order."""
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method.

        ``HEAD`` falls back to the ``GET`` route for the same path.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, params = result

        if method in node.routes_by_method:
            return RouteMatch(route=node.routes_by_method[method], path_params=params)
        if method == "HEAD" and "GET" in node.routes_by_method:
            return RouteMatch(route=node.routes_by_method["GET"], path_params=params)

        allowed = set(node.routes_by_method)
        if "GET" in allowed:
            allowed.add("HEAD")
        raise MethodNotAllowed(frozenset(allowed))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[_TrieNode, dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.routes_by_method:
                return node, params
            return None

        part = parts[index]

        # 1. Static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Placeholder child
        if node.param_child is not None:
            edge = node.param_child
            new_params = {**params, edge.param_name: part}
            return self._match_node(edge.node, parts, index + 1, new_params)

        return None

"""Tests for finch.routing.router: trie-based route table."""

import pytest

from finch.errors import ConfigurationError, MethodNotAllowed, NotFound
from finch.handlers import Handler
from finch.http.request import Request
from finch.http.response import Response
from finch.routing.route import Route
from finch.routing.router import Router


async def _noop(req: Request, res: Response) -> None:
    pass


_HANDLER = Handler.wrap(_noop)


def _route(pattern: str, method: str = "GET") -> Route:
    return Route(method=method, pattern=pattern, handler=_HANDLER)


class TestRouterStaticRoutes:
    def test_root(self) -> None:
        r = Router()
        r.add(_route("/"))
        r.compile()

        match = r.match("GET", "/")
        assert match.path_params == {}

    def test_simple_path(self) -> None:
        r = Router()
        r.add(_route("/users"))

        match = r.match("GET", "/users")
        assert match.route.pattern == "/users"

    def test_trailing_slash_matches(self) -> None:
        r = Router()
        r.add(_route("/users"))

        assert r.match("GET", "/users/").route.pattern == "/users"

    def test_nested_path(self) -> None:
        r = Router()
        r.add(_route("/api/v2/users"))

        assert r.match("GET", "/api/v2/users").route.pattern == "/api/v2/users"
        with pytest.raises(NotFound):
            r.match("GET", "/api/v2")


class TestRouterParams:
    def test_colon_param(self) -> None:
        r = Router()
        r.add(_route("/users/:id"))

        assert r.match("GET", "/users/42").path_params == {"id": "42"}

    def test_brace_param(self) -> None:
        r = Router()
        r.add(_route("/users/{id}"))

        assert r.match("GET", "/users/42").path_params == {"id": "42"}

    def test_multiple_params(self) -> None:
        r = Router()
        r.add(_route("/users/:user_id/posts/{post_id}"))

        match = r.match("GET", "/users/1/posts/2")
        assert match.path_params == {"user_id": "1", "post_id": "2"}

    def test_static_over_param(self) -> None:
        r = Router()
        r.add(_route("/users/:id"))
        r.add(_route("/users/new"))

        assert r.match("GET", "/users/new").route.pattern == "/users/new"
        assert r.match("GET", "/users/7").route.pattern == "/users/:id"

    def test_param_does_not_span_segments(self) -> None:
        r = Router()
        r.add(_route("/files/:name"))

        with pytest.raises(NotFound):
            r.match("GET", "/files/a/b")

    def test_same_name_different_spelling_is_shared(self) -> None:
        r = Router()
        r.add(_route("/users/:id"))
        r.add(_route("/users/{id}/posts"))

        assert r.match("GET", "/users/3/posts").path_params == {"id": "3"}

    def test_conflicting_names(self) -> None:
        r = Router()
        r.add(_route("/users/:id"))

        with pytest.raises(ConfigurationError, match="already uses 'id'"):
            r.add(_route("/users/:name/posts"))
        assert len(r) == 1


class TestRouterMethods:
    def test_method_not_allowed(self) -> None:
        r = Router()
        r.add(_route("/users", "POST"))

        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("GET", "/users")
        assert dict(exc_info.value.headers) == {"Allow": "POST"}

    def test_allow_includes_head_for_get(self) -> None:
        r = Router()
        r.add(_route("/users", "GET"))
        r.add(_route("/users", "DELETE"))

        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("PUT", "/users")
        assert dict(exc_info.value.headers) == {"Allow": "DELETE, GET, HEAD"}

    def test_head_falls_back_to_get(self) -> None:
        r = Router()
        r.add(_route("/users", "GET"))

        assert r.match("HEAD", "/users").route.method == "GET"

    def test_duplicate(self) -> None:
        r = Router()
        r.add(_route("/users"))

        with pytest.raises(ConfigurationError, match="Duplicate route GET"):
            r.add(_route("/users/"))


class TestRouterLifecycle:
    def test_routes_in_order(self) -> None:
        r = Router()
        r.add(_route("/b"))
        r.add(_route("/a"))

        assert [route.pattern for route in r.routes] == ["/b", "/a"]
        assert len(r) == 2

    def test_add_after_compile(self) -> None:
        r = Router()
        r.compile()

        assert r.compiled
        with pytest.raises(RuntimeError):
            r.add(_route("/late"))

    def test_not_found_message(self) -> None:
        r = Router()
        with pytest.raises(NotFound) as exc_info:
            r.match("GET", "/nowhere")
        assert exc_info.value.status == 404
        assert "/nowhere" in exc_info.value.detail

"""Tests for finch.routing.pattern: parsing, compilation and parameter extraction."""

import pytest

from finch.errors import ConfigurationError
from finch.routing.pattern import (
    compile_pattern,
    extract_params,
    normalize_pattern,
    parse_pattern,
)


class TestParsePattern:
    def test_static(self) -> None:
        segments = parse_pattern("/api/v2/users")
        assert [s.value for s in segments] == ["api", "v2", "users"]
        assert not any(s.is_param for s in segments)

    def test_both_spellings(self) -> None:
        segments = parse_pattern("/users/:id/posts/{post_id}")
        assert [(s.is_param, s.param_name) for s in segments] == [
            (False, None),
            (True, "id"),
            (False, None),
            (True, "post_id"),
        ]

    def test_root(self) -> None:
        assert parse_pattern("/") == []

    def test_partial_braces_are_static(self) -> None:
        segments = parse_pattern("/files/v{version}")
        assert segments[1].is_param is False

    @pytest.mark.parametrize("pattern", ["/users/:", "/users/{}", "/users/:1st", "/users/{a-b}"])
    def test_invalid_names(self, pattern: str) -> None:
        with pytest.raises(ConfigurationError, match="Invalid placeholder"):
            parse_pattern(pattern)

    def test_repeated_name(self) -> None:
        with pytest.raises(ConfigurationError, match="appears twice"):
            parse_pattern("/a/:id/b/{id}")


class TestCompilePattern:
    def test_cached(self) -> None:
        assert compile_pattern("/users/:id") is compile_pattern("/users/:id")

    def test_static_parts_are_escaped(self) -> None:
        regex = compile_pattern("/v1.0/items")
        assert regex.match("/v1.0/items")
        assert not regex.match("/v1x0/items")

    def test_trailing_slash_tolerated(self) -> None:
        assert compile_pattern("/users").match("/users/")


class TestExtractParams:
    def test_values(self) -> None:
        params = extract_params("/account/:name/photos/{photo}", "/account/ann/photos/7")
        assert params == {"name": "ann", "photo": "7"}

    def test_decoded_spaces(self) -> None:
        assert extract_params("/account/:name", "/account/Ann Lee") == {"name": "Ann Lee"}

    def test_no_match(self) -> None:
        assert extract_params("/account/:name", "/other/ann") == {}

    def test_empty_segment_does_not_match(self) -> None:
        assert extract_params("/account/:name", "/account/") == {}


class TestNormalizePattern:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [("", "/"), ("users", "/users"), ("/users", "/users"), ("/users/", "/users/")],
    )
    def test_leading_slash(self, pattern: str, expected: str) -> None:
        assert normalize_pattern(pattern) == expected

"""Tests for finch.config: ServerConfig and port parsing."""

import dataclasses

import pytest

from finch.config import ServerConfig, parse_port


class TestServerConfig:
    def test_defaults(self) -> None:
        config = ServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.max_content_length == 16 * 1024 * 1024
        assert config.address == "127.0.0.1:8000"

    def test_frozen(self) -> None:
        config = ServerConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 1  # type: ignore[misc]

    def test_with_port_returns_copy(self) -> None:
        config = ServerConfig(debug=True)
        moved = config.with_port(":5050")
        assert moved.port == 5050
        assert moved.debug is True
        assert config.port == 8000


class TestParsePort:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(5050, 5050), ("5050", 5050), (":5050", 5050), (" 8080 ", 8080), ("0.0.0.0:80", 80), (0, 0)],
    )
    def test_accepted(self, value: int | str, expected: int) -> None:
        assert parse_port(value) == expected

    @pytest.mark.parametrize("value", ["", ":", "http", "-1", "80a", True])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(ValueError, match="invalid port"):
            parse_port(value)  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", [65536, -1, "70000"])
    def test_out_of_range(self, value: int | str) -> None:
        with pytest.raises(ValueError, match="out of range"):
            parse_port(value)

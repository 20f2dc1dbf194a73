"""Tests for finch.server.sender: Response to ASGI messages."""

from typing import Any

import pytest

from finch.http.response import Response
from finch.server.sender import send_response


async def _collect(response: Response, *, head: bool = False) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = []

    async def send(message: dict[str, Any]) -> None:
        messages.append(message)

    await send_response(response, send, head=head)
    return messages


@pytest.mark.anyio
class TestSendResponse:
    async def test_start_and_body(self) -> None:
        response = Response()
        response.status(201).send(b"hi")

        start, body = await _collect(response)

        assert start["type"] == "http.response.start"
        assert start["status"] == 201
        assert (b"content-type", b"text/plain; charset=utf-8") in start["headers"]
        assert (b"content-length", b"2") in start["headers"]
        assert body == {"type": "http.response.body", "body": b"hi"}

    async def test_header_names_lowercased(self) -> None:
        response = Response()
        response.set_header("X-Custom", "Value").send(b"")

        start, _ = await _collect(response)
        assert (b"x-custom", b"Value") in start["headers"]

    async def test_head_keeps_length_drops_body(self) -> None:
        response = Response()
        response.send(b"hello")

        start, body = await _collect(response, head=True)
        assert (b"content-length", b"5") in start["headers"]
        assert body["body"] == b""

    @pytest.mark.parametrize("status", [204, 304])
    async def test_no_body_statuses(self, status: int) -> None:
        response = Response()
        response.status(status).send(b"ignored")

        start, body = await _collect(response)
        assert body["body"] == b""
        assert not any(name == b"content-length" for name, _ in start["headers"])

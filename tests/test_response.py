"""Tests for finch.http.response: the buffered response writer."""

import pytest

from finch.http.response import Response, detect_content_type


class TestStatus:
    def test_default(self) -> None:
        assert Response().status_code == 200

    def test_chaining(self) -> None:
        response = Response()
        assert response.status(201) is response
        assert response.status_code == 201

    @pytest.mark.parametrize("status", [0, 99, 512, 1000])
    def test_invalid_status_falls_back(self, status: int) -> None:
        assert Response().status(status).status_code == 200


class TestSending:
    def test_send_bytes(self) -> None:
        response = Response()
        response.send(b"hello")
        assert response.body == b"hello"
        assert response.sent
        assert response.get_header("content-type") == "text/plain; charset=utf-8"

    def test_send_appends(self) -> None:
        response = Response()
        response.send("a")
        response.send_string("b")
        assert response.body == b"ab"

    def test_explicit_content_type_kept(self) -> None:
        response = Response()
        response.set_header("Content-Type", "text/csv")
        response.send(b"a,b")
        assert response.get_header("content-type") == "text/csv"

    def test_json(self) -> None:
        response = Response()
        response.status(201).json({"created": True})
        assert response.status_code == 201
        assert response.body == b'{"created":true}'
        assert response.get_header("content-type") == "application/json"

    def test_send_status(self) -> None:
        response = Response()
        response.send_status(204)
        assert response.status_code == 204
        assert response.body == b""
        assert response.sent

    def test_changes_after_send_ignored(self) -> None:
        response = Response()
        response.send(b"done")
        response.status(500).set_header("X-Late", "1").add_header("X-Late", "2")
        assert response.status_code == 200
        assert response.get_header("x-late") is None

    def test_add_header_keeps_all(self) -> None:
        response = Response()
        response.add_header("Set-Cookie", "a=1").add_header("Set-Cookie", "b=2")
        assert response.headers == (("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"))

    def test_reset(self) -> None:
        response = Response()
        response.status(201).set_header("X-One", "1").send(b"x")
        response.reset()
        assert (response.status_code, response.headers, response.body, response.sent) == (
            200,
            (),
            b"",
            False,
        )


class TestDetectContentType:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"\x89PNG\r\n\x1a\n....", "image/png"),
            (b"%PDF-1.7", "application/pdf"),
            (b"GIF89a", "image/gif"),
            (b"  <!DOCTYPE html><html>", "text/html; charset=utf-8"),
            (b'<?xml version="1.0"?><a/>', "text/xml; charset=utf-8"),
            (b"plain words", "text/plain; charset=utf-8"),
            ("héllo".encode(), "text/plain; charset=utf-8"),
            (b"\xff\xfe\x00\x01", "application/octet-stream"),
        ],
    )
    def test_detection(self, data: bytes, expected: str) -> None:
        assert detect_content_type(data) == expected

    def test_multibyte_cut_at_sniff_boundary(self) -> None:
        data = b"a" * 511 + "é".encode()
        assert detect_content_type(data) == "text/plain; charset=utf-8"

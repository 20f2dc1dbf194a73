"""Tests for finch.http.forms and the Context form accessors."""

import sys

import pytest

from finch.app import Server
from finch.context import Context
from finch.errors import ConfigurationError
from finch.http.forms import FormData, UploadFile, parse_form_data
from finch.testing import TestClient

BOUNDARY = "finch-boundary"
MULTIPART = f"multipart/form-data; boundary={BOUNDARY}"


def _multipart_body() -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="title"\r\n'
        "\r\n"
        "Quarterly\r\n"
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="report"; filename="q3.csv"\r\n'
        "Content-Type: text/csv\r\n"
        "\r\n"
        "a,b\n1,2\r\n"
        f"--{BOUNDARY}--\r\n"
    ).encode()


class TestParseFormData:
    def test_urlencoded(self) -> None:
        form = parse_form_data(b"name=Ann+Lee&tag=a&tag=b&empty=", "application/x-www-form-urlencoded")
        assert form["name"] == "Ann Lee"
        assert form.get_list("tag") == ["a", "b"]
        assert form["empty"] == ""
        assert form.files == {}

    def test_multipart_fields_and_files(self) -> None:
        form = parse_form_data(_multipart_body(), MULTIPART)

        assert dict(form) == {"title": "Quarterly"}
        upload = form.files["report"]
        assert upload.filename == "q3.csv"
        assert upload.content_type == "text/csv"
        assert upload.read() == b"a,b\n1,2"
        assert upload.size == 7

    def test_missing_boundary(self) -> None:
        with pytest.raises(ValueError, match="boundary"):
            parse_form_data(b"", "multipart/form-data")

    def test_unsupported_content_type(self) -> None:
        with pytest.raises(ValueError, match="Unsupported form content type"):
            parse_form_data(b"{}", "application/json")

    def test_multipart_without_parser_installed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "multipart.multipart", None)
        with pytest.raises(ConfigurationError, match=r"finch\[forms\]"):
            parse_form_data(_multipart_body(), MULTIPART)


class TestUploadFile:
    def test_save(self, tmp_path) -> None:
        upload = UploadFile(filename="a.txt", content_type="text/plain", size=2, _content=b"hi")
        target = tmp_path / "a.txt"
        upload.save(target)
        assert target.read_bytes() == b"hi"

    def test_repr(self) -> None:
        upload = UploadFile(filename="a.txt", content_type="text/plain", size=2, _content=b"hi")
        assert repr(upload) == "UploadFile('a.txt', 'text/plain', 2 bytes)"


class TestFormData:
    def test_mapping_surface(self) -> None:
        form = FormData({"a": ["1", "2"]})
        assert form["a"] == "1"
        assert form.get("missing") is None
        assert "a" in form
        assert len(form) == 1


def _upload_server() -> Server:
    server = Server()

    def receive_report(ctx: Context) -> None:
        report = ctx.form_file("report")
        if report is None:
            ctx.status(400).send_string("no report")
            return
        ctx.json(
            {
                "title": ctx.form_value("title"),
                "filename": report.filename,
                "content": report.read().decode(),
                "missing": ctx.form_file("other") is None,
            }
        )

    server.post("/reports", receive_report)
    return server


@pytest.mark.anyio
class TestFormFile:
    async def test_uploaded_file(self) -> None:
        async with TestClient(_upload_server()) as client:
            response = await client.post(
                "/reports",
                headers={"Content-Type": MULTIPART},
                body=_multipart_body(),
            )

        assert response.status == 200
        assert response.json() == {
            "title": "Quarterly",
            "filename": "q3.csv",
            "content": "a,b\n1,2",
            "missing": True,
        }

    async def test_urlencoded_body_has_no_files(self) -> None:
        async with TestClient(_upload_server()) as client:
            response = await client.post(
                "/reports",
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                body="title=Quarterly",
            )

        assert response.status == 400
        assert response.text == "no report"

"""Form bodies: URL-encoded and multipart.

URL-encoded forms use stdlib ``urllib.parse``. Multipart parsing needs
``python-multipart``, an optional dependency (``pip install finch[forms]``)
imported only when a multipart body is actually parsed.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

from finch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class UploadFile:
    """A file uploaded in a multipart form, held in memory."""

    filename: str
    content_type: str
    size: int
    _content: bytes

    def read(self) -> bytes:
        return self._content

    def save(self, path: str | Path) -> None:
        """Write the file content to *path*. Parent directories must exist."""
        Path(path).write_bytes(self._content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(Mapping[str, str]):
    """Immutable parsed form: first value per field, plus uploaded files.

    ``get_list`` returns every value of a repeated field; ``files`` maps
    field names to ``UploadFile``.
    """

    __slots__ = ("_data", "_files")

    def __init__(
        self,
        data: dict[str, list[str]],
        files: dict[str, UploadFile] | None = None,
    ) -> None:
        self._data = data
        self._files = files or {}

    @property
    def files(self) -> Mapping[str, UploadFile]:
        return self._files

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get_list(self, key: str) -> list[str]:
        return list(self._data.get(key, []))

    def __repr__(self) -> str:
        return f"FormData(fields={list(self._data)!r}, files={list(self._files)!r})"


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form *body* according to its *content_type*.

    Raises ``ValueError`` for a non-form content type or a multipart type
    without a boundary, and ``ConfigurationError`` when a multipart body
    arrives but ``python-multipart`` is not installed.
    """
    media_type = content_type.lower().split(";", 1)[0].strip()

    if media_type == "application/x-www-form-urlencoded":
        return FormData(parse_qs(body.decode("utf-8"), keep_blank_values=True))

    if media_type == "multipart/form-data":
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    try:
        from multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install 'finch[forms]'"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}
    files: dict[str, UploadFile] = {}

    # State of the part being parsed
    headers: dict[str, str] = {}
    content = bytearray()
    field_name: str | None = None
    filename: str | None = None
    pending_header = ""

    def on_part_begin() -> None:
        nonlocal headers, content, field_name, filename
        headers = {}
        content = bytearray()
        field_name = None
        filename = None

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        content.extend(chunk[start:end])

    def on_part_end() -> None:
        if field_name is None:
            return
        if filename is not None:
            payload = bytes(content)
            files[field_name] = UploadFile(
                filename=filename,
                content_type=headers.get("content-type", "application/octet-stream"),
                size=len(payload),
                _content=payload,
            )
        else:
            data.setdefault(field_name, []).append(content.decode("utf-8", errors="replace"))

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        nonlocal pending_header
        pending_header = chunk[start:end].decode("latin-1").lower()

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        nonlocal field_name, filename
        value = chunk[start:end].decode("latin-1")
        headers[pending_header] = value
        if pending_header == "content-disposition":
            _, params = parse_options_header(value.encode("latin-1"))
            if (name := params.get(b"name")) is not None:
                field_name = name.decode("utf-8")
            if (fname := params.get(b"filename")) is not None:
                filename = fname.decode("utf-8")

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return FormData(data, files)

"""Immutable query string parameters."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Parsed query string.

    ``__getitem__`` returns the first value for a key, ``get_list`` all of
    them. Blank values are kept (``?flag=`` maps ``flag`` to ``""``).
    """

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        raw = query_string.encode("latin-1") if isinstance(query_string, str) else query_string
        self._raw = raw
        self._data: dict[str, list[str]] = parse_qs(raw.decode("latin-1"), keep_blank_values=True)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    @property
    def raw(self) -> bytes:
        return self._raw

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def first_values(self) -> dict[str, str]:
        """Collapse to one value per key (the first), as used by binding."""
        return {key: values[0] for key, values in self._data.items() if values}

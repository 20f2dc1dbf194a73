"""JSON payload helpers.

``JSON`` is a plain mapping that knows how to turn itself into request or
response bodies::

    body = JSON({"name": "Ann Lee", "age": 23}).buffer()

``decode_json`` goes the other way and fills a destination from raw bytes,
failing with ``DecodeError`` when the bytes are malformed or do not fit.
"""

from __future__ import annotations

import dataclasses
import io
import json as json_module
import types
import typing
from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, Union

from finch.errors import DecodeError

T = TypeVar("T")


class SupportsBytes(Protocol):
    """Anything that can render itself as a byte string."""

    def bytes(self) -> bytes: ...


class JSON(dict[str, Any]):
    """A JSON object payload."""

    def bytes(self) -> bytes:
        """Compact UTF-8 encoding of the payload."""
        return encode_json(self)

    def buffer(self) -> io.BytesIO:
        """The encoded payload in a fresh buffer positioned at the start."""
        return to_buffer(self)


def to_buffer(source: SupportsBytes) -> io.BytesIO:
    """Copy the bytes produced by *source* into a readable buffer."""
    return io.BytesIO(source.bytes())


def _default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, bytes):
        return value.decode("utf-8")
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def encode_json(data: Any) -> bytes:
    """Encode *data* compactly. Dataclass instances encode as objects."""
    return json_module.dumps(
        data, separators=(",", ":"), ensure_ascii=False, default=_default
    ).encode("utf-8")


# -- Decoding --


def decode_json(data: bytes | str, dest: Any) -> Any:
    """Decode *data* into *dest* and return the populated destination.

    *dest* may be:

    - a ``dict`` — updated with the decoded object;
    - a ``list`` — extended with the decoded array;
    - a dataclass instance — matching fields are assigned (key from
      ``field(metadata={"json": ...})`` or the field name);
    - a dataclass type — instantiated from the decoded object.

    Raises ``DecodeError`` if *data* is not valid JSON or its shape does not
    match *dest*.
    """
    try:
        decoded = json_module.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        msg = f"invalid JSON: {exc}"
        raise DecodeError(msg) from exc

    if isinstance(dest, type):
        return _build(dest, decoded, path="$")

    if isinstance(dest, dict):
        if not isinstance(decoded, dict):
            raise DecodeError(f"cannot decode JSON {_kind(decoded)} into dict")
        dest.update(decoded)
        return dest

    if isinstance(dest, list):
        if not isinstance(decoded, list):
            raise DecodeError(f"cannot decode JSON {_kind(decoded)} into list")
        dest.extend(decoded)
        return dest

    if dataclasses.is_dataclass(dest):
        if not isinstance(decoded, dict):
            raise DecodeError(f"cannot decode JSON {_kind(decoded)} into {type(dest).__name__}")
        _populate(dest, decoded, path="$")
        return dest

    msg = f"unsupported JSON destination: {type(dest).__name__}"
    raise DecodeError(msg)


def _json_key(field: dataclasses.Field[Any]) -> str:
    return field.metadata.get("json", field.name)


def _populate(obj: Any, data: Mapping[str, Any], path: str) -> None:
    hints = typing.get_type_hints(type(obj))
    for field in dataclasses.fields(obj):
        key = _json_key(field)
        if key not in data:
            continue
        value = _coerce(data[key], hints.get(field.name, Any), f"{path}.{key}")
        object.__setattr__(obj, field.name, value)


def _build(cls: type[T], data: Any, path: str) -> T:
    if not dataclasses.is_dataclass(cls):
        return _coerce(data, cls, path)
    if not isinstance(data, dict):
        raise DecodeError(f"{path}: expected object for {cls.__name__}, got {_kind(data)}")
    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        key = _json_key(field)
        if key in data:
            kwargs[field.name] = _coerce(data[key], hints.get(field.name, Any), f"{path}.{key}")
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise DecodeError(f"{path}: cannot build {cls.__name__}: {exc}") from exc


def _coerce(value: Any, annotation: Any, path: str) -> Any:
    """Check *value* against *annotation*, converting nested dataclasses."""
    if annotation is Any or annotation is object:
        return value

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is Union or origin is types.UnionType:
        if value is None and type(None) in args:
            return None
        errors: list[str] = []
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _coerce(value, arg, path)
            except DecodeError as exc:
                errors.append(str(exc))
        raise DecodeError(errors[0] if errors else f"{path}: no matching type")

    if origin is typing.Annotated:
        return _coerce(value, args[0], path)

    if origin in (list, tuple, set, frozenset):
        if not isinstance(value, list):
            raise DecodeError(f"{path}: expected array, got {_kind(value)}")
        item_type = args[0] if args else Any
        items = [_coerce(item, item_type, f"{path}[{i}]") for i, item in enumerate(value)]
        return items if origin is list else origin(items)

    if origin is dict:
        if not isinstance(value, dict):
            raise DecodeError(f"{path}: expected object, got {_kind(value)}")
        value_type = args[1] if len(args) == 2 else Any
        return {k: _coerce(v, value_type, f"{path}.{k}") for k, v in value.items()}

    if annotation is bool:
        if not isinstance(value, bool):
            raise DecodeError(f"{path}: expected boolean, got {_kind(value)}")
        return value

    if annotation is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"{path}: expected integer, got {_kind(value)}")
        return value

    if annotation is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodeError(f"{path}: expected number, got {_kind(value)}")
        return float(value)

    if annotation is str:
        if not isinstance(value, str):
            raise DecodeError(f"{path}: expected string, got {_kind(value)}")
        return value

    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return _build(annotation, value, path)

    if annotation in (list, dict):
        if not isinstance(value, annotation):
            raise DecodeError(f"{path}: expected {_kind(annotation())}, got {_kind(value)}")
        return value

    return value


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__

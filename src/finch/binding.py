"""Typed population of destination objects from string values.

Used by ``Context`` to bind path parameters, query strings and headers::

    @dataclass
    class AccountPath:
        name: str = field(default="", metadata={"param": "name"})
        page: int = 1

    dest = AccountPath()
    ctx.bind_params(dest)

For each field the lookup key is the tag stored in the field metadata
(``"param"``, ``"query"`` or ``"header"``), falling back to the field
name. Plain annotated classes carry tags in ``Annotated`` metadata::

    class Tracing:
        request_id: Annotated[str, {"header": "X-Request-Id"}] = ""

Fields that cannot be set (read-only properties, names missing from
``__slots__``, frozen dataclasses) are skipped. Fields with no value are
left untouched. Values are converted to the field's annotated type:
``str``, ``int``, ``float``, ``bool`` or an optional of one of those.

The field table for a ``(type, tag)`` pair is built once and cached, so
binding never re-inspects the class per request.
"""

from __future__ import annotations

import dataclasses
import re
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, ClassVar, Union

from finch.errors import BindError, UnsupportedFieldType

_INT = re.compile(r"[+-]?\d+")
_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _to_int(value: str) -> int:
    if not _INT.fullmatch(value):
        raise ValueError(value)
    return int(value)


def _to_float(value: str) -> float:
    if "_" in value or value != value.strip():
        raise ValueError(value)
    return float(value)


def _to_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(value)


CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: str,
    int: _to_int,
    float: _to_float,
    bool: _to_bool,
}


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """How one destination field is bound.

    ``converter`` is None when the field type is unsupported; the error is
    raised only if a value actually arrives for that field.
    """

    attr: str
    key: str
    kind: str
    converter: Callable[[str], Any] | None
    settable: bool = True


def _unwrap_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _unwrap_optional(typing.get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return _unwrap_optional(args[0])
    return annotation


def _annotated_key(annotation: Any, tag: str, default: str) -> str:
    """Return the *tag* key from ``Annotated[..., {tag: key}]`` metadata."""
    if typing.get_origin(annotation) is typing.Annotated:
        for extra in annotation.__metadata__:
            if isinstance(extra, Mapping) and tag in extra:
                return extra[tag]
    return default


def _read_only(cls: type, attr: str) -> bool:
    prop = getattr(cls, attr, None)
    return isinstance(prop, property) and prop.fset is None


def _kind_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def _spec(attr: str, key: str, annotation: Any, settable: bool) -> FieldSpec:
    target = _unwrap_optional(annotation)
    converter = CONVERTERS.get(target) if isinstance(target, type) else None
    return FieldSpec(
        attr=attr,
        key=key,
        kind=_kind_name(target),
        converter=converter,
        settable=settable and not attr.startswith("_"),
    )


@lru_cache(maxsize=256)
def field_table(cls: type, tag: str) -> tuple[FieldSpec, ...]:
    """Build (once) the binding table for *cls* under metadata *tag*.

    Dataclasses use their declared fields; other classes use their type
    annotations, with tags read from ``Annotated`` metadata. ``ClassVar``
    annotations are ignored; fields of frozen dataclasses and read-only
    properties are marked unsettable.
    """
    hints = typing.get_type_hints(cls, include_extras=True)

    if dataclasses.is_dataclass(cls):
        frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
        return tuple(
            _spec(
                f.name,
                f.metadata.get(tag) or _annotated_key(hints.get(f.name), tag, f.name),
                hints.get(f.name, f.type),
                not frozen,
            )
            for f in dataclasses.fields(cls)
        )

    specs: list[FieldSpec] = []
    for attr, annotation in hints.items():
        if typing.get_origin(annotation) is ClassVar or annotation is ClassVar:
            continue
        key = _annotated_key(annotation, tag, attr)
        specs.append(_spec(attr, key, annotation, not _read_only(cls, attr)))
    return tuple(specs)


def bind_values(
    dest: Any,
    values: Mapping[str, str],
    tag: str,
    *,
    case_insensitive: bool = False,
) -> Any:
    """Populate *dest* in place from *values* and return it.

    Raises ``BindError`` when a value cannot be converted and
    ``UnsupportedFieldType`` when a value targets a field of a type the
    binder does not handle.
    """
    if case_insensitive:
        values = {k.lower(): v for k, v in values.items()}

    for spec in field_table(type(dest), tag):
        if not spec.settable:
            continue
        key = spec.key.lower() if case_insensitive else spec.key
        if key not in values:
            continue
        raw = values[key]
        if spec.converter is None:
            raise UnsupportedFieldType(spec.kind, spec.attr)
        try:
            converted = spec.converter(raw)
        except ValueError:
            raise BindError(raw, spec.kind, spec.attr) from None
        try:
            setattr(dest, spec.attr, converted)
        except AttributeError:
            continue
    return dest

"""Route pattern parsing and compilation.

Patterns accept two placeholder spellings, which may be mixed::

    /account/:name
    /account/{name}/photos/:photo_id

A placeholder always spans a whole segment and matches one non-empty
segment of the request path. Everything else matches literally.
"""

from __future__ import annotations

import re
from functools import lru_cache

from finch.errors import ConfigurationError
from finch.routing.route import PathSegment

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _placeholder_name(part: str, pattern: str) -> str | None:
    """Return the placeholder name in *part*, or None for a static segment."""
    if part.startswith("{") and part.endswith("}"):
        name = part[1:-1]
    elif part.startswith(":"):
        name = part[1:]
    else:
        return None
    if not _NAME.fullmatch(name):
        msg = f"Invalid placeholder {part!r} in route pattern {pattern!r}: names must be identifiers."
        raise ConfigurationError(msg)
    return name


def parse_pattern(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment(":id", is_param=True, ...)]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]

    Raises ``ConfigurationError`` for malformed or repeated placeholder names.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in pattern.strip("/").split("/"):
        if not part:
            continue
        name = _placeholder_name(part, pattern)
        if name is None:
            segments.append(PathSegment(value=part))
            continue
        if name in seen:
            msg = f"Placeholder {name!r} appears twice in route pattern {pattern!r}."
            raise ConfigurationError(msg)
        seen.add(name)
        segments.append(PathSegment(value=part, is_param=True, param_name=name))
    return segments


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate *pattern* into an anchored regex with one named group per placeholder.

    A single trailing slash on the request path is tolerated.
    """
    parts: list[str] = []
    for segment in parse_pattern(pattern):
        if segment.is_param:
            parts.append(f"/(?P<{segment.param_name}>[^/]+)")
        else:
            parts.append("/" + re.escape(segment.value))
    return re.compile("^" + "".join(parts) + "/?$")


def extract_params(pattern: str, path: str) -> dict[str, str]:
    """Return the placeholder values *path* supplies for *pattern*.

    Empty when the path does not match the pattern.
    """
    match = compile_pattern(pattern).match(path)
    if match is None:
        return {}
    return match.groupdict()


def normalize_pattern(pattern: str) -> str:
    """Ensure a registered pattern starts with ``/`` (``""`` becomes ``"/"``)."""
    if not pattern.startswith("/"):
        pattern = "/" + pattern
    return pattern

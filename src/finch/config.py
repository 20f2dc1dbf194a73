"""Server configuration.

ServerConfig is a frozen dataclass. The CLI and Server.listen() derive
adjusted copies with ``with_port`` and ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have defaults. Override what you need::

        config = ServerConfig(port=5050, debug=True)
    """

    # Bind address
    host: str = "127.0.0.1"
    port: int = 8000

    # Development mode (single worker, auto-reload)
    debug: bool = False
    reload_dirs: tuple[str, ...] = ()

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB, larger bodies get 413

    # Production
    workers: int = 0  # 0 = auto-detect from CPU count
    log_level: str = "info"

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def with_port(self, port: int | str) -> ServerConfig:
        """Return a copy bound to *port* (``5050``, ``"5050"`` or ``":5050"``)."""
        return replace(self, port=parse_port(port))


def parse_port(port: int | str) -> int:
    """Normalize a port given as an int, a digit string or ``":NNNN"``."""
    if isinstance(port, bool):
        msg = f"invalid port: {port!r}"
        raise ValueError(msg)
    if isinstance(port, int):
        value = port
    else:
        text = port.strip().rpartition(":")[2]
        if not text.isdigit():
            msg = f"invalid port: {port!r}"
            raise ValueError(msg)
        value = int(text)
    if not 0 <= value <= 65535:
        msg = f"port out of range: {value}"
        raise ValueError(msg)
    return value

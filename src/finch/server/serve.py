"""Blocking server entry point.

Starts a pounce ASGI server with the live finch Server object. pounce is an
optional dependency (``pip install finch[serve]``) and is imported only
when serving starts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from finch.errors import ConfigurationError

if TYPE_CHECKING:
    from finch._internal.asgi import ASGIApp
    from finch.config import ServerConfig

logger = logging.getLogger("finch.server")


def run_server(app: ASGIApp, config: ServerConfig, *, app_path: str | None = None) -> None:
    """Serve *app* on ``config.host:config.port`` until interrupted.

    Args:
        app: ASGI callable (finch Server instance).
        config: Bind address, worker count, reload and log settings.
        app_path: Optional ``"module:attribute"`` import string, used by
            pounce to reimport the app on reload.
    """
    try:
        from pounce.config import ServerConfig as PounceConfig
        from pounce.server import Server as PounceServer
    except ImportError as exc:
        msg = "Serving requires pounce. Install it with: pip install 'finch[serve]'"
        raise ConfigurationError(msg) from exc

    pounce_config = PounceConfig(
        host=config.host,
        port=config.port,
        workers=1 if config.debug else config.workers,
        reload=config.debug,
        reload_dirs=config.reload_dirs,
        log_level=config.log_level,
    )
    logger.info("listening on http://%s", config.address)
    PounceServer(pounce_config, app, app_path=app_path).run()

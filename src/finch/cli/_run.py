"""``finch run``: serve a finch Server with pounce."""

import argparse
import dataclasses
import sys

from finch.cli._resolve import resolve_server
from finch.errors import ConfigurationError
from finch.server.serve import run_server


def run(args: argparse.Namespace) -> None:
    """Resolve ``args.server`` and serve it; CLI flags override its config."""
    try:
        server = resolve_server(args.server)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    config = server.config
    try:
        if args.port is not None:
            config = config.with_port(args.port)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    if args.host:
        config = dataclasses.replace(config, host=args.host)
    if args.debug:
        config = dataclasses.replace(config, debug=True)

    server._ensure_frozen()
    try:
        run_server(server, config, app_path=args.server)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

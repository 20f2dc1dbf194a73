"""``finch routes``: list registered routes."""

import argparse
import sys

from finch.app import Server
from finch.cli._resolve import resolve_server


def format_routes(server: Server) -> list[str]:
    """Table lines of METHOD, PATH and the handler chain."""
    rows: list[tuple[str, str, str]] = []
    for route in server.routes:
        chain = " -> ".join(h.name for h in (*server.middleware, *route.chain))
        rows.append((route.method, route.pattern, chain))

    if not rows:
        return []

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    lines = [fmt.format("METHOD", "PATH", "HANDLER")]
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    lines.append("-" * min(sep_len, 80))
    lines.extend(fmt.format(*row) for row in rows)
    return lines


def run_routes(args: argparse.Namespace) -> None:
    """Print the route table of the server named by ``args.server``."""
    try:
        server = resolve_server(args.server)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    lines = format_routes(server)
    if not lines:
        print("No routes registered.")
        return
    for line in lines:
        print(line)

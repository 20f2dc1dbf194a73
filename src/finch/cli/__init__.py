"""Finch CLI: route listing and serving.

Entry point registered as ``finch`` in ``pyproject.toml``::

    [project.scripts]
    finch = "finch.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``finch`` command."""
    parser = argparse.ArgumentParser(
        prog="finch",
        description="Finch: routing, middleware and an HTTP client in one small toolkit.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- finch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("server", help="Import string (e.g. myapp:server)")

    # -- finch run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument("server", help="Import string (e.g. myapp:server)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", default=None, help="Bind port (5050 or :5050)")
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Single worker with auto-reload",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from finch.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from finch.cli._run import run

        run(args)

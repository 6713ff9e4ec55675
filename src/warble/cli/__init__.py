"""Warble CLI: route listing, resolution tracing, and route-set checks.

Entry point registered as ``warble`` in ``pyproject.toml``::

    [project.scripts]
    warble = "warble.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``warble`` command."""
    parser = argparse.ArgumentParser(
        prog="warble",
        description="Warble: route command lines to handlers.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log compiler and resolver decisions to stderr",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- warble check ------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate the route set")
    check_parser.add_argument("app", help="Import string (e.g. mycli:app)")

    # -- warble routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List compiled routes")
    routes_parser.add_argument("app", help="Import string (e.g. mycli:app)")

    # -- warble resolve ----------------------------------------------------
    resolve_parser = subparsers.add_parser(
        "resolve", help="Show which route an argument vector selects, without running it"
    )
    resolve_parser.add_argument("app", help="Import string (e.g. mycli:app)")
    resolve_parser.add_argument("argv", nargs=argparse.REMAINDER, help="Arguments to resolve")

    # -- warble run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Run the app with the given arguments")
    run_parser.add_argument("app", help="Import string (e.g. mycli:app)")
    run_parser.add_argument("argv", nargs=argparse.REMAINDER, help="Arguments for the app")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check":
        from warble.cli._check import run_check

        run_check(args)
    elif args.command == "routes":
        from warble.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from warble.cli._match import run_resolve

        run_resolve(args)
    elif args.command == "run":
        from warble.cli._match import run_app

        run_app(args)

"""``warble check``: route-set validation command.

Exits with code 1 if the validator reports errors.
"""

import argparse

from warble.cli._resolve import load_app


def run_check(args: argparse.Namespace) -> None:
    """Validate the route set of a warble app.

    Delegates to ``App.check()``, which prints the results and raises
    ``SystemExit(1)`` on failure.
    """
    app = load_app(args.app)
    app.check()

"""``warble resolve`` and ``warble run``: dispatch an argument vector.

``resolve`` reports the selected route and its raw values without
calling the handler. ``run`` is ``App.run`` from the command line.
"""

import argparse

from warble.cli._resolve import load_app
from warble.routing.route import NoMatch


def run_resolve(args: argparse.Namespace) -> None:
    """Print the route selected for ``args.argv``. Exits 1 on no match."""
    app = load_app(args.app)
    result = app.resolve(args.argv)
    if isinstance(result, NoMatch):
        line = result.message
        if result.args:
            line = f"{line}: {' '.join(result.args)}"
        print(line)
        raise SystemExit(app.config.no_match_exit_code)

    print(f"Route:       {result.route.pattern}")
    print(f"Specificity: {result.route.specificity}")
    print(f"Defaults:    {result.defaults_used}")
    for name, value in result.values.items():
        print(f"  {name} = {value!r}")


def run_app(args: argparse.Namespace) -> None:
    """Run the app and exit with its exit code."""
    app = load_app(args.app)
    raise SystemExit(app.run(args.argv))

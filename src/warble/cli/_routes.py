"""``warble routes``: list compiled routes.

Prints routes in registration order with specificity and handler name.
"""

import argparse

from warble.cli._resolve import load_app


def run_routes(args: argparse.Namespace) -> None:
    """List the compiled routes of a warble app."""
    app = load_app(args.app)
    routes = app.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        handler_name = getattr(route.handler, "__name__", str(route.handler))
        if route.description:
            handler_name = f"{handler_name}  # {route.description}"
        rows.append((route.pattern, str(route.specificity), handler_name))

    max_pattern = max(max(len(r[0]) for r in rows), 7)  # "PATTERN" header
    max_score = max(max(len(r[1]) for r in rows), 11)  # "SPECIFICITY" header

    fmt = f"{{:<{max_pattern}}}  {{:>{max_score}}}  {{}}"
    print(fmt.format("PATTERN", "SPECIFICITY", "HANDLER"))
    sep_len = max_pattern + max_score + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for pattern, score, handler_name in rows:
        print(fmt.format(pattern, score, handler_name))

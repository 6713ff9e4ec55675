"""Locate the user's App from a ``module[:attribute]`` string.

Every ``warble`` subcommand takes one. ``mycli`` means ``mycli:app``.
"""

import importlib
import logging
import sys
from typing import NoReturn

from warble.app import App
from warble.errors import ConfigurationError

logger = logging.getLogger("warble.cli")

DEFAULT_ATTRIBUTE = "app"

_MISSING = object()


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(1)


def load_app(import_string: str) -> App:
    """Import, build and freeze the App named by *import_string*.

    The attribute may be an ``App`` or a zero-argument factory that
    returns one. Any failure prints ``Error: ...`` to stderr and exits
    with status 1.
    """
    module_name, _, attribute = import_string.partition(":")
    attribute = attribute or DEFAULT_ATTRIBUTE

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        _fail(f"cannot import {module_name!r}: {exc}")

    target = getattr(module, attribute, _MISSING)
    if target is _MISSING:
        _fail(f"module {module_name!r} has no attribute {attribute!r}")

    match target:
        case App():
            app = target
        case _ if callable(target):
            logger.debug("Building app from factory %s", import_string)
            try:
                app = target()
            except Exception as exc:
                _fail(f"factory {import_string!r} raised {type(exc).__name__}: {exc}")
            if not isinstance(app, App):
                _fail(f"factory {import_string!r} returned {type(app).__name__}, not a warble.App")
        case _:
            _fail(f"{import_string!r} is a {type(target).__name__}, not a warble.App")

    try:
        app._ensure_frozen()
    except ConfigurationError as exc:
        _fail(str(exc))
    return app

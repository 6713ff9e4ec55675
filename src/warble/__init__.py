"""Warble: route command lines to handlers the way a web router maps URLs.

Literals, typed positional parameters, optional and catch-all
parameters, and options that may appear in any order.

Basic usage::

    from warble import App

    app = App()

    @app.route("deploy {env} --force?")
    def deploy(env: str, force: bool) -> None:
        print(f"Deploying to {env} (force={force})")

    raise SystemExit(app.run())
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ArgumentConversionError",
    "ConfigurationError",
    "ConverterRegistry",
    "NoMatch",
    "PatternError",
    "RouteGroup",
    "RouteMatch",
    "WarbleError",
    "compile_pattern",
    "resolve",
    "validate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warble`` fast while providing a clean top-level API.
    """
    if name in ("App", "RouteGroup"):
        from warble import app as _app

        return getattr(_app, name)

    if name == "AppConfig":
        from warble.config import AppConfig

        return AppConfig

    if name == "ConverterRegistry":
        from warble.converters import ConverterRegistry

        return ConverterRegistry

    if name in ("NoMatch", "RouteMatch"):
        from warble.routing import route as _route

        return getattr(_route, name)

    if name == "compile_pattern":
        from warble.routing.compiler import compile_pattern

        return compile_pattern

    if name == "resolve":
        from warble.routing.resolver import resolve

        return resolve

    if name == "validate":
        from warble.routing.validator import validate

        return validate

    if name in ("ArgumentConversionError", "ConfigurationError", "PatternError", "WarbleError"):
        from warble import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""Warble application class.

Mutable during setup (route registration, converters).
Frozen when routes are first resolved, run, checked, or listed.
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from warble._internal.invoke import exit_code, invoke
from warble._internal.types import Handler
from warble.binding import bind_arguments, check_handler_signature
from warble.checks import check_routes, suggest_commands
from warble.config import AppConfig
from warble.converters import ConverterInfo, ConverterRegistry
from warble.errors import ArgumentConversionError, ConfigurationError
from warble.routing.route import CompiledRoute, NoMatch, Resolution
from warble.routing.table import RouteTable, compile_routes
from warble.routing.validator import Diagnostic, Severity, validate

logger = logging.getLogger("warble.app")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    pattern: str
    handler: Handler
    group_prefix: str | None
    description: str | None


class RouteGroup:
    """Routes sharing a command prefix.

    Usage::

        git = app.group("git")

        @git.route("commit --message,-m {msg}")
        def commit(msg: str) -> None: ...

        remote = git.group("remote")   # "git remote ..."
    """

    __slots__ = ("_app", "prefix")

    def __init__(self, app: App, prefix: str) -> None:
        if not prefix.strip():
            msg = "Route group prefix must not be empty"
            raise ValueError(msg)
        self._app = app
        self.prefix = " ".join(prefix.split())

    def route(
        self, pattern: str, *, description: str | None = None
    ) -> Callable[[Handler], Handler]:
        """Register a handler under this group's prefix via decorator."""

        def decorator(func: Handler) -> Handler:
            self.add_route(pattern, func, description=description)
            return func

        return decorator

    def add_route(self, pattern: str, handler: Handler, *, description: str | None = None) -> None:
        self._app._register(pattern, handler, group_prefix=self.prefix, description=description)

    def group(self, prefix: str) -> RouteGroup:
        return RouteGroup(self._app, f"{self.prefix} {prefix}")


class App:
    """The warble application.

    Mutable during setup (route registration, converters).
    Frozen on first ``resolve()``, ``run()``, ``check()`` or ``routes``
    access: every pattern is compiled, every problem reported at once.

    Thread safety:
        Setup is single-threaded (decorators at import time). The freeze
        transition uses a Lock + double-check so exactly one thread
        compiles the table. After that, resolution only reads the
        immutable table and may run from any number of threads.
    """

    __slots__ = (
        "_converters",
        "_diagnostics",
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        # Compiled state (populated by _freeze)
        "_table",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        converters: ConverterRegistry | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._converters: ConverterRegistry = converters or ConverterRegistry()
        self._pending_routes: list[_PendingRoute] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._table: RouteTable | None = None
        self._diagnostics: tuple[Diagnostic, ...] = ()

    # -- Route registration --

    def route(
        self, pattern: str, *, description: str | None = None
    ) -> Callable[[Handler], Handler]:
        """Register a command handler via decorator.

        Args:
            pattern: Route pattern, e.g. ``"deploy {env} --force?"``.
            description: Optional one-line description for listings.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(pattern, func, description=description)
            return func

        return decorator

    def add_route(self, pattern: str, handler: Handler, *, description: str | None = None) -> None:
        """Register *handler* for *pattern* without a decorator."""
        self._register(pattern, handler, group_prefix=None, description=description)

    def group(self, prefix: str) -> RouteGroup:
        """Start a group of routes sharing *prefix*."""
        return RouteGroup(self, prefix)

    def _register(
        self,
        pattern: str,
        handler: Handler,
        *,
        group_prefix: str | None,
        description: str | None,
    ) -> None:
        self._check_not_frozen()
        if not callable(handler):
            msg = f"Handler for route {pattern!r} is not callable: {handler!r}"
            raise TypeError(msg)
        self._pending_routes.append(_PendingRoute(pattern, handler, group_prefix, description))

    # -- Converters --

    @property
    def converters(self) -> ConverterRegistry:
        return self._converters

    def register_enum(self, enum_cls: type[Enum], name: str | None = None) -> ConverterInfo:
        """Make *enum_cls* usable as a type constraint (``{color:Color}``)."""
        self._check_not_frozen()
        return self._converters.register_enum(enum_cls, name)

    # -- Compiled state --

    @property
    def routes(self) -> tuple[CompiledRoute, ...]:
        self._ensure_frozen()
        assert self._table is not None
        return self._table.routes

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Validator diagnostics recorded at freeze."""
        self._ensure_frozen()
        return self._diagnostics

    # -- Running --

    def resolve(self, argv: Sequence[str]) -> Resolution:
        """Pick the route for *argv* without running it."""
        self._ensure_frozen()
        assert self._table is not None
        return self._table.resolve(argv)

    def run(self, argv: Sequence[str] | None = None) -> int:
        """Resolve, bind, and invoke. Returns the process exit code.

        *argv* defaults to ``sys.argv[1:]``. A handler returning an ``int``
        sets the exit code; anything else means 0.

        Usage::

            if __name__ == "__main__":
                raise SystemExit(app.run())
        """
        args = list(sys.argv[1:] if argv is None else argv)
        result = self.resolve(args)

        if isinstance(result, NoMatch):
            self._report_no_match(result)
            return self.config.no_match_exit_code
        route = result.route

        try:
            kwargs = bind_arguments(route.handler, result, self._converters)
        except ArgumentConversionError as exc:
            logger.debug("Conversion failed for %r: %s", route.pattern, exc)
            print(f"Error: {exc}", file=sys.stderr)
            return self.config.conversion_error_exit_code

        logger.debug("Dispatching %r to %s", route.pattern, _qualname(route.handler))
        return exit_code(invoke(route.handler, **kwargs))

    def check(self) -> None:
        """Validate the route set and print results.

        Raises ``SystemExit(1)`` if errors are found.

        Usage::

            app.check()  # prints results and exits on errors
        """
        result = check_routes(self.routes)
        print(result.summary())
        if not result.ok:
            raise SystemExit(1)

    def _report_no_match(self, result: NoMatch) -> None:
        typed = " ".join(result.args)
        line = f"{self.config.name}: {result.message}"
        if typed:
            line = f"{line}: {typed}"
        print(line, file=sys.stderr)

        if not self.config.suggest or not result.args:
            return
        suggestions = suggest_commands(
            result.args, self.routes, limit=self.config.max_suggestions
        )
        if suggestions:
            print("Did you mean:", file=sys.stderr)
            for pattern in suggestions:
                print(f"  {pattern}", file=sys.stderr)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Compile every pattern, keeping every failure
        table, errors = compile_routes(
            (p.pattern, p.handler, p.group_prefix, p.description) for p in self._pending_routes
        )
        problems = [str(exc) for exc in errors]

        # 2. Type constraints and handler signatures
        for route in table:
            problems.extend(self._unknown_constraints(route))
            problems.extend(check_handler_signature(route.handler, route))

        if problems:
            lines = ["Route configuration is invalid:"]
            lines.extend(f"  - {problem}" for problem in problems)
            raise ConfigurationError("\n".join(lines))

        # 3. Ambiguity checks
        diagnostics = validate(table) if self.config.validate else []
        for diagnostic in diagnostics:
            logger.warning("%s: %s", diagnostic.kind.value, diagnostic.message)
        errors_found = [d for d in diagnostics if d.severity == Severity.ERROR]
        if self.config.strict and errors_found:
            lines = ["Route set has ambiguous routes:"]
            lines.extend(f"  - {d.message}" for d in errors_found)
            raise ConfigurationError("\n".join(lines))

        self._table = table
        self._diagnostics = tuple(diagnostics)
        self._frozen = True
        logger.debug("Compiled %d routes (%d diagnostics)", len(table), len(diagnostics))

    def _unknown_constraints(self, route: CompiledRoute) -> list[str]:
        constraints = [p.type_constraint for p in route.parameters]
        constraints.extend(o.parameter_type for o in route.options)
        return [
            f"route {route.pattern!r} uses unknown type constraint {c!r}"
            for c in constraints
            if c and c not in self._converters
        ]

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started resolving commands. "
                "Register routes and converters before calling app.run()."
            )
            raise RuntimeError(msg)


def _qualname(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)

"""Immutable compiled route table."""

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, TypeAlias

from warble.errors import PatternError
from warble.routing.compiler import compile_pattern
from warble.routing.resolver import resolve
from warble.routing.route import CompiledRoute, Resolution

logger = logging.getLogger("warble.routing")

# (pattern, handler) or (pattern, handler, group_prefix, description)
RouteDefinition: TypeAlias = tuple[str, Any] | tuple[str, Any, str | None, str | None]


class RouteTable:
    """Routes in registration order, frozen after construction.

    Safe to share between threads: resolution only reads it.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[CompiledRoute] = ()) -> None:
        self._routes: tuple[CompiledRoute, ...] = tuple(routes)

    @property
    def routes(self) -> tuple[CompiledRoute, ...]:
        return self._routes

    def resolve(self, args: Sequence[str]) -> Resolution:
        return resolve(args, self._routes)

    def __iter__(self) -> Iterator[CompiledRoute]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({len(self._routes)} routes)"


def compile_routes(
    definitions: Iterable[RouteDefinition],
) -> tuple[RouteTable, list[PatternError]]:
    """Compile every definition, collecting failures instead of stopping.

    Returns the table of routes that compiled and the errors for the
    ones that did not.
    """
    compiled: list[CompiledRoute] = []
    errors: list[PatternError] = []
    for definition in definitions:
        pattern, handler, *rest = definition
        group_prefix, description = (rest + [None, None])[:2]
        try:
            compiled.append(
                compile_pattern(
                    pattern, handler, group_prefix=group_prefix, description=description
                )
            )
        except PatternError as exc:
            logger.debug("Pattern failed to compile: %s", exc)
            errors.append(exc)
    return RouteTable(compiled), errors

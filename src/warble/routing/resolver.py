"""Argument resolver: pick the best route for an argument vector.

Every route is tried; there is no short-circuit on the first success.
Accepted candidates are ranked:

1. exact matches (no defaults used) beat defaulted ones;
2. among exact matches the highest specificity wins;
3. among defaulted matches the one using the most defaults wins, then
   the highest specificity.

Remaining ties go to registration order. The function is pure: it
reads the compiled routes and allocates only per-call scratch state.
"""

import logging
from collections.abc import Iterable, Sequence

from warble._internal.types import ExtractedValues
from warble.routing.consumed import ConsumedSet, new_consumed_set
from warble.routing.options import (
    MissingOptionValue,
    absent_value,
    collect_repeated,
    is_declared_option,
    match_option,
)
from warble.routing.route import CompiledRoute, NoMatch, Resolution, RouteMatch
from warble.routing.segments import END_OF_OPTIONS, Literal, Option, Parameter

logger = logging.getLogger("warble.routing")


class _Rejected(Exception):
    """A route does not accept the input. Internal control flow only."""


def resolve(args: Sequence[str], routes: Iterable[CompiledRoute]) -> Resolution:
    """Resolve *args* against *routes*.

    Returns a ``RouteMatch`` for the winner or ``NoMatch`` when no route
    accepts the input. Never raises for unmatched input.
    """
    argv = tuple(args)
    best: RouteMatch | None = None
    tried = 0

    for route in routes:
        tried += 1
        candidate = match_route(argv, route)
        if candidate is None:
            continue
        logger.debug(
            "Accepted %r (specificity %d, %d defaults)",
            route.pattern,
            route.specificity,
            candidate.defaults_used,
        )
        if best is None or _beats(candidate, best):
            best = candidate

    if best is None:
        logger.debug("No route among %d matched %r", tried, " ".join(argv))
        return NoMatch(argv)
    logger.debug("Selected %r for %r", best.route.pattern, " ".join(argv))
    return best


def match_route(args: Sequence[str], route: CompiledRoute) -> RouteMatch | None:
    """Try one route. Returns the candidate match or ``None``."""
    try:
        values, defaults_used = _walk(args, route)
    except (_Rejected, MissingOptionValue) as exc:
        logger.debug("Rejected %r: %s", route.pattern, exc)
        return None
    return RouteMatch(route=route, values=values, defaults_used=defaults_used)


def _beats(candidate: RouteMatch, incumbent: RouteMatch) -> bool:
    # Strict comparisons keep the earlier-registered route on ties.
    if candidate.is_exact != incumbent.is_exact:
        return candidate.is_exact
    if not candidate.is_exact and candidate.defaults_used != incumbent.defaults_used:
        return candidate.defaults_used > incumbent.defaults_used
    return candidate.route.specificity > incumbent.route.specificity


def _option_limit(args: Sequence[str], route: CompiledRoute) -> int:
    if route.has_end_of_options and END_OF_OPTIONS in args:
        return args.index(END_OF_OPTIONS)
    return len(args)


def _walk(args: Sequence[str], route: CompiledRoute) -> tuple[ExtractedValues, int]:
    consumed = new_consumed_set(len(args))
    values: ExtractedValues = {}
    defaults_used = 0
    declared = route.options
    limit = _option_limit(args, route)

    # Repeated options first, over the whole vector.
    for option in route.repeated_options:
        collected = collect_repeated(option, args, consumed, declared, limit)
        if not collected:
            defaults_used += 1
        if option.parameter_name:
            values[option.parameter_name] = collected

    # Then the remaining options, wherever they occur.
    for option in declared:
        if option.is_repeated:
            continue
        hit = match_option(option, args, consumed, declared, limit)
        if hit is None:
            if not option.is_optional:
                raise _Rejected(f"required option {option.display()} not found")
            defaults_used += 1
            placeholder = absent_value(option)
            if placeholder is not None and option.parameter_name:
                values[option.parameter_name] = placeholder
        elif hit.value is not None and option.parameter_name:
            values[option.parameter_name] = hit.value

    # Positional segments in order.
    cursor = 0
    positional_only = False
    for segment in route.segments:
        cursor = _skip_consumed(cursor, args, consumed)
        match segment:
            case Option():
                continue
            case Parameter(is_catch_all=True, name=name):
                values[name] = _take_rest(cursor, args, consumed, declared, positional_only)
                return values, defaults_used
            case Literal(value=value):
                if cursor >= len(args) or args[cursor] != value:
                    found = args[cursor] if cursor < len(args) else "end of input"
                    raise _Rejected(f"expected {value!r}, found {found!r}")
                if segment.is_end_of_options:
                    positional_only = True
                consumed.mark(cursor)
                cursor += 1
            case Parameter(name=name, is_optional=optional):
                available = cursor < len(args) and (
                    positional_only or not is_declared_option(args[cursor], declared)
                )
                if not available:
                    if not optional:
                        raise _Rejected(f"no value for {segment.display()}")
                    defaults_used += 1
                    continue
                values[name] = args[cursor]
                consumed.mark(cursor)
                cursor += 1

    if consumed.count() != len(args):
        raise _Rejected(f"consumed {consumed.count()} of {len(args)} arguments")
    return values, defaults_used


def _skip_consumed(cursor: int, args: Sequence[str], consumed: ConsumedSet) -> int:
    while cursor < len(args) and consumed.is_marked(cursor):
        cursor += 1
    return cursor


def _take_rest(
    cursor: int,
    args: Sequence[str],
    consumed: ConsumedSet,
    declared: Sequence[Option],
    positional_only: bool,
) -> str:
    taken: list[str] = []
    for i in range(cursor, len(args)):
        if not positional_only and is_declared_option(args[i], declared):
            break
        if consumed.is_marked(i):
            continue
        consumed.mark(i)
        taken.append(args[i])
    return " ".join(taken)

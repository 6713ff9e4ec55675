"""Route-set validator: static ambiguity checks over a compiled table.

Three diagnostics:

- ``DUPLICATE_ROUTE_PATTERN``: the same effective pattern registered twice.
- ``OVERLAPPING_TYPE_CONSTRAINTS``: two routes with the same structure
  that differ only in type constraints (``get {id:int}`` vs
  ``get {id:guid}``). A conversion failure never falls back to a
  sibling route, so one of them will reject input the other wanted.
- ``UNREACHABLE_ROUTE``: a route shadowed by another with the same
  required structure and equal or higher specificity.

Structure signature::

    "get {id:int}"       -> "get {P}"
    "get {id:int?}"      -> "get {P?}"
    "get {*args}"        -> "get {*}"
    "--output {path}"    -> "--output {P}"

Required signature (optional elements dropped)::

    "deploy {env} --force?"  -> "deploy {P}"
    "test --verbose --watch" -> "test"
    "round {v} --mode {m}"   -> "round {P} --mode {P}"

``UNREACHABLE_ROUTE`` orders candidates by specificity alone, while
the resolver prefers exact matches first. A flagged route can still be
selected when invoked with exactly its required arguments, so the
diagnostic is a warning rather than an error.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from warble.routing.route import CompiledRoute
from warble.routing.segments import Literal, Option, Parameter


class DiagnosticKind(Enum):
    OVERLAPPING_TYPE_CONSTRAINTS = "overlapping_type_constraints"
    DUPLICATE_ROUTE_PATTERN = "duplicate_route_pattern"
    UNREACHABLE_ROUTE = "unreachable_route"


class Severity(Enum):
    """Severity of a route-set diagnostic."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One problem found in a route set.

    ``patterns`` holds the offending effective patterns verbatim.
    """

    kind: DiagnosticKind
    severity: Severity
    patterns: tuple[str, ...]
    message: str


def structure_signature(route: CompiledRoute) -> str:
    """Shape of a route with parameter names and types erased."""
    parts: list[str] = []
    for segment in route.segments:
        match segment:
            case Literal(value=value):
                parts.append(value)
            case Parameter(is_catch_all=True):
                parts.append("{*}")
            case Parameter(is_optional=True):
                parts.append("{P?}")
            case Parameter():
                parts.append("{P}")
            case Option() as option:
                parts.append(option.primary_token)
                if option.expects_value:
                    parts.append("{P?}" if option.parameter_is_optional else "{P}")
    return " ".join(parts)


def required_signature(route: CompiledRoute) -> str:
    """Shape of the input every match of *route* must contain."""
    parts: list[str] = []
    for segment in route.segments:
        match segment:
            case Literal(value=value):
                parts.append(value)
            case Parameter(is_optional=False, is_catch_all=False):
                parts.append("{P}")
            case Option(is_optional=False, expects_value=True) as option:
                parts.append(option.primary_token)
                parts.append("{P?}" if option.parameter_is_optional else "{P}")
    return " ".join(parts)


def validate(routes: Iterable[CompiledRoute]) -> list[Diagnostic]:
    """Check a compiled route set. Returns diagnostics, never raises."""
    table = list(routes)
    if len(table) < 2:
        return []

    diagnostics: list[Diagnostic] = []
    for group in _group_by(table, structure_signature):
        diagnostics.extend(_check_structure_group(group))
    for group in _group_by(table, required_signature):
        diagnostics.extend(_check_shadowing(group))
    return diagnostics


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _group_by(table: list[CompiledRoute], key) -> list[list[CompiledRoute]]:
    groups: dict[str, list[CompiledRoute]] = {}
    for route in table:
        groups.setdefault(key(route), []).append(route)
    return [group for group in groups.values() if len(group) > 1]


def _check_structure_group(group: list[CompiledRoute]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    reported_duplicates: set[str] = set()

    for i, first in enumerate(group):
        for second in group[i + 1 :]:
            if first.pattern == second.pattern:
                if first.pattern not in reported_duplicates:
                    reported_duplicates.add(first.pattern)
                    diagnostics.append(
                        Diagnostic(
                            kind=DiagnosticKind.DUPLICATE_ROUTE_PATTERN,
                            severity=Severity.ERROR,
                            patterns=(first.pattern,),
                            message=f"Route pattern {first.pattern!r} is registered more than once",
                        )
                    )
                continue
            if _constraints_differ(first, second):
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.OVERLAPPING_TYPE_CONSTRAINTS,
                        severity=Severity.ERROR,
                        patterns=(first.pattern, second.pattern),
                        message=(
                            f"Routes {first.pattern!r} and {second.pattern!r} have the same "
                            "structure but different type constraints; a value that fails "
                            "one conversion is not retried against the other"
                        ),
                    )
                )
    return diagnostics


def _check_shadowing(group: list[CompiledRoute]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    ordered = sorted(group, key=lambda r: r.specificity, reverse=True)
    reported: set[str] = set()

    for i, higher in enumerate(ordered):
        for lower in ordered[i + 1 :]:
            if higher.pattern == lower.pattern or lower.pattern in reported:
                continue
            if higher.specificity >= lower.specificity:
                reported.add(lower.pattern)
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.UNREACHABLE_ROUTE,
                        severity=Severity.WARNING,
                        patterns=(lower.pattern, higher.pattern),
                        message=(
                            f"Route {lower.pattern!r} (specificity {lower.specificity}) may be "
                            f"shadowed by {higher.pattern!r} (specificity {higher.specificity})"
                        ),
                    )
                )
    return diagnostics


def _normalize_constraint(constraint: str | None) -> str | None:
    if not constraint:
        return None
    return constraint.lower().removesuffix("?") or None


def _constraints_differ(first: CompiledRoute, second: CompiledRoute) -> bool:
    left = [_normalize_constraint(p.type_constraint) for p in first.parameters]
    right = [_normalize_constraint(p.type_constraint) for p in second.parameters]
    if len(left) == len(right) and left != right:
        return True

    for option in first.options:
        if not option.expects_value:
            continue
        for other in second.options:
            if not other.expects_value:
                continue
            same_option = (option.long_form and option.long_form == other.long_form) or (
                option.short_form and option.short_form == other.short_form
            )
            if same_option and _normalize_constraint(
                option.parameter_type
            ) != _normalize_constraint(other.parameter_type):
                return True
    return False

"""Route-set checks and command suggestions.

Wraps the validator's diagnostics in a ``CheckResult`` for ``App.check()``
and ``warble check``, and finds nearby commands when an invocation
matches nothing.

Usage::

    result = check_routes(app.routes)
    print(result.summary())
    if not result.ok:
        raise SystemExit(1)
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from warble.routing.route import CompiledRoute
from warble.routing.segments import Literal
from warble.routing.validator import Diagnostic, Severity, validate


@dataclass(slots=True)
class CheckResult:
    """Result of checking a route set."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    routes_checked: int = 0

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [f"Checked {self.routes_checked} routes."]
        if self.ok and not self.warnings:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for diagnostic in self.diagnostics:
            prefix = diagnostic.severity.value.upper()
            lines.append(f"  [{prefix}] {diagnostic.kind.value}: {diagnostic.message}")
        return "\n".join(lines)


def check_routes(routes: Iterable[CompiledRoute]) -> CheckResult:
    """Validate *routes* and collect the diagnostics."""
    table = list(routes)
    return CheckResult(diagnostics=validate(table), routes_checked=len(table))


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


def command_prefix(route: CompiledRoute) -> str:
    """The leading literals of a route: ``"git commit {msg}"`` -> ``"git commit"``."""
    words: list[str] = []
    for segment in route.segments:
        if not isinstance(segment, Literal) or segment.is_end_of_options:
            break
        words.append(segment.value)
    return " ".join(words)


def suggest_commands(
    args: Sequence[str],
    routes: Iterable[CompiledRoute],
    *,
    limit: int = 3,
    max_dist: int = 3,
) -> list[str]:
    """Route patterns whose command words are close to *args*.

    Compares the first ``n`` input words against each route's ``n``
    leading literals by edit distance. Closest first; ties keep
    registration order.
    """
    if limit <= 0:
        return []
    scored: list[tuple[int, int, str]] = []
    for index, route in enumerate(routes):
        prefix = command_prefix(route)
        if not prefix:
            continue
        typed = " ".join(args[: len(prefix.split())])
        dist = _edit_distance(typed.lower(), prefix.lower())
        if dist <= max_dist:
            scored.append((dist, index, route.pattern))

    seen: set[str] = set()
    suggestions: list[str] = []
    for _, _, pattern in sorted(scored):
        if pattern not in seen:
            seen.add(pattern)
            suggestions.append(pattern)
    return suggestions[:limit]


def _edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings."""
    if len(a) > len(b):
        a, b = b, a
    prev = list(range(len(a) + 1))
    for j in range(1, len(b) + 1):
        curr = [j] + [0] * len(a)
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            curr[i] = min(curr[i - 1] + 1, prev[i] + 1, prev[i - 1] + cost)
        prev = curr
    return prev[len(a)]

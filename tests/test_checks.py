"""Tests for warble.checks: CheckResult and command suggestions."""

from warble.checks import CheckResult, _edit_distance, check_routes, command_prefix, suggest_commands
from warble.routing.compiler import compile_pattern
from warble.routing.route import CompiledRoute
from warble.routing.validator import Diagnostic, DiagnosticKind, Severity


def _routes(*patterns: str) -> list[CompiledRoute]:
    return [compile_pattern(p) for p in patterns]


def _diagnostic(severity: Severity) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.UNREACHABLE_ROUTE,
        severity=severity,
        patterns=("a",),
        message="msg",
    )


class TestCheckResult:
    def test_empty_is_ok(self) -> None:
        result = CheckResult()
        assert result.ok
        assert result.errors == []
        assert result.warnings == []

    def test_warnings_only_is_ok(self) -> None:
        result = CheckResult(diagnostics=[_diagnostic(Severity.WARNING)])
        assert result.ok
        assert len(result.warnings) == 1

    def test_errors_fail(self) -> None:
        result = CheckResult(diagnostics=[_diagnostic(Severity.ERROR)])
        assert not result.ok
        assert len(result.errors) == 1

    def test_summary_clean(self) -> None:
        summary = CheckResult(routes_checked=3).summary()
        assert summary == "Checked 3 routes.\nNo issues found."

    def test_summary_warnings(self) -> None:
        summary = CheckResult(diagnostics=[_diagnostic(Severity.WARNING)], routes_checked=2).summary()
        assert "No errors. 1 warning(s)." in summary
        assert "  [WARNING] unreachable_route: msg" in summary

    def test_summary_errors(self) -> None:
        result = CheckResult(
            diagnostics=[_diagnostic(Severity.ERROR), _diagnostic(Severity.WARNING)],
            routes_checked=2,
        )
        summary = result.summary()
        assert "1 error(s), 1 warning(s)." in summary
        assert "  [ERROR] unreachable_route: msg" in summary


class TestCheckRoutes:
    def test_counts_routes(self) -> None:
        result = check_routes(_routes("status", "deploy {env}"))
        assert result.routes_checked == 2
        assert result.ok

    def test_duplicate_is_error(self) -> None:
        result = check_routes(_routes("status", "status"))
        assert not result.ok
        assert result.errors[0].kind is DiagnosticKind.DUPLICATE_ROUTE_PATTERN


class TestSuggestions:
    def test_command_prefix(self) -> None:
        assert command_prefix(compile_pattern("git commit {msg}")) == "git commit"
        assert command_prefix(compile_pattern("{file}")) == ""
        assert command_prefix(compile_pattern("exec -- {*rest}")) == "exec"

    def test_typo(self) -> None:
        routes = _routes("deploy {env}", "status", "git commit {msg}")
        assert suggest_commands(["deplyo", "prod"], routes) == ["deploy {env}"]

    def test_closest_first(self) -> None:
        routes = _routes("stats", "status")
        assert suggest_commands(["statuss"], routes) == ["status", "stats"]

    def test_nothing_close(self) -> None:
        assert suggest_commands(["zzzzzzzz"], _routes("status", "deploy {env}")) == []

    def test_limit(self) -> None:
        routes = _routes("run a", "run b", "run c", "run d")
        assert len(suggest_commands(["run", "x"], routes, limit=2)) == 2
        assert suggest_commands(["run", "x"], routes, limit=0) == []

    def test_edit_distance(self) -> None:
        assert _edit_distance("", "abc") == 3
        assert _edit_distance("kitten", "sitting") == 3
        assert _edit_distance("same", "same") == 0

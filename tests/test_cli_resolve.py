"""Tests for warble.cli._resolve and ``warble resolve``."""

import sys
import types

import pytest

from warble.app import App
from warble.cli import main
from warble.cli._resolve import load_app


def _build_app() -> App:
    app = App()
    app.add_route("deploy {env}", lambda env: None)
    app.add_route("deploy {env} --force", lambda env, force: None)
    app.add_route("tag --label {labels}*", lambda labels: None)
    return app


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with a warble App on sys.modules."""
    mod = types.ModuleType("_fake_warble_app")
    mod.app = _build_app()  # type: ignore[attr-defined]
    mod.custom = App()  # type: ignore[attr-defined]
    mod.factory = _build_app  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    mod.broken_factory = lambda: 1 / 0  # type: ignore[attr-defined]
    mod.wrong_factory = lambda: 1  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_warble_app", mod)


@pytest.mark.usefixtures("_fake_app_module")
class TestLoadApp:
    def test_explicit_attribute(self) -> None:
        assert isinstance(load_app("_fake_warble_app:app"), App)

    def test_custom_attribute(self) -> None:
        assert load_app("_fake_warble_app:custom") is sys.modules["_fake_warble_app"].custom

    def test_default_attribute(self) -> None:
        """Omitting :attr defaults to 'app'."""
        app = load_app("_fake_warble_app")
        assert app is sys.modules["_fake_warble_app"].app

    def test_factory(self) -> None:
        app = load_app("_fake_warble_app:factory")
        assert isinstance(app, App)
        assert len(app.routes) == 3

    def test_loaded_app_is_frozen(self) -> None:
        app = load_app("_fake_warble_app:app")
        with pytest.raises(RuntimeError):
            app.add_route("late", lambda: None)

    @pytest.mark.parametrize(
        ("import_string", "message"),
        [
            ("_fake_warble_app:broken_factory", "raised ZeroDivisionError"),
            ("_fake_warble_app:wrong_factory", "returned int, not a warble.App"),
            ("nonexistent_module_xyz:app", "cannot import 'nonexistent_module_xyz'"),
            ("_fake_warble_app:does_not_exist", "has no attribute 'does_not_exist'"),
            ("_fake_warble_app:not_an_app", "is a str, not a warble.App"),
        ],
    )
    def test_failure_exits(
        self, import_string: str, message: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            load_app(import_string)
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert message in err

    def test_failure_through_main(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_warble_app:not_an_app"])
        assert exc_info.value.code == 1
        assert "not a warble.App" in capsys.readouterr().err


@pytest.mark.usefixtures("_fake_app_module")
class TestWarbleResolve:
    def test_exact_match(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["resolve", "_fake_warble_app:app", "deploy", "prod"])
        out = capsys.readouterr().out
        assert "Route:       deploy {env}" in out
        assert "Specificity: 110" in out
        assert "Defaults:    0" in out
        assert "  env = 'prod'" in out

    def test_options_passed_through(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["resolve", "_fake_warble_app:app", "deploy", "prod", "--force"])
        out = capsys.readouterr().out
        assert "Route:       deploy {env} --force" in out
        assert "  force = 'true'" in out

    def test_repeated_values(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["resolve", "_fake_warble_app:app", "tag", "--label", "a", "--label", "b"])
        assert "  labels = ['a', 'b']" in capsys.readouterr().out

    def test_no_match(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["resolve", "_fake_warble_app:app", "nope"])
        assert exc_info.value.code == 1
        assert "No matching command found: nope" in capsys.readouterr().out

    def test_does_not_run_handler(self, monkeypatch: pytest.MonkeyPatch) -> None:
        called: list[str] = []
        app = App()
        app.add_route("boom", lambda: called.append("boom"))
        mod = types.ModuleType("_resolve_only_app")
        mod.app = app  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "_resolve_only_app", mod)

        main(["resolve", "_resolve_only_app:app", "boom"])
        assert called == []

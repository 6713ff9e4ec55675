"""Tests for warble.cli: CLI entrypoint and argument parsing."""

import logging

import pytest

from warble.cli import main


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    @pytest.mark.parametrize("command", ["check", "routes", "resolve", "run"])
    def test_subcommand_help_exits_zero(self, command: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([command, "--help"])
        assert exc_info.value.code == 0


class TestCLIMissingArgs:
    @pytest.mark.parametrize("command", ["check", "routes", "resolve", "run"])
    def test_missing_app(self, command: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([command])
        assert exc_info.value.code == 2


class TestCLINoCommand:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "warble" in captured.out


class TestCLIVerbose:
    def test_verbose_configures_debug_logging(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, object] = {}

        def fake_basic_config(**kwargs: object) -> None:
            seen.update(kwargs)

        monkeypatch.setattr(logging, "basicConfig", fake_basic_config)
        with pytest.raises(SystemExit):
            main(["--verbose"])
        assert seen["level"] == logging.DEBUG

"""Test helpers for warble applications.

Runs an app in-process with the same ``App.run`` path as production,
capturing what it writes.

Usage::

    from warble.testing import run_app

    result = run_app(app, ["deploy", "prod", "--force"])
    assert result.exit_code == 0
    assert "Deploying" in result.stdout
"""

import io
from collections.abc import Sequence
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass

from warble.app import App


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one in-process invocation."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_app(app: App, argv: Sequence[str]) -> CommandResult:
    """Run *app* with *argv*, capturing stdout and stderr.

    A handler calling ``sys.exit`` is reported through ``exit_code``.
    """
    out = io.StringIO()
    err = io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        try:
            code = app.run(list(argv))
        except SystemExit as exc:
            code = _system_exit_code(exc, err)
    return CommandResult(exit_code=code, stdout=out.getvalue(), stderr=err.getvalue())


def _system_exit_code(exc: SystemExit, err: io.StringIO) -> int:
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    err.write(f"{exc.code}\n")
    return 1

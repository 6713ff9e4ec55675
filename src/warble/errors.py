"""Warble exception hierarchy.

Shared across the compiler, binder, App, and CLI so every module
raises and catches the same types.

A failed resolution is *not* an exception: the resolver returns a
``NoMatch`` value and the caller decides how to render it.
"""


class WarbleError(Exception):
    """Base for all warble-specific errors."""


class ConfigurationError(WarbleError):
    """Raised when app configuration is invalid.

    Typically raised during ``App._freeze()`` at startup. When several
    route patterns are broken, all of them are listed in one error so
    the developer sees every problem in a single pass.
    """


class PatternError(WarbleError):
    """A route pattern could not be compiled.

    Carries every reason found in the pattern, not only the first one.
    """

    def __init__(self, pattern: str, reasons: list[str] | tuple[str, ...]) -> None:
        self.pattern = pattern
        self.reasons: tuple[str, ...] = tuple(reasons)
        super().__init__(self._format())

    def _format(self) -> str:
        if len(self.reasons) == 1:
            return f"Invalid route pattern {self.pattern!r}: {self.reasons[0]}"
        lines = [f"Invalid route pattern {self.pattern!r}:"]
        lines.extend(f"  - {reason}" for reason in self.reasons)
        return "\n".join(lines)


class ArgumentConversionError(WarbleError):
    """A matched argument could not be converted to its declared type.

    Always surfaced to the user. The dispatcher never retries the
    input against a sibling route.
    """

    def __init__(self, parameter: str, raw: str, constraint: str, detail: str = "") -> None:
        self.parameter = parameter
        self.raw = raw
        self.constraint = constraint
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        msg = f"Invalid value {self.raw!r} for '{self.parameter}': expected {self.constraint}"
        if self.detail:
            msg = f"{msg} ({self.detail})"
        return msg

"""Route segments: the closed set of things a pattern is made of.

A compiled route is an ordered tuple of segments. There are exactly
three kinds, and code that walks a route uses ``match`` over them::

    match segment:
        case Literal(value=value): ...
        case Parameter(is_catch_all=True): ...
        case Parameter(): ...
        case Option(): ...
"""

from typing import TypeAlias
from dataclasses import dataclass

END_OF_OPTIONS = "--"


@dataclass(frozen=True, slots=True)
class Literal:
    """An exact, case-sensitive token: ``deploy``, ``status``, ``--``."""

    value: str

    @property
    def is_end_of_options(self) -> bool:
        return self.value == END_OF_OPTIONS

    def display(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Parameter:
    """A positional parameter.

    Plain:     ``{env}``         (name="env")
    Typed:     ``{n:int}``       (type_constraint="int")
    Optional:  ``{tag?}``        (is_optional=True)
    Catch-all: ``{*files}``      (is_catch_all=True)
    """

    name: str
    type_constraint: str | None = None
    is_optional: bool = False
    is_catch_all: bool = False
    description: str | None = None

    def display(self) -> str:
        if self.is_catch_all:
            return f"{{*{self.name}}}"
        inner = self.name
        if self.type_constraint:
            inner = f"{inner}:{self.type_constraint}"
        if self.is_optional:
            inner = f"{inner}?"
        return f"{{{inner}}}"


@dataclass(frozen=True, slots=True)
class Option:
    """A flag or an option with a value.

    Forms are stored without dashes (``long_form="dry-run"``,
    ``short_form="d"``). ``is_optional`` is the runtime optionality:
    boolean flags and repeated options never fail a route by being
    absent. ``is_flag_optional`` records an explicit ``?`` in the
    pattern and only affects specificity.
    """

    long_form: str | None = None
    short_form: str | None = None
    expects_value: bool = False
    parameter_name: str | None = None
    parameter_type: str | None = None
    parameter_is_optional: bool = False
    is_repeated: bool = False
    is_optional: bool = False
    is_flag_optional: bool = False
    description: str | None = None

    @property
    def long_token(self) -> str | None:
        return f"--{self.long_form}" if self.long_form else None

    @property
    def short_token(self) -> str | None:
        return f"-{self.short_form}" if self.short_form else None

    @property
    def primary_token(self) -> str:
        """The token used for display and signatures (long form preferred)."""
        return self.long_token or self.short_token or "--"

    def matches(self, token: str) -> bool:
        """True if *token* is exactly one of this option's forms."""
        return token == self.long_token or token == self.short_token

    def display(self) -> str:
        text = self.primary_token
        if self.long_form and self.short_form:
            text = f"{text},{self.short_token}"
        if self.is_flag_optional:
            text = f"{text}?"
        if self.expects_value:
            inner = self.parameter_name or "value"
            if self.parameter_type:
                inner = f"{inner}:{self.parameter_type}"
            if self.parameter_is_optional:
                inner = f"{inner}?"
            text = f"{text} {{{inner}}}"
            if self.is_repeated:
                text = f"{text}*"
        return text


Segment: TypeAlias = Literal | Parameter | Option

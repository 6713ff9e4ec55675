"""Position-independent option matching.

Options are searched anywhere among the still-unconsumed argv slots.
"Is this token an option" is always answered against the current
route's declared options only, so ``-3`` stays an ordinary value under
a route that declares no ``-3`` option.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from warble.routing.consumed import ConsumedSet
from warble.routing.segments import Option


@dataclass(frozen=True, slots=True)
class OptionHit:
    """Where an option was found and the value it took, if any."""

    index: int
    value: str | None = None


class MissingOptionValue(Exception):
    """A present option has no value and its value is required.

    Internal to resolution; the resolver turns it into a rejected
    candidate.
    """

    def __init__(self, option: Option) -> None:
        self.option = option
        super().__init__(f"option {option.display()} requires a value")


def is_declared_option(token: str, options: Sequence[Option]) -> bool:
    """True if *token* is exactly one of the forms in *options*."""
    if not token.startswith("-"):
        return False
    return any(option.matches(token) for option in options)


def match_option(
    option: Option,
    args: Sequence[str],
    consumed: ConsumedSet,
    declared: Sequence[Option],
    limit: int | None = None,
) -> OptionHit | None:
    """Claim the first unconsumed slot matching *option*.

    Marks the option slot and, for value options, the following slot
    when it holds a usable value. Returns ``None`` when the option does
    not occur before *limit*.

    Raises ``MissingOptionValue`` when the option occurs but its
    required value does not.
    """
    end = len(args) if limit is None else limit
    for i in range(end):
        if consumed.is_marked(i) or not option.matches(args[i]):
            continue
        consumed.mark(i)
        if not option.expects_value:
            return OptionHit(i, "true")
        value = _take_value(i + 1, args, consumed, declared, end)
        if value is None and not option.parameter_is_optional:
            raise MissingOptionValue(option)
        return OptionHit(i, value)
    return None


def collect_repeated(
    option: Option,
    args: Sequence[str],
    consumed: ConsumedSet,
    declared: Sequence[Option],
    limit: int | None = None,
) -> list[str]:
    """Claim every unconsumed occurrence of a repeated *option*, in order.

    An occurrence whose optional value is missing contributes nothing.

    Raises ``MissingOptionValue`` when an occurrence lacks a required
    value.
    """
    end = len(args) if limit is None else limit
    values: list[str] = []
    for i in range(end):
        if consumed.is_marked(i) or not option.matches(args[i]):
            continue
        consumed.mark(i)
        value = _take_value(i + 1, args, consumed, declared, end)
        if value is not None:
            values.append(value)
        elif not option.parameter_is_optional:
            raise MissingOptionValue(option)
    return values


def absent_value(option: Option) -> str | list[str] | None:
    """Placeholder recorded for an option that did not occur."""
    if not option.expects_value:
        return "false"
    if option.is_repeated:
        return []
    return None


def _take_value(
    j: int,
    args: Sequence[str],
    consumed: ConsumedSet,
    declared: Sequence[Option],
    end: int,
) -> str | None:
    if j >= end or consumed.is_marked(j) or is_declared_option(args[j], declared):
        return None
    consumed.mark(j)
    return args[j]

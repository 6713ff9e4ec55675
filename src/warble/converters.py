"""Type conversion registry.

Maps a type-constraint name (the ``int`` in ``{n:int}``) to a
string-to-value converter. Names are case-insensitive and a trailing
``?`` is ignored, so ``{n:Int?}`` uses the ``int`` converter.

Built-in converters::

    str, string                          -> str
    int, long, short, byte               -> int (short/byte range-checked)
    float, double                        -> float
    decimal                              -> decimal.Decimal
    bool                                 -> bool (true/false, 1/0, yes/no, on/off)
    datetime                             -> datetime.datetime (ISO 8601)
    date, dateonly                       -> datetime.date
    time, timeonly                       -> datetime.time
    timedelta, timespan                  -> datetime.timedelta ([d.]hh:mm[:ss[.f]])
    uuid, guid                           -> uuid.UUID
    uri, url                             -> str (must have a scheme)
    path, fileinfo, directoryinfo        -> pathlib.Path
    ipaddress                            -> IPv4Address | IPv6Address

Enums are registered with ``register_enum`` and match member names
case-insensitively.
"""

import datetime
import decimal
import ipaddress
import re
import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit


@dataclass(frozen=True, slots=True)
class ConverterInfo:
    """A registered converter.

    ``members`` lists an enum's member names; empty for other targets.
    """

    name: str
    target: type
    convert: Callable[[str], Any] = field(repr=False, compare=False)
    is_enum: bool = False
    members: tuple[str, ...] = ()


def normalize_constraint(constraint: str) -> str:
    """``"Int?"`` -> ``"int"``."""
    return constraint.strip().removesuffix("?").lower()


# ---------------------------------------------------------------------------
# Built-in converters
# ---------------------------------------------------------------------------

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})

_TIMESPAN = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2}(?:\.\d+)?))?$"
)


def _to_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _bounded_int(low: int, high: int) -> Callable[[str], int]:
    def convert(raw: str) -> int:
        value = int(raw)
        if not low <= value <= high:
            raise ValueError(f"{value} is outside {low}..{high}")
        return value

    return convert


def _to_decimal(raw: str) -> decimal.Decimal:
    try:
        value = decimal.Decimal(raw.strip())
    except decimal.InvalidOperation:
        raise ValueError(f"not a decimal number: {raw!r}") from None
    if not value.is_finite():
        raise ValueError(f"not a finite decimal: {raw!r}")
    return value


def _to_timedelta(raw: str) -> datetime.timedelta:
    match = _TIMESPAN.match(raw.strip())
    if match is None:
        raise ValueError(f"expected [d.]hh:mm[:ss], got {raw!r}")
    hours = int(match["hours"])
    minutes = int(match["minutes"])
    if hours > 23 or minutes > 59:
        raise ValueError(f"time component out of range in {raw!r}")
    seconds = float(match["seconds"] or 0)
    if seconds >= 60:
        raise ValueError(f"seconds out of range in {raw!r}")
    delta = datetime.timedelta(
        days=int(match["days"] or 0), hours=hours, minutes=minutes, seconds=seconds
    )
    return -delta if match["sign"] else delta


def _to_uri(raw: str) -> str:
    parts = urlsplit(raw)
    if not parts.scheme or not (parts.netloc or parts.path):
        raise ValueError(f"not an absolute URI: {raw!r}")
    return raw


def _to_ip(raw: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    return ipaddress.ip_address(raw.strip())


_BUILTINS: tuple[tuple[tuple[str, ...], type, Callable[[str], Any]], ...] = (
    (("str", "string"), str, str),
    (("int", "long"), int, int),
    (("short",), int, _bounded_int(-(2**15), 2**15 - 1)),
    (("byte",), int, _bounded_int(0, 255)),
    (("float", "double"), float, float),
    (("decimal",), decimal.Decimal, _to_decimal),
    (("bool",), bool, _to_bool),
    (("datetime",), datetime.datetime, datetime.datetime.fromisoformat),
    (("date", "dateonly"), datetime.date, datetime.date.fromisoformat),
    (("time", "timeonly"), datetime.time, datetime.time.fromisoformat),
    (("timedelta", "timespan"), datetime.timedelta, _to_timedelta),
    (("uuid", "guid"), uuid.UUID, uuid.UUID),
    (("uri", "url"), str, _to_uri),
    (("path", "fileinfo", "directoryinfo"), Path, Path),
    (("ipaddress",), ipaddress.IPv4Address, _to_ip),
)

_ADDRESS_TYPES = (ipaddress.IPv4Address, ipaddress.IPv6Address)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ConverterRegistry:
    """Constraint name -> converter.

    Populated during app setup and only read afterwards.

    Usage::

        registry = ConverterRegistry()
        registry.register("port", int, parse_port)
        registry.register_enum(Color)

        value, ok = registry.try_convert("42", "int")
    """

    __slots__ = ("_by_name",)

    def __init__(self, *, builtins: bool = True) -> None:
        self._by_name: dict[str, ConverterInfo] = {}
        if builtins:
            for names, target, convert in _BUILTINS:
                for name in names:
                    self.register(name, target, convert)

    def register(
        self,
        name: str,
        target: type,
        convert: Callable[[str], Any],
    ) -> ConverterInfo:
        """Register (or replace) the converter for *name*.

        *convert* raises ``ValueError`` when the raw string is unusable.
        """
        key = normalize_constraint(name)
        if not key:
            msg = "Converter name must not be empty"
            raise ValueError(msg)
        info = ConverterInfo(name=key, target=target, convert=convert)
        self._by_name[key] = info
        return info

    def register_enum(self, enum_cls: type[Enum], name: str | None = None) -> ConverterInfo:
        """Register *enum_cls* under *name* (default: the class name)."""
        info = enum_converter(enum_cls, name)
        self._by_name[info.name] = info
        return info

    def converter_for(self, constraint: str) -> ConverterInfo | None:
        return self._by_name.get(normalize_constraint(constraint))

    def converter_for_type(self, target: Any) -> ConverterInfo | None:
        """Find a converter producing *target*, for annotation-driven binding.

        Enum classes need not be registered. An ``IPv4Address`` or
        ``IPv6Address`` annotation accepts only that address family.
        """
        if target in _ADDRESS_TYPES:
            return ConverterInfo("ipaddress", target, target)
        if isinstance(target, type) and issubclass(target, Enum):
            for info in self._by_name.values():
                if info.is_enum and info.target is target:
                    return info
            return enum_converter(target)
        for info in self._by_name.values():
            if info.target is target:
                return info
        return None

    def try_convert(self, raw: str, constraint: str) -> tuple[Any, bool]:
        """Convert *raw* using *constraint*. Returns ``(value, ok)``.

        An unknown constraint is ``(None, False)``.
        """
        info = self.converter_for(constraint)
        if info is None:
            return None, False
        try:
            return info.convert(raw), True
        except (ValueError, TypeError, ArithmeticError):
            return None, False

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_name))

    def __contains__(self, constraint: object) -> bool:
        return isinstance(constraint, str) and normalize_constraint(constraint) in self._by_name

    def __iter__(self) -> Iterator[ConverterInfo]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


def enum_converter(enum_cls: type[Enum], name: str | None = None) -> ConverterInfo:
    """Build a case-insensitive converter for *enum_cls*.

    Matches a member name first, then a member's string value.
    """
    by_name = {member.name.lower(): member for member in enum_cls}
    by_value = {str(member.value).lower(): member for member in enum_cls}

    def convert(raw: str) -> Enum:
        key = raw.strip().lower()
        member = by_name.get(key)
        if member is None:
            member = by_value.get(key)
        if member is None:
            choices = ", ".join(m.name for m in enum_cls)
            raise ValueError(f"expected one of {choices}")
        return member

    return ConverterInfo(
        name=normalize_constraint(name or enum_cls.__name__),
        target=enum_cls,
        convert=convert,
        is_enum=True,
        members=tuple(m.name for m in enum_cls),
    )

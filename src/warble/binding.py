"""Bind a route match to a handler's keyword arguments.

The resolver hands over raw strings. The binder converts each one,
choosing the converter in this order:

1. the route's type constraint (``{n:int}``);
2. the handler annotation, when the registry knows the type
   (``int``, ``float``, ``bool``, ``Path``, enums, ...);
3. otherwise the raw string.

Boolean flags always bind as ``bool``. A catch-all annotated
``list[...]`` or ``tuple[...]`` is split on whitespace; repeated
options convert each element. ``X | None`` unwraps to ``X``.

Usage::

    kwargs = bind_arguments(handler, match, registry)
    handler(**kwargs)
"""

import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin, get_type_hints

from warble.converters import ConverterInfo, ConverterRegistry
from warble.errors import ArgumentConversionError
from warble.routing.route import CompiledRoute, RouteMatch
from warble.routing.segments import Option, Parameter

_EMPTY = inspect.Parameter.empty
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class _Slot:
    """What a route knows about one named value."""

    constraint: str | None = None
    is_flag: bool = False
    is_repeated: bool = False
    is_catch_all: bool = False


def bind_arguments(
    handler: Callable[..., Any],
    match: RouteMatch,
    registry: ConverterRegistry,
) -> dict[str, Any]:
    """Build the keyword arguments for calling *handler* with *match*.

    Values absent from the match fall back to the handler's default, or
    ``None`` when it has none.

    Raises ``ArgumentConversionError`` on the first value that does not
    convert. Never tries another route.
    """
    slots = _route_slots(match.route)
    signature = inspect.signature(handler)
    hints = _type_hints(handler)
    accepts_any = any(
        p.kind is inspect.Parameter.VAR_KEYWORD for p in signature.parameters.values()
    )

    kwargs: dict[str, Any] = {}
    for name, param in signature.parameters.items():
        if param.kind in _VARIADIC or name not in slots:
            continue
        raw = match.values.get(name)
        if raw is None:
            if param.default is _EMPTY:
                kwargs[name] = None
            continue
        annotation = hints.get(name, param.annotation)
        kwargs[name] = _convert(name, raw, slots[name], annotation, registry)

    if accepts_any:
        for name, raw in match.values.items():
            if name not in kwargs and name not in signature.parameters:
                kwargs[name] = _convert(name, raw, slots.get(name, _Slot()), _EMPTY, registry)
    return kwargs


def check_handler_signature(handler: Callable[..., Any], route: CompiledRoute) -> list[str]:
    """Problems binding *route* to *handler*, as messages. Empty when fine.

    Every handler parameter without a default must be supplied by the
    route.
    """
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError) as exc:
        return [f"cannot inspect handler {_qualname(handler)}: {exc}"]

    provided = set(route.parameter_names())
    problems: list[str] = []
    for name, param in signature.parameters.items():
        if param.kind in _VARIADIC:
            continue
        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            problems.append(
                f"handler {_qualname(handler)} parameter '{name}' is positional-only "
                "and cannot be bound by name"
            )
        elif name not in provided and param.default is _EMPTY:
            problems.append(
                f"handler {_qualname(handler)} requires '{name}' but route "
                f"{route.pattern!r} does not provide it"
            )
    return problems


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def _convert(
    name: str,
    raw: str | list[str],
    slot: _Slot,
    annotation: Any,
    registry: ConverterRegistry,
) -> Any:
    base = _unwrap_optional(annotation)
    container, element = _container_of(base)

    if slot.is_flag:
        return _convert_one(name, _as_text(raw), "bool", bool, registry)

    if slot.is_repeated:
        items = raw if isinstance(raw, list) else _as_text(raw).split()
        values = [_convert_one(name, item, slot.constraint, element, registry) for item in items]
        return tuple(values) if container is tuple else values

    if slot.is_catch_all and container is not None:
        items = _as_text(raw).split()
        values = [_convert_one(name, item, slot.constraint, element, registry) for item in items]
        return tuple(values) if container is tuple else values

    return _convert_one(name, _as_text(raw), slot.constraint, base, registry)


def _convert_one(
    name: str,
    raw: str,
    constraint: str | None,
    target: Any,
    registry: ConverterRegistry,
) -> Any:
    info: ConverterInfo | None
    if constraint:
        info = registry.converter_for(constraint)
        if info is None:
            raise ArgumentConversionError(name, raw, constraint, "unknown type constraint")
    elif target is _EMPTY or target is Any or target is str:
        return raw
    else:
        info = registry.converter_for_type(target)
        if info is None:
            return raw

    try:
        return info.convert(raw)
    except (ValueError, TypeError, ArithmeticError) as exc:
        if info.is_enum:
            raise ArgumentConversionError(name, raw, f"one of {', '.join(info.members)}") from exc
        raise ArgumentConversionError(name, raw, info.name, str(exc)) from exc


def _as_text(raw: str | list[str]) -> str:
    return " ".join(raw) if isinstance(raw, list) else raw


# ---------------------------------------------------------------------------
# Introspection
# ---------------------------------------------------------------------------


def _route_slots(route: CompiledRoute) -> dict[str, _Slot]:
    slots: dict[str, _Slot] = {}
    for segment in route.segments:
        match segment:
            case Parameter(name=name, type_constraint=constraint, is_catch_all=catch_all):
                slots[name] = _Slot(constraint=constraint, is_catch_all=catch_all)
            case Option(parameter_name=str() as name, expects_value=False):
                slots[name] = _Slot(is_flag=True)
            case Option(parameter_name=str() as name) as option:
                slots[name] = _Slot(
                    constraint=option.parameter_type, is_repeated=option.is_repeated
                )
    return slots


def _type_hints(handler: Callable[..., Any]) -> dict[str, Any]:
    target = handler
    if not (inspect.isfunction(handler) or inspect.ismethod(handler)):
        target = type(handler).__call__
    try:
        return get_type_hints(target)
    except (AttributeError, NameError, TypeError):
        return {}


def _unwrap_optional(annotation: Any) -> Any:
    """``X | None`` -> ``X``. Other unions fall back to ``str``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        non_none = [a for a in get_args(annotation) if a is not type(None)]
        return non_none[0] if len(non_none) == 1 else str
    return annotation


def _container_of(annotation: Any) -> tuple[type | None, Any]:
    """``list[int]`` -> ``(list, int)``; bare ``list`` -> ``(list, str)``."""
    if annotation in (list, tuple):
        return annotation, str
    origin = get_origin(annotation)
    if origin in (list, tuple):
        args = [a for a in get_args(annotation) if a is not Ellipsis]
        return origin, _unwrap_optional(args[0]) if args else str
    return None, annotation


def _qualname(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)

"""Tests for warble.binding: converting matched values into handler kwargs."""

import ipaddress
from enum import Enum
from pathlib import Path
from typing import Any

import pytest

from warble.binding import bind_arguments, check_handler_signature
from warble.converters import ConverterRegistry
from warble.errors import ArgumentConversionError
from warble.routing.compiler import compile_pattern
from warble.routing.resolver import match_route


class Color(Enum):
    RED = "red"
    GREEN = "green"


@pytest.fixture
def registry() -> ConverterRegistry:
    registry = ConverterRegistry()
    registry.register_enum(Color)
    return registry


def _bind(pattern: str, args: list[str], handler: Any, registry: ConverterRegistry) -> dict[str, Any]:
    match = match_route(args, compile_pattern(pattern, handler))
    assert match is not None, f"{pattern!r} did not match {args!r}"
    return bind_arguments(handler, match, registry)


class TestBindArguments:
    def test_constraint_conversion(self, registry: ConverterRegistry) -> None:
        def add(a: int, b: int) -> None: ...

        assert _bind("add {a:int} {b:int}", ["add", "2", "3"], add, registry) == {"a": 2, "b": 3}

    def test_annotation_conversion(self, registry: ConverterRegistry) -> None:
        def scale(factor: float, target: Path) -> None: ...

        kwargs = _bind("scale {factor} {target}", ["scale", "1.5", "out"], scale, registry)
        assert kwargs == {"factor": 1.5, "target": Path("out")}

    def test_ipv6_annotation(self, registry: ConverterRegistry) -> None:
        def ping(host: ipaddress.IPv6Address) -> None: ...

        kwargs = _bind("ping {host}", ["ping", "fe80::1"], ping, registry)
        assert kwargs == {"host": ipaddress.IPv6Address("fe80::1")}

    def test_ipv4_annotation_rejects_ipv6(self, registry: ConverterRegistry) -> None:
        def ping(host: ipaddress.IPv4Address) -> None: ...

        with pytest.raises(ArgumentConversionError, match="expected ipaddress"):
            _bind("ping {host}", ["ping", "::1"], ping, registry)

    def test_unannotated_stays_string(self, registry: ConverterRegistry) -> None:
        def greet(name): ...

        assert _bind("greet {name}", ["greet", "42"], greet, registry) == {"name": "42"}

    def test_flags_bind_as_bool(self, registry: ConverterRegistry) -> None:
        def build(force: bool, dry_run: bool) -> None: ...

        kwargs = _bind("build --force --dry-run", ["build", "--force"], build, registry)
        assert kwargs == {"force": True, "dry_run": False}

    def test_repeated_option_converts_each(self, registry: ConverterRegistry) -> None:
        def tag(ids: list[int]) -> None: ...

        kwargs = _bind("tag --id {ids:int}*", ["tag", "--id", "1", "--id", "2"], tag, registry)
        assert kwargs == {"ids": [1, 2]}

    def test_repeated_option_tuple(self, registry: ConverterRegistry) -> None:
        def tag(labels: tuple[str, ...]) -> None: ...

        kwargs = _bind("tag --label {labels}*", ["tag", "--label", "a", "--label", "b"], tag, registry)
        assert kwargs == {"labels": ("a", "b")}

    def test_catch_all_as_string(self, registry: ConverterRegistry) -> None:
        def echo(words: str) -> None: ...

        assert _bind("echo {*words}", ["echo", "a", "b"], echo, registry) == {"words": "a b"}

    def test_catch_all_as_list(self, registry: ConverterRegistry) -> None:
        def total(numbers: list[int]) -> None: ...

        kwargs = _bind("total {*numbers}", ["total", "1", "2", "3"], total, registry)
        assert kwargs == {"numbers": [1, 2, 3]}

    def test_optional_without_default_is_none(self, registry: ConverterRegistry) -> None:
        def greet(name: str | None) -> None: ...

        assert _bind("greet {name?}", ["greet"], greet, registry) == {"name": None}

    def test_optional_keeps_handler_default(self, registry: ConverterRegistry) -> None:
        def greet(name: str = "world") -> None: ...

        assert _bind("greet {name?}", ["greet"], greet, registry) == {}

    def test_optional_annotation_unwrapped(self, registry: ConverterRegistry) -> None:
        def retry(times: int | None = None) -> None: ...

        assert _bind("retry {times?}", ["retry", "3"], retry, registry) == {"times": 3}

    def test_enum_constraint(self, registry: ConverterRegistry) -> None:
        def paint(color: Color) -> None: ...

        assert _bind("paint {color:Color}", ["paint", "green"], paint, registry) == {
            "color": Color.GREEN
        }

    def test_enum_annotation_without_constraint(self) -> None:
        def paint(color: Color) -> None: ...

        kwargs = _bind("paint {color}", ["paint", "RED"], paint, ConverterRegistry())
        assert kwargs == {"color": Color.RED}

    def test_var_keyword_receives_extras(self, registry: ConverterRegistry) -> None:
        def deploy(env: str, **rest: Any) -> None: ...

        kwargs = _bind("deploy {env} --force --tag {t:int}", ["deploy", "prod", "--tag", "7"], deploy, registry)
        assert kwargs == {"env": "prod", "force": False, "t": 7}

    def test_unused_values_dropped(self, registry: ConverterRegistry) -> None:
        def deploy(env: str) -> None: ...

        kwargs = _bind("deploy {env} --force", ["deploy", "prod", "--force"], deploy, registry)
        assert kwargs == {"env": "prod"}


class TestConversionErrors:
    def test_constraint_failure(self, registry: ConverterRegistry) -> None:
        def add(a: int) -> None: ...

        with pytest.raises(ArgumentConversionError) as exc_info:
            _bind("add {a:int}", ["add", "two"], add, registry)
        exc = exc_info.value
        assert exc.parameter == "a"
        assert exc.raw == "two"
        assert exc.constraint == "int"
        assert "Invalid value 'two' for 'a': expected int" in str(exc)

    def test_enum_failure_lists_members(self, registry: ConverterRegistry) -> None:
        def paint(color: Color) -> None: ...

        with pytest.raises(ArgumentConversionError, match="expected one of RED, GREEN"):
            _bind("paint {color:color}", ["paint", "blue"], paint, registry)

    def test_repeated_element_failure(self, registry: ConverterRegistry) -> None:
        def tag(ids: list[int]) -> None: ...

        with pytest.raises(ArgumentConversionError) as exc_info:
            _bind("tag --id {ids:int}*", ["tag", "--id", "1", "--id", "x"], tag, registry)
        assert exc_info.value.raw == "x"

    def test_unknown_constraint(self) -> None:
        def get(item: str) -> None: ...

        with pytest.raises(ArgumentConversionError, match="unknown type constraint"):
            _bind("get {item:widget}", ["get", "a"], get, ConverterRegistry())


class TestCheckHandlerSignature:
    def test_compatible(self) -> None:
        def deploy(env: str, force: bool, note: str = "") -> None: ...

        assert check_handler_signature(deploy, compile_pattern("deploy {env} --force")) == []

    def test_missing_parameter(self) -> None:
        def deploy(env: str, region: str) -> None: ...

        problems = check_handler_signature(deploy, compile_pattern("deploy {env}"))
        assert len(problems) == 1
        assert "requires 'region'" in problems[0]
        assert "'deploy {env}'" in problems[0]

    def test_positional_only(self) -> None:
        def deploy(env: str, /) -> None: ...

        problems = check_handler_signature(deploy, compile_pattern("deploy {env}"))
        assert any("positional-only" in p for p in problems)

    def test_variadics_ignored(self) -> None:
        def anything(*args: Any, **kwargs: Any) -> None: ...

        assert check_handler_signature(anything, compile_pattern("x {a}")) == []

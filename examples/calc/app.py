"""Calc: typed parameters, enums, and overlapping routes.

Shows conversion driven by type constraints and by handler
annotations, an enum registered as a constraint, and how the most
specific route wins when several accept the same input.

Run:
    python app.py add 2 3
    python app.py round 2.5 --mode up
    python app.py sum 1 2 3.5
"""

import decimal
from enum import Enum

from warble import App, AppConfig


class Rounding(Enum):
    UP = "up"
    DOWN = "down"
    EVEN = "even"


_MODES = {
    Rounding.UP: decimal.ROUND_HALF_UP,
    Rounding.DOWN: decimal.ROUND_HALF_DOWN,
    Rounding.EVEN: decimal.ROUND_HALF_EVEN,
}

app = App(AppConfig(name="calc", strict=True))
app.register_enum(Rounding)


@app.route("add {a:double} {b:double}")
def add(a: float, b: float) -> None:
    print(a + b)


@app.route("round {value:decimal} --mode {mode:Rounding}")
def round_value(value: decimal.Decimal, mode: Rounding) -> None:
    print(value.quantize(decimal.Decimal(1), rounding=_MODES[mode]))


@app.route("round {value:decimal}")
def round_default(value: decimal.Decimal) -> None:
    print(value.quantize(decimal.Decimal(1), rounding=decimal.ROUND_HALF_EVEN))


@app.route("sum {*numbers}")
def total(numbers: list[float]) -> None:
    print(sum(numbers))


@app.route("range {start:int} {stop:int} --step? {step:int}")
def number_range(start: int, stop: int, step: int = 1) -> None:
    print(" ".join(str(n) for n in range(start, stop, step)))


@app.route("sqrt {n}")
def sqrt_any(n: str) -> int:
    print(f"not a number: {n}")
    return 1


@app.route("sqrt 0")
def sqrt_zero() -> None:
    print(0)


if __name__ == "__main__":
    raise SystemExit(app.run())

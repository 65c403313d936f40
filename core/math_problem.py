"""
MathProblem — a two-operand arithmetic expression awaiting evaluation, e.g. 3 + 5 = ?

The problem is written next to the number line and revealed piece by piece
while the Visualiser works through it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from renderer.surface import Surface


class Operator(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def animatable(self) -> bool:
        """Only addition and subtraction can be shown as hops along the line."""
        return self in (Operator.ADD, Operator.SUBTRACT)


_SYMBOLS: dict[Operator, str] = {
    Operator.ADD:      "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "×",
    Operator.DIVIDE:   "÷",
}


def format_number(value: int | float) -> str:
    """Print integral values without a decimal part and non-finite values by name."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


@dataclass(frozen=True)
class MathProblem:
    x: float
    y: float
    operator: Operator
    number_a: int
    number_b: int
    font_size: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", Operator(self.operator))

    def solve(self) -> int | float:
        """Evaluate the expression. A zero divisor yields inf/-inf/nan, never an error."""
        a, b = self.number_a, self.number_b
        if self.operator is Operator.ADD:
            return a + b
        if self.operator is Operator.SUBTRACT:
            return a - b
        if self.operator is Operator.MULTIPLY:
            return a * b
        if b == 0:
            if a == 0:
                return math.nan
            return math.inf if a > 0 else -math.inf
        return a / b

    def describe(self, stage: int | None = None) -> str:
        """
        Text of the expression at a reveal stage.

        1 → "A", 2 → "A op", 3 → "A op B", anything else → "A op B = result".
        """
        a = format_number(self.number_a)
        b = format_number(self.number_b)
        sign = self.operator.symbol
        if stage == 1:
            return a
        if stage == 2:
            return f"{a} {sign}"
        if stage == 3:
            return f"{a} {sign} {b}"
        return f"{a} {sign} {b} = {format_number(self.solve())}"

    def erase(self, surface: Surface) -> None:
        fs = self.font_size
        surface.clear_rect(self.x, self.y - fs, fs * 6, fs)

    def render(self, surface: Surface, stage: int | None = None) -> None:
        """Overwrite the previously drawn expression with the one for `stage`."""
        self.erase(surface)
        surface.draw_text(self.describe(stage), self.x, self.y, self.font_size)

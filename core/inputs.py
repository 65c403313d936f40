"""
UI input parsing — operator symbol and operand text → validated values.

Only '+' and '-' can be animated, so those are the only accepted symbols.
"""

from __future__ import annotations

import re

from core.math_problem import Operator


class InvalidProblemInput(ValueError):
    """Raised when an operator symbol or operand cannot be parsed."""


OPERATOR_SYMBOLS: dict[str, Operator] = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
}

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_operator(symbol: str) -> Operator:
    key = (symbol or "").strip()
    if key not in OPERATOR_SYMBOLS:
        allowed = ", ".join(repr(s) for s in OPERATOR_SYMBOLS)
        raise InvalidProblemInput(f"Unknown operator {symbol!r}; expected one of {allowed}")
    return OPERATOR_SYMBOLS[key]


def parse_operand(text: str | int) -> int:
    """Parse an integer operand. Rejects blanks, decimals and non-numeric text."""
    if isinstance(text, bool):
        raise InvalidProblemInput(f"Operand must be an integer, got {text!r}")
    if isinstance(text, int):
        return text
    cleaned = (text or "").strip()
    if not _INTEGER_RE.match(cleaned):
        raise InvalidProblemInput(f"Operand must be an integer, got {text!r}")
    return int(cleaned)


def parse_problem(number_a: str | int, symbol: str, number_b: str | int) -> tuple[int, Operator, int]:
    return parse_operand(number_a), parse_operator(symbol), parse_operand(number_b)

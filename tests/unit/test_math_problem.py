"""
Unit tests for core/math_problem.py
"""

import math

import pytest

from core.math_problem import MathProblem, Operator, format_number
from renderer.surface import RecordingSurface


def _problem(op="add", a=3, b=5) -> MathProblem:
    return MathProblem(x=300, y=40, operator=op, number_a=a, number_b=b, font_size=25)


# ── Operator ─────────────────────────────────────────────────────────────────

class TestOperator:

    @pytest.mark.parametrize("op,symbol", [
        (Operator.ADD, "+"),
        (Operator.SUBTRACT, "-"),
        (Operator.MULTIPLY, "×"),
        (Operator.DIVIDE, "÷"),
    ])
    def test_symbols(self, op, symbol):
        assert op.symbol == symbol

    def test_only_add_and_subtract_animatable(self):
        assert [op for op in Operator if op.animatable] == [Operator.ADD, Operator.SUBTRACT]

    def test_string_value_coerced(self):
        assert _problem("subtract").operator is Operator.SUBTRACT

    def test_unknown_operator_rejected(self):
        with pytest.raises(ValueError):
            _problem("modulo")


# ── solve() ──────────────────────────────────────────────────────────────────

class TestSolve:

    @pytest.mark.parametrize("op,a,b,expected", [
        ("add", 3, 5, 8),
        ("add", -2, -4, -6),
        ("subtract", 3, 5, -2),
        ("subtract", 2, 7, -5),
        ("subtract", -2, -4, 2),
        ("multiply", 3, -5, -15),
        ("divide", 9, 3, 3),
        ("divide", 7, 2, 3.5),
    ])
    def test_results(self, op, a, b, expected):
        assert _problem(op, a, b).solve() == expected

    def test_divide_positive_by_zero_is_infinity(self):
        assert _problem("divide", 4, 0).solve() == math.inf

    def test_divide_negative_by_zero_is_negative_infinity(self):
        assert _problem("divide", -4, 0).solve() == -math.inf

    def test_zero_divided_by_zero_is_nan(self):
        assert math.isnan(_problem("divide", 0, 0).solve())


# ── format_number ────────────────────────────────────────────────────────────

class TestFormatNumber:

    @pytest.mark.parametrize("value,text", [
        (8, "8"),
        (-2, "-2"),
        (3.0, "3"),
        (3.5, "3.5"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
        (math.nan, "NaN"),
    ])
    def test_formatting(self, value, text):
        assert format_number(value) == text


# ── describe() ───────────────────────────────────────────────────────────────

class TestDescribe:

    @pytest.mark.parametrize("stage,text", [
        (1, "3"),
        (2, "3 +"),
        (3, "3 + 5"),
        (None, "3 + 5 = 8"),
        (4, "3 + 5 = 8"),
        (0, "3 + 5 = 8"),
    ])
    def test_stages(self, stage, text):
        assert _problem().describe(stage) == text

    def test_negative_operands(self):
        assert _problem("subtract", -2, -4).describe() == "-2 - -4 = 2"

    def test_division_by_zero_text(self):
        assert _problem("divide", 1, 0).describe() == "1 ÷ 0 = Infinity"


# ── Drawing ──────────────────────────────────────────────────────────────────

class TestRender:

    def test_erase_covers_text_box(self):
        surface = RecordingSurface(700, 250)
        _problem().erase(surface)

        (op,) = surface.ops
        assert op.kind == "clear"
        assert op.args == {"x": 300, "y": 15, "w": 150, "h": 25}

    def test_render_clears_before_drawing(self):
        surface = RecordingSurface(700, 250)
        _problem().render(surface, stage=2)

        assert [op.kind for op in surface.ops] == ["clear", "text"]
        text = surface.ops[1].args
        assert text == {"text": "3 +", "x": 300, "y": 40, "font_size": 25}

    def test_render_without_stage_shows_solution(self):
        surface = RecordingSurface(700, 250)
        _problem().render(surface)
        assert surface.texts() == ["3 + 5 = 8"]

    def test_frozen(self):
        with pytest.raises(AttributeError):
            _problem().number_a = 4

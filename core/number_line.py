"""
NumberLine — layout and coordinate model for a labeled integer number line.

A number line is drawn as a horizontal axis with an arrowhead at each end,
one tick mark per integer and a numeric label under every tick. One unit of
space is reserved on each side for the arrowheads, so the line holds slots
for every integer in [min - 1, max + 1] while only [min, max] is labeled.

    slot k  (value = min - 1 + k)  →  x + k * scale * width / (max - min + 2)

The left margin slot therefore sits on the left arrow tip and the right
margin slot on the right arrow tip.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from renderer.surface import measured_text_width

if TYPE_CHECKING:
    from renderer.surface import Surface


class OutOfBounds(IndexError):
    """Raised when a value has no slot on the number line."""


class NumberPosition(NamedTuple):
    value: int
    x: float
    y: float


def label_offset_multiplier(value: int) -> float:
    """
    Horizontal label offset multiplier, bucketed by sign and digit count.

    Approximates half the width of the printed label so it sits centred
    under its tick: two-digit negatives, one-digit negatives, one-digit
    positives and two-digit positives.
    """
    if value < -9:
        return 8.5
    if value < 0:
        return 6
    if value <= 9:
        return 2.5
    return 5


class NumberLine:
    def __init__(
        self,
        width: float,
        scale: int,
        min_value: int,
        max_value: int,
        x: float,
        y: float,
    ):
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        if max_value < min_value:
            raise ValueError(f"max ({max_value}) must not be below min ({min_value})")

        self.width = width
        self.scale = scale
        self.min = min_value
        self.max = max_value
        self.x = x
        self.y = y
        self.tick_size = width / 160
        self.arrow_head_size = width / 160
        self._positions: tuple[NumberPosition, ...] | None = None

    def __repr__(self) -> str:
        return (
            f"NumberLine(width={self.width}, scale={self.scale}, min={self.min}, "
            f"max={self.max}, x={self.x}, y={self.y})"
        )

    # ── Layout ───────────────────────────────────────────────────────

    def compute_layout(self) -> tuple[NumberPosition, ...]:
        """(Re)compute the pixel position of every slot in [min - 1, max + 1]."""
        lo = self.min - 1
        span = (self.max + 1) - lo
        step = self.scale * self.width / span
        self._positions = tuple(
            NumberPosition(lo + k, self.x + k * step, self.y)
            for k in range(span + 1)
        )
        return self._positions

    @property
    def number_positions(self) -> tuple[NumberPosition, ...]:
        if self._positions is None:
            self.compute_layout()
        return self._positions

    def index_of(self, value: int) -> int:
        return value - self.min

    def value_at(self, index: int) -> int:
        return index + self.min

    def contains(self, value: int) -> bool:
        """True if `value` is a labeled integer of this line."""
        return self.min <= value <= self.max

    def position_of(self, value: int) -> tuple[float, float]:
        """Pixel (x, y) of `value`. Margin slots min - 1 and max + 1 are valid."""
        if value < self.min - 1 or value > self.max + 1:
            raise OutOfBounds(
                f"{value} is outside of the bounds [{self.min - 1}, {self.max + 1}]"
            )
        # Slot 0 is the left margin, so index_of(value) is offset by one.
        slot = self.number_positions[self.index_of(value) + 1]
        return slot.x, slot.y

    def unit_distance(self) -> float:
        positions = self.number_positions
        return positions[1].x - positions[0].x

    # ── Text dumps ───────────────────────────────────────────────────

    def describe_position(self, value: int) -> str:
        if not self.contains(value):
            raise OutOfBounds(f"{value} is outside of the bounds [{self.min}, {self.max}]")
        px, py = self.position_of(value)
        return f"(number: {value}, x coordinate: {px}, y coordinate: {py})"

    def summary(self) -> str:
        return "\n".join(
            self.describe_position(v) for v in range(self.min, self.max + 1)
        )

    # ── Drawing ──────────────────────────────────────────────────────

    def render(self, surface: Surface) -> None:
        self.compute_layout()
        self.render_axis(surface)
        self.render_arrow_head(surface, "left")
        self.render_arrow_head(surface, "right")
        self.render_numbers_and_ticks(
            surface,
            align_x=-self.tick_size / 2,
            align_y=self.tick_size * 3.5,
            font_size=self.tick_size * 5,
        )

    def render_axis(self, surface: Surface) -> None:
        surface.draw_line((self.x, self.y), (self.x + self.width, self.y))

    def render_arrow_head(self, surface: Surface, direction: str) -> None:
        a = self.arrow_head_size
        if direction == "left":
            tip = (self.x, self.y)
            back = self.x + a
        elif direction == "right":
            tip = (self.x + self.width, self.y)
            back = self.x + self.width - a
        else:
            raise ValueError(f"Unknown arrowhead direction: {direction!r}")
        surface.draw_line((back, self.y - a), tip)
        surface.draw_line(tip, (back, self.y + a))

    def render_numbers_and_ticks(
        self,
        surface: Surface,
        align_x: float,
        align_y: float,
        font_size: float,
    ) -> None:
        for value in range(self.min, self.max + 1):
            px, py = self.position_of(value)
            label = str(value)
            measured = measured_text_width(surface, label, font_size)
            if measured is not None:
                label_x = px - measured / 2
            else:
                label_x = px + label_offset_multiplier(value) * align_x
            surface.draw_text(label, label_x, py + 1.5 * align_y, font_size)
            surface.draw_line((px, py - self.tick_size), (px, py + self.tick_size))

"""
Drawing surfaces — the pixel-space canvas the animation draws on.

Coordinates are pixels with the origin top-left, x increasing right and
y increasing down. Angles follow the same y-down convention, so sweeping
from π to 2π with counterclockwise=False traces the upper half of a circle.

RecordingSurface keeps a timestamped timeline of every primitive so the
same animation can be streamed as JSON, replayed by Manim, or inspected
in tests.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable

Point = tuple[float, float]


@runtime_checkable
class Surface(Protocol):
    """Primitive drawing operations consumed by NumberLine, MathProblem and Visualiser."""

    width: float
    height: float

    def draw_line(self, p1: Point, p2: Point) -> None: ...

    def draw_arc(
        self,
        center: Point,
        radius: float,
        start_angle: float,
        end_angle: float,
        counterclockwise: bool = False,
    ) -> None: ...

    def draw_text(self, text: str, x: float, y: float, font_size: float) -> None: ...

    def fill_circle(self, center: Point, radius: float, color: str = "black") -> None: ...

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def draw_image(self, handle: Any, x: float, y: float, w: float, h: float) -> None: ...


def measured_text_width(surface: Surface, text: str, font_size: float) -> float | None:
    """Return the rendered width of `text` if the surface can measure it, else None."""
    measure = getattr(surface, "measure_text", None)
    if measure is None:
        return None
    return measure(text, font_size)


def inside_rect(px: float, py: float, x: float, y: float, w: float, h: float) -> bool:
    """True if (px, py) lies within the rectangle anchored top-left at (x, y)."""
    return x <= px <= x + w and y <= py <= y + h


# ── Recorded timeline ────────────────────────────────────────────────────────

@dataclass
class DrawOp:
    """One primitive drawn at `at_ms` on the animation clock."""

    kind: str
    at_ms: float
    args: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


class RecordingSurface:
    """
    Surface that records each primitive as a DrawOp.

    Args:
        width, height: Canvas size in pixels.
        clock:         Returns the current animation time in ms (usually the
                       scheduler's `now`). Defaults to a constant 0.
        listener:      Optional callback invoked with every new DrawOp, used to
                       stream ops while they are produced.
    """

    def __init__(
        self,
        width: float,
        height: float,
        clock: Callable[[], float] | None = None,
        listener: Callable[[DrawOp], None] | None = None,
    ):
        self.width = width
        self.height = height
        self._clock = clock or (lambda: 0.0)
        self._listener = listener
        self.ops: list[DrawOp] = []

    def _record(self, kind: str, **args) -> None:
        op = DrawOp(kind=kind, at_ms=self._clock(), args=args)
        self.ops.append(op)
        if self._listener is not None:
            self._listener(op)

    def draw_line(self, p1: Point, p2: Point) -> None:
        self._record("line", p1=list(p1), p2=list(p2))

    def draw_arc(self, center, radius, start_angle, end_angle, counterclockwise=False) -> None:
        self._record(
            "arc",
            center=list(center),
            radius=radius,
            start_angle=start_angle,
            end_angle=end_angle,
            counterclockwise=counterclockwise,
        )

    def draw_text(self, text: str, x: float, y: float, font_size: float) -> None:
        self._record("text", text=text, x=x, y=y, font_size=font_size)

    def fill_circle(self, center, radius, color="black") -> None:
        self._record("circle", center=list(center), radius=radius, color=color)

    def clear_rect(self, x, y, w, h) -> None:
        self._record("clear", x=x, y=y, w=w, h=h)

    def draw_image(self, handle, x, y, w, h) -> None:
        self._record("image", pose=handle.pose, path=str(handle.path), x=x, y=y, w=w, h=h)

    # ── Inspection helpers ───────────────────────────────────────────

    def of_kind(self, kind: str) -> list[DrawOp]:
        return [op for op in self.ops if op.kind == kind]

    def texts(self) -> list[str]:
        return [op.args["text"] for op in self.of_kind("text")]

    @property
    def duration_ms(self) -> float:
        return self.ops[-1].at_ms if self.ops else 0.0

    def to_dicts(self) -> list[dict]:
        return [op.to_dict() for op in self.ops]

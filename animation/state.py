"""
Animation state for one running hop sequence.

The sequence is a two-level state machine:

  stage   advanced once per stage-timer tick (-4 … N + 1)
  hop     while a hop is drawing, a HopFrame advanced once per frame timer

Both live in an AnimationContext owned by exactly one running sequence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from animation.scheduler import TimerHandle
from core.math_problem import Operator

# ── Stages ────────────────────────────────────────────────────────────────────

SHOW_FIRST_OPERAND  = -4
PLACE_MARKER        = -3
SHOW_OPERATOR       = -2
FACE_DIRECTION      = -1
SHOW_SECOND_OPERAND = 0
FIRST_HOP           = 1


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.RIGHT else -1


def hop_direction(operator: Operator, number_b: int) -> Direction:
    """
    Direction of every hop for `operator` applied with second operand `number_b`.

    Adding a non-negative number or subtracting a negative one moves right;
    the other two combinations move left.
    """
    if operator is Operator.ADD:
        return Direction.RIGHT if number_b >= 0 else Direction.LEFT
    if operator is Operator.SUBTRACT:
        return Direction.LEFT if number_b >= 0 else Direction.RIGHT
    raise ValueError(f"{operator.value} cannot be shown as hops")


# ── Hop sub-animation ─────────────────────────────────────────────────────────

@dataclass
class HopFrame:
    """
    Progress of one semicircular hop.

    Right hops sweep clockwise from π to 2π, left hops counter-clockwise from
    2π to π (pixel space, y down), so both arcs bulge above the line.
    """

    center: tuple[float, float]
    radius: float
    direction: Direction
    frames: int
    angle: float = 0.0
    end_angle: float = 0.0
    increment: float = 0.0
    frame: int = 0
    done: bool = False
    pending: TimerHandle | None = None

    def __post_init__(self) -> None:
        if self.frames < 1:
            raise ValueError(f"frames must be at least 1, got {self.frames}")
        if self.direction is Direction.RIGHT:
            self.angle, self.end_angle = math.pi, 2 * math.pi
        else:
            self.angle, self.end_angle = 2 * math.pi, math.pi
        self.increment = (self.end_angle - self.angle) / self.frames

    @property
    def counterclockwise(self) -> bool:
        return self.direction is Direction.LEFT

    def _reaches_end(self, angle: float) -> bool:
        if self.direction is Direction.RIGHT:
            return angle >= self.end_angle
        return angle <= self.end_angle

    def next_slice(self) -> tuple[float, float]:
        """
        Advance one frame and return the (start, end) angles to draw.

        The last slice stops exactly on the end angle, after which `done` is set.
        """
        if self.done:
            raise RuntimeError("Hop already finished")
        start = self.angle
        nxt = start + self.increment
        self.frame += 1
        if self.frame >= self.frames or self._reaches_end(nxt):
            self.angle = self.end_angle
            self.done = True
            return start, self.end_angle
        self.angle = nxt
        return start, nxt


# ── Sequence context ──────────────────────────────────────────────────────────

@dataclass
class AnimationContext:
    origin: int
    hops: int
    direction: Direction
    stage: int = SHOW_FIRST_OPERAND
    hop: HopFrame | None = None
    timer: TimerHandle | None = None
    finished: bool = False

    @property
    def terminal_stage(self) -> int:
        return self.hops + 1

    def target_of(self, hop_number: int) -> int:
        """Value on the line reached by hop `hop_number` (1-based)."""
        return self.origin + self.direction.sign * hop_number

"""
Visualiser — walks a figure along the number line to solve a math problem.

One call to animate_steps() runs the whole sequence on a repeating stage
timer (one tick per step_duration):

  -4        write "A"
  -3        mark A on the line, standing sprite above it
  -2        write "A op"
  -1        sprite turns to face the direction of travel
   0        write "A op B"
   1 … N    one hop per tick, N = |B|
   N + 1    write "A op B = result" and stop the timer

Every hop is its own sub-animation: a semicircular arc traced in `frames`
slices by a self-rescheduling one-shot timer, finishing within one tick.
"""

from __future__ import annotations

import logging
from typing import Callable

from animation.scheduler import Scheduler
from animation.sprites import Sprite, SpriteSource
from animation.state import (
    FACE_DIRECTION,
    PLACE_MARKER,
    SHOW_FIRST_OPERAND,
    SHOW_OPERATOR,
    SHOW_SECOND_OPERAND,
    AnimationContext,
    Direction,
    HopFrame,
    hop_direction,
)
from core.math_problem import MathProblem, Operator
from core.number_line import NumberLine
from renderer.surface import Surface

log = logging.getLogger(__name__)

OUT_OF_BOUNDS_TEXT = "The answer does not fit on this numberline"

# Sprite placement relative to the marker, in tick sizes.
SPRITE_RISE = 16
STAND_OFFSET = 2
TURN_OFFSET = 2.5


class UnsupportedOperator(ValueError):
    """Raised when a problem's operator cannot be shown as hops."""


class AnimationInFlight(RuntimeError):
    """Raised when a sequence is started while another is still running."""


class Visualiser:
    def __init__(
        self,
        number_line: NumberLine,
        math_problem: MathProblem,
        surface: Surface,
        scheduler: Scheduler,
        sprites: SpriteSource | None = None,
        *,
        step_duration_ms: float = 1000.0,
        frames: int = 20,
        sprite_scale: float = 0.2,
        on_complete: Callable[[], None] | None = None,
    ):
        self.number_line = number_line
        self.math_problem = math_problem
        self.surface = surface
        self.scheduler = scheduler
        self.sprites = sprites
        self.step_duration_ms = step_duration_ms
        self.frames = frames
        self.sprite_scale = sprite_scale
        self.on_complete = on_complete
        self._context: AnimationContext | None = None

    @property
    def in_flight(self) -> bool:
        return self._context is not None and not self._context.finished

    @property
    def context(self) -> AnimationContext | None:
        return self._context

    # ── Pre-flight ───────────────────────────────────────────────────

    def fits(self) -> bool:
        """True if both the starting operand and the answer are labeled on the line."""
        line = self.number_line
        return line.contains(self.math_problem.number_a) and line.contains(self.math_problem.solve())

    def report_out_of_bounds(self) -> None:
        problem, line = self.math_problem, self.number_line
        if line.contains(problem.number_a):
            what = f"The answer to {problem.describe(3)}"
        else:
            what = f"The first operand of {problem.describe(3)}"
        log.warning(
            "%s is outside the bounds, (%d, %d), of the number line.",
            what, line.min, line.max,
        )
        self.surface.draw_text(
            OUT_OF_BOUNDS_TEXT,
            self.surface.width / 6,
            problem.font_size * 1.5,
            problem.font_size,
        )

    # ── Sequence ─────────────────────────────────────────────────────

    def animate_steps(self) -> bool:
        """
        Start the staged animation.

        Returns:
            True if the sequence was started, False if it was aborted because
            the problem does not fit on the line (a message is drawn instead).

        Raises:
            UnsupportedOperator: For multiply/divide.
            AnimationInFlight:   If a previous sequence has not finished yet.
        """
        problem = self.math_problem
        if not problem.operator.animatable:
            raise UnsupportedOperator(f"Cannot animate {problem.operator.value}: {problem.describe()}")
        if self.in_flight:
            raise AnimationInFlight("A sequence is already running on this visualiser")

        if not self.fits():
            self.report_out_of_bounds()
            return False

        self._context = AnimationContext(
            origin=problem.number_a,
            hops=abs(problem.number_b),
            direction=hop_direction(problem.operator, problem.number_b),
        )
        log.info(
            "Animating %s: %d hop(s) %s",
            problem.describe(3), self._context.hops, self._context.direction.value,
        )
        self._context.timer = self.scheduler.call_every(self.step_duration_ms, self._advance)
        return True

    def cancel(self) -> bool:
        """
        Stop a running sequence where it is: no further stage or hop frame is drawn.

        Returns False if nothing was in flight. on_complete is not called.
        """
        if not self.in_flight:
            return False
        ctx = self._context
        ctx.timer.cancel()
        if ctx.hop is not None and ctx.hop.pending is not None:
            ctx.hop.pending.cancel()
        ctx.finished = True
        log.info("Cancelled %s at stage %d", self.math_problem.describe(3), ctx.stage)
        return True

    def _advance(self) -> None:
        ctx = self._context
        stage = ctx.stage
        problem, line = self.math_problem, self.number_line
        ax, ay = line.position_of(ctx.origin)
        tick = line.tick_size

        if stage == SHOW_FIRST_OPERAND:
            problem.render(self.surface, 1)
        elif stage == PLACE_MARKER:
            self.draw_start_point()
            self.draw_sprite(ax - STAND_OFFSET * tick, ay - SPRITE_RISE * tick, "stand")
        elif stage == SHOW_OPERATOR:
            problem.render(self.surface, 2)
        elif stage == FACE_DIRECTION:
            pose = "lookRight" if problem.operator is Operator.ADD else "lookLeft"
            self.draw_sprite(ax - TURN_OFFSET * tick, ay - SPRITE_RISE * tick, pose)
        elif stage == SHOW_SECOND_OPERAND:
            problem.render(self.surface, 3)
        elif stage <= ctx.hops:
            x, y, radius = self.hop_geometry(ctx.target_of(stage), ctx.direction)
            ctx.hop = self.animate_step(x, y, radius, ctx.direction, self.step_duration_ms)
        else:
            problem.render(self.surface)
            ctx.timer.cancel()
            ctx.finished = True
            log.info("Finished %s", problem.describe())
            if self.on_complete is not None:
                self.on_complete()
            return

        log.debug("Stage %d done at %.0f ms", stage, self.scheduler.now())
        ctx.stage += 1

    # ── Hops ─────────────────────────────────────────────────────────

    def hop_geometry(self, target: int, direction: Direction) -> tuple[float, float, float]:
        """Centre (x, y) and radius of the arc that lands on `target`."""
        tx, ty = self.number_line.position_of(target)
        radius = self.number_line.unit_distance() / 2
        if direction is Direction.RIGHT:
            return tx - radius, ty, radius
        return tx + radius, ty, radius

    def animate_step(
        self,
        x: float,
        y: float,
        radius: float,
        direction: Direction,
        duration: float,
    ) -> HopFrame:
        """Trace one hop arc slice by slice over `duration` ms."""
        hop = HopFrame(center=(x, y), radius=radius, direction=direction, frames=self.frames)
        interval = duration / self.frames

        def _frame() -> None:
            start, end = hop.next_slice()
            # Armed before drawing so a cancel() from a surface listener reaches it.
            hop.pending = None if hop.done else self.scheduler.call_later(interval, _frame)
            self.surface.draw_arc(hop.center, hop.radius, start, end, hop.counterclockwise)

        _frame()
        return hop

    def draw_steps(self) -> None:
        """Draw every hop arc at once — the finished solution without animation."""
        problem = self.math_problem
        direction = hop_direction(problem.operator, problem.number_b)
        for i in range(1, abs(problem.number_b) + 1):
            target = problem.number_a + direction.sign * i
            x, y, radius = self.hop_geometry(target, direction)
            hop = HopFrame(center=(x, y), radius=radius, direction=direction, frames=1)
            start, end = hop.next_slice()
            self.surface.draw_arc(hop.center, hop.radius, start, end, hop.counterclockwise)

    # ── Marker & sprite ──────────────────────────────────────────────

    def draw_start_point(self) -> None:
        center = self.number_line.position_of(self.math_problem.number_a)
        self.surface.fill_circle(center, self.number_line.tick_size, "black")

    def draw_sprite(self, x: float, y: float, pose: str) -> None:
        if self.sprites is None:
            return

        def _draw(sprite: Sprite) -> None:
            self.surface.draw_image(
                sprite, x, y,
                sprite.width * self.sprite_scale,
                sprite.height * self.sprite_scale,
            )

        self.sprites.load(pose, _draw)

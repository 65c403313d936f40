"""
Session glue — the "Visualise" button.

Clears the surface, lays out and draws the number line, builds the math
problem from the user's input and starts the Visualiser. Geometry and
timing come from config.settings.
"""

from __future__ import annotations

import logging
from typing import Callable

from animation.scheduler import Scheduler, VirtualScheduler
from animation.sprites import SpriteSource
from animation.visualiser import UnsupportedOperator, Visualiser
from config.settings import Settings, settings as default_settings
from core.math_problem import MathProblem, Operator
from core.number_line import NumberLine
from renderer.surface import RecordingSurface, Surface

log = logging.getLogger(__name__)


def build_number_line(cfg: Settings) -> NumberLine:
    return NumberLine(
        width=cfg.line_width,
        scale=cfg.line_scale,
        min_value=cfg.line_min,
        max_value=cfg.line_max,
        x=cfg.line_x,
        y=cfg.line_y,
    )


def build_math_problem(operator: Operator | str, number_a: int, number_b: int, cfg: Settings) -> MathProblem:
    return MathProblem(
        x=cfg.problem_x,
        y=cfg.problem_y,
        operator=Operator(operator),
        number_a=number_a,
        number_b=number_b,
        font_size=cfg.problem_font_size,
    )


def start_visualisation(
    surface: Surface,
    scheduler: Scheduler,
    operator: Operator | str,
    number_a: int,
    number_b: int,
    cfg: Settings | None = None,
    on_complete: Callable[[], None] | None = None,
) -> tuple[Visualiser, bool]:
    """
    Draw a fresh number line and start animating the problem on it.

    Returns:
        (visualiser, started) — started is False when the answer does not fit.
    """
    cfg = cfg or default_settings
    surface.clear_rect(0, 0, surface.width, surface.height)

    line = build_number_line(cfg)
    line.render(surface)

    problem = build_math_problem(operator, number_a, number_b, cfg)
    visualiser = Visualiser(
        line,
        problem,
        surface,
        scheduler,
        SpriteSource(cfg.sprite_dir, scheduler),
        step_duration_ms=cfg.step_duration_ms,
        frames=cfg.hop_frames,
        sprite_scale=cfg.sprite_scale,
        on_complete=on_complete,
    )
    started = visualiser.animate_steps()
    return visualiser, started


def record_timeline(
    operator: Operator | str,
    number_a: int,
    number_b: int,
    cfg: Settings | None = None,
) -> tuple[RecordingSurface, bool]:
    """Run the whole sequence on a virtual clock and return the recorded surface."""
    cfg = cfg or default_settings
    scheduler = VirtualScheduler()
    surface = RecordingSurface(cfg.canvas_width, cfg.canvas_height, clock=scheduler.now)
    _, started = start_visualisation(surface, scheduler, operator, number_a, number_b, cfg)
    scheduler.run_until_idle()
    log.info("Recorded %d draw ops over %.0f ms", len(surface.ops), surface.duration_ms)
    return surface, started


def render_solution(
    surface: Surface,
    operator: Operator | str,
    number_a: int,
    number_b: int,
    cfg: Settings | None = None,
) -> bool:
    """
    Draw the finished solution in one pass: line, start marker, every hop and
    the full equation. Returns False (and draws the message) if it does not fit.
    """
    cfg = cfg or default_settings
    problem = build_math_problem(operator, number_a, number_b, cfg)
    if not problem.operator.animatable:
        raise UnsupportedOperator(f"Cannot draw {problem.operator.value} as hops: {problem.describe()}")

    surface.clear_rect(0, 0, surface.width, surface.height)
    line = build_number_line(cfg)
    line.render(surface)

    visualiser = Visualiser(line, problem, surface, VirtualScheduler())
    if not visualiser.fits():
        visualiser.report_out_of_bounds()
        return False

    visualiser.draw_start_point()
    visualiser.draw_steps()
    problem.render(surface)
    return True

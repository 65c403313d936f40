"""
Pixel canvas → Manim frame mapping.

The animation draws in pixels (origin top-left, y down). Manim works in
frame units centred on the origin with y up. The canvas is scaled uniformly
to fit the safe zone and centred in the frame.

Manim frame (16:9): 14.222... × 8 units
Safe zone: 13 × 7 units
"""

from __future__ import annotations

import math

FRAME_WIDTH: float = 8.0 * 16 / 9
FRAME_HEIGHT: float = 8.0

SAFE_WIDTH: float = 13.0
SAFE_HEIGHT: float = 7.0

# Manim font_size that renders one frame unit tall (font_size 48 ≈ 0.75 units).
FONT_SIZE_PER_UNIT: float = 48 / 0.75


def canvas_scale(
    canvas_width: float,
    canvas_height: float,
    max_width: float = SAFE_WIDTH,
    max_height: float = SAFE_HEIGHT,
) -> float:
    """Frame units per pixel so the whole canvas fits inside the safe zone."""
    return min(max_width / canvas_width, max_height / canvas_height)


def to_frame(
    px: float,
    py: float,
    canvas_width: float,
    canvas_height: float,
    scale: float,
) -> tuple[float, float, float]:
    """Convert a pixel point to a Manim (x, y, z) point."""
    return (
        (px - canvas_width / 2) * scale,
        (canvas_height / 2 - py) * scale,
        0.0,
    )


def arc_to_frame(start: float, end: float, counterclockwise: bool) -> tuple[float, float]:
    """
    Convert a y-down canvas arc to Manim's (start_angle, angle).

    Flipping the y axis negates every angle, so a clockwise canvas sweep
    becomes a clockwise (negative) Manim sweep.
    """
    tau = 2 * math.pi
    if counterclockwise:
        sweep = -((start - end) % tau)
        if sweep == 0 and start != end:
            sweep = -tau
    else:
        sweep = (end - start) % tau
        if sweep == 0 and start != end:
            sweep = tau
    return -start, -sweep


def font_size_to_frame(font_px: float, scale: float) -> float:
    """Manim font_size matching a pixel font size after scaling."""
    return font_px * scale * FONT_SIZE_PER_UNIT

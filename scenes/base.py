"""
BaseCanvasScene — Foundation for all number-line scenes.

Replays a recorded pixel-space timeline (see renderer.surface.RecordingSurface)
as Manim mobjects: each op becomes a mobject added at its timestamp, and
clear ops remove whatever was anchored inside the cleared rectangle.
"""

from __future__ import annotations

from itertools import groupby

import numpy as np
from manim import (
    BLACK,
    DL,
    UL,
    WHITE,
    Arc,
    Dot,
    ImageMobject,
    Line,
    Mobject,
    Scene,
    Text,
    config as manim_config,
)

from renderer.frame_mapping import (
    arc_to_frame,
    canvas_scale,
    font_size_to_frame,
    to_frame,
)
from renderer.surface import inside_rect

# ── Color resolver ────────────────────────────────────────────────────────────
# Canvas color names → Manim colors. Hex strings (#RRGGBB) pass through.
_COLOR_MAP: dict[str, object] = {
    "BLACK": BLACK,
    "WHITE": WHITE,
}


def resolve_color(name: str | object, fallback=BLACK) -> object:
    """
    Resolve a color name to a Manim color object.

    Unknown names fall back to `fallback` (default: BLACK).
    """
    if not isinstance(name, str):
        return name
    upper = name.strip().upper()
    if upper in _COLOR_MAP:
        return _COLOR_MAP[upper]
    if upper.startswith("#") and len(upper) in (7, 9):
        return name
    return fallback


class BaseCanvasScene(Scene):
    """
    Base scene that plays back canvas draw ops.

    Provides:
    - Light/dark theme (ink color follows the theme)
    - Pixel → frame coordinate mapping
    - Timed replay with waits between op timestamps
    """

    theme: str = "light"
    canvas_width: float = 700
    canvas_height: float = 250
    stroke_width: float = 2.0
    tail_seconds: float = 1.5

    def setup_theme(self) -> None:
        if self.theme == "dark":
            self.camera.background_color = "#1e1e2e"
            self.ink = WHITE
        else:
            self.camera.background_color = "#fafafa"
            self.ink = BLACK
        self._scale = canvas_scale(self.canvas_width, self.canvas_height)
        self._placed: list[tuple[tuple[float, float], Mobject]] = []

    # ── Coordinates ──────────────────────────────────────────────────

    def point(self, px: float, py: float) -> np.ndarray:
        return np.array(to_frame(px, py, self.canvas_width, self.canvas_height, self._scale))

    def ink_color(self, name: str | None):
        # Black on the canvas means "ink", which is white on a dark theme.
        if name is None or name.strip().lower() == "black":
            return self.ink
        return resolve_color(name, fallback=self.ink)

    # ── Op → mobject ─────────────────────────────────────────────────

    def make_mobject(self, op: dict) -> tuple[tuple[float, float], Mobject] | None:
        kind, a = op["kind"], op["args"]
        s = self._scale

        if kind == "line":
            mob = Line(self.point(*a["p1"]), self.point(*a["p2"]),
                       color=self.ink, stroke_width=self.stroke_width)
            return tuple(a["p1"]), mob
        if kind == "arc":
            start_angle, angle = arc_to_frame(a["start_angle"], a["end_angle"], a["counterclockwise"])
            mob = Arc(radius=a["radius"] * s, start_angle=start_angle, angle=angle,
                      arc_center=self.point(*a["center"]),
                      color=self.ink, stroke_width=self.stroke_width)
            return tuple(a["center"]), mob
        if kind == "text":
            mob = Text(a["text"], font="serif", color=self.ink,
                       font_size=font_size_to_frame(a["font_size"], s))
            mob.move_to(self.point(a["x"], a["y"]), aligned_edge=DL)
            return (a["x"], a["y"]), mob
        if kind == "circle":
            mob = Dot(self.point(*a["center"]), radius=a["radius"] * s,
                      color=self.ink_color(a.get("color")))
            return tuple(a["center"]), mob
        if kind == "image":
            mob = ImageMobject(a["path"])
            mob.scale_to_fit_width(a["w"] * s)
            mob.move_to(self.point(a["x"], a["y"]), aligned_edge=UL)
            return (a["x"], a["y"]), mob
        return None

    def apply_op(self, op: dict) -> None:
        if op["kind"] == "clear":
            a = op["args"]
            keep, drop = [], []
            for anchor, mob in self._placed:
                inside = inside_rect(anchor[0], anchor[1], a["x"], a["y"], a["w"], a["h"])
                (drop if inside else keep).append((anchor, mob))
            if drop:
                self.remove(*[mob for _, mob in drop])
            self._placed = keep
            return
        placed = self.make_mobject(op)
        if placed is not None:
            self._placed.append(placed)
            self.add(placed[1])

    # ── Replay ───────────────────────────────────────────────────────

    def replay(self, ops: list[dict]) -> None:
        """Add each op's mobject at its timestamp, waiting in between."""
        min_wait = 1.0 / manim_config.frame_rate
        clock_ms = 0.0
        pending = 0.0
        for at_ms, group in groupby(ops, key=lambda op: op["at_ms"]):
            pending += max(at_ms - clock_ms, 0.0) / 1000.0
            clock_ms = at_ms
            # Waits shorter than one video frame are merged into the next one.
            if pending >= min_wait:
                self.wait(pending)
                pending = 0.0
            for op in group:
                self.apply_op(op)
        self.wait(pending + self.tail_seconds)

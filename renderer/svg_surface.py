"""
SVG surface — accumulates drawing primitives into a standalone SVG document.

Used for static snapshots of the finished solution. Every element keeps an
anchor point; clear_rect drops the elements anchored inside the rectangle,
which is how MathProblem overwrites its previous text.
"""

from __future__ import annotations

import html
import math
from pathlib import Path

from renderer.surface import Point, inside_rect

STROKE = "#000000"
BG_COLOR = "#FFFFFF"
FONT_FAMILY = "serif"


def _svg_line(p1: Point, p2: Point, color: str = STROKE, sw: float = 1) -> str:
    return (
        f'<line x1="{p1[0]:.2f}" y1="{p1[1]:.2f}" x2="{p2[0]:.2f}" y2="{p2[1]:.2f}" '
        f'stroke="{color}" stroke-width="{sw}"/>'
    )


def _svg_arc(
    center: Point,
    radius: float,
    start: float,
    end: float,
    counterclockwise: bool,
    color: str = STROKE,
    sw: float = 1,
) -> str:
    cx, cy = center
    x0, y0 = cx + radius * math.cos(start), cy + radius * math.sin(start)
    x1, y1 = cx + radius * math.cos(end), cy + radius * math.sin(end)
    large = 1 if abs(end - start) > math.pi else 0
    # SVG sweep-flag 1 is the increasing-angle direction in y-down space.
    sweep = 0 if counterclockwise else 1
    return (
        f'<path d="M {x0:.2f} {y0:.2f} A {radius:.2f} {radius:.2f} 0 {large} {sweep} {x1:.2f} {y1:.2f}" '
        f'fill="none" stroke="{color}" stroke-width="{sw}"/>'
    )


def _svg_text(text: str, x: float, y: float, size: float, color: str = STROKE) -> str:
    return (
        f'<text x="{x:.2f}" y="{y:.2f}" font-size="{size:.2f}" fill="{color}" '
        f'font-family="{FONT_FAMILY}">{html.escape(text)}</text>'
    )


def _svg_circle(center: Point, radius: float, fill: str) -> str:
    return f'<circle cx="{center[0]:.2f}" cy="{center[1]:.2f}" r="{radius:.2f}" fill="{fill}"/>'


def _svg_image(href: str, x: float, y: float, w: float, h: float) -> str:
    return (
        f'<image href="{html.escape(href)}" x="{x:.2f}" y="{y:.2f}" '
        f'width="{w:.2f}" height="{h:.2f}"/>'
    )


class SvgSurface:
    def __init__(self, width: float, height: float, background: str = BG_COLOR):
        self.width = width
        self.height = height
        self.background = background
        self._elements: list[tuple[Point, str]] = []

    def __len__(self) -> int:
        return len(self._elements)

    def _add(self, anchor: Point, element: str) -> None:
        self._elements.append(((float(anchor[0]), float(anchor[1])), element))

    def draw_line(self, p1: Point, p2: Point) -> None:
        self._add(p1, _svg_line(p1, p2))

    def draw_arc(self, center, radius, start_angle, end_angle, counterclockwise=False) -> None:
        self._add(center, _svg_arc(center, radius, start_angle, end_angle, counterclockwise))

    def draw_text(self, text: str, x: float, y: float, font_size: float) -> None:
        self._add((x, y), _svg_text(text, x, y, font_size))

    def fill_circle(self, center, radius, color="black") -> None:
        self._add(center, _svg_circle(center, radius, color))

    def clear_rect(self, x, y, w, h) -> None:
        self._elements = [
            (anchor, el) for anchor, el in self._elements
            if not inside_rect(anchor[0], anchor[1], x, y, w, h)
        ]

    def draw_image(self, handle, x, y, w, h) -> None:
        self._add((x, y), _svg_image(Path(handle.path).resolve().as_uri(), x, y, w, h))

    def to_svg(self) -> str:
        body = "\n  ".join(el for _, el in self._elements)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" height="{self.height}" '
            f'viewBox="0 0 {self.width} {self.height}">\n'
            f'  <rect x="0" y="0" width="{self.width}" height="{self.height}" fill="{self.background}"/>\n'
            f"  {body}\n"
            f"</svg>\n"
        )

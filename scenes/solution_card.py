"""
SolutionCardScene — the finished solution shown as a still card.

Scene params: same as NumberLineHopScene.
"""

from __future__ import annotations

from animation.session import render_solution
from config.settings import settings
from renderer.surface import RecordingSurface
from scenes.base import BaseCanvasScene


class SolutionCardScene(BaseCanvasScene):
    number_a: int = 3
    operator: str = "add"
    number_b: int = 5
    tail_seconds: float = 4.0

    def construct(self) -> None:
        self.setup_theme()
        surface = RecordingSurface(settings.canvas_width, settings.canvas_height)
        render_solution(surface, self.operator, int(self.number_a), int(self.number_b), settings)
        self.replay(surface.to_dicts())

"""
NumberLineHopScene — the full hop animation for one problem.

Scene params:
  number_a: int — starting operand
  operator: str — "add" | "subtract"
  number_b: int — number of hops (sign picks the direction)
"""

from __future__ import annotations

from animation.session import record_timeline
from config.settings import settings
from scenes.base import BaseCanvasScene


class NumberLineHopScene(BaseCanvasScene):
    number_a: int = 3
    operator: str = "add"
    number_b: int = 5

    def construct(self) -> None:
        self.setup_theme()
        surface, _ = record_timeline(self.operator, int(self.number_a), int(self.number_b), settings)
        self.replay(surface.to_dicts())

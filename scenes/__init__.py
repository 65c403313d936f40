"""
Scene registry.

build_problem_scene(problem, style) → a dynamically created Scene subclass
    configured with the problem's operands and the style.

The returned class can be subclassed (by the generated .py file) so Manim
finds a concrete, uniquely named scene.
"""

from __future__ import annotations

import re

from scenes.base import BaseCanvasScene
from scenes.number_line_hop import NumberLineHopScene
from scenes.solution_card import SolutionCardScene

_REGISTRY: dict[str, type[BaseCanvasScene]] = {
    "number_line_hop": NumberLineHopScene,
    "solution_card":   SolutionCardScene,
}


def build_problem_scene(problem: dict, style: dict) -> type[BaseCanvasScene]:
    """
    Return a BaseCanvasScene subclass configured for this problem.

    Args:
        problem: Dict with 'job_id', 'kind', 'number_a', 'operator', 'number_b'.
        style:   Dict with 'theme' and canvas size.

    Returns:
        A dynamically created class inheriting from the appropriate scene class.
    """
    kind = problem.get("kind") or "number_line_hop"
    base = _REGISTRY.get(kind, NumberLineHopScene)

    attrs: dict = {k: problem[k] for k in ("number_a", "operator", "number_b") if k in problem}
    attrs["theme"] = style.get("theme", "light")
    for key in ("canvas_width", "canvas_height"):
        if key in style:
            attrs[key] = style[key]

    job_id   = problem.get("job_id", "unknown")
    safe_id  = re.sub(r"[^a-zA-Z0-9]", "_", str(job_id))
    cls_name = f"_ProblemScene_{safe_id}"

    return type(cls_name, (base,), attrs)


__all__ = [
    "build_problem_scene",
    "BaseCanvasScene",
    "NumberLineHopScene",
    "SolutionCardScene",
]

"""
render_problem.py — Render one problem to .mp4 (or just an SVG snapshot).

Usage:
    python scripts/render_problem.py 3 + 5
    python scripts/render_problem.py -- -2 - -4 --quality low
    python scripts/render_problem.py 9 + 5 --svg out/solution.svg
    python scripts/render_problem.py 3 + 5 --svg
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import shutil
import sys
import time
from pathlib import Path

# ── project root on path ──────────────────────────────────────────────────────
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("render_problem")

from animation.session import render_solution
from config.settings import settings
from core.inputs import InvalidProblemInput, parse_problem
from core.math_problem import Operator
from renderer import render_engine, scene_builder
from renderer.svg_surface import SvgSurface


def write_snapshot(operator: Operator, number_a: int, number_b: int, out: Path) -> Path:
    surface = SvgSurface(settings.canvas_width, settings.canvas_height)
    fits = render_solution(surface, operator, number_a, number_b, settings)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(surface.to_svg(), encoding="utf-8")
    log.info("Snapshot (%s) → %s", "solved" if fits else "does not fit", out)
    return out


async def run(operator: Operator, number_a: int, number_b: int, quality: str, kind: str, job_id: str) -> Path:
    settings.ensure_dirs()

    log.info("Step 1/2: Building scene file…")
    problem = {"kind": kind, "number_a": number_a, "operator": operator.value, "number_b": number_b}
    style = {
        "theme":         settings.theme,
        "canvas_width":  settings.canvas_width,
        "canvas_height": settings.canvas_height,
    }
    scene_file, class_name = scene_builder.build_scene_file(job_id, problem, style, settings.scene_dir)

    log.info("Step 2/2: Rendering (quality=%s)…", quality)
    mp4 = await render_engine.render_scene(scene_file, class_name, settings.media_dir / job_id, quality)

    final_path = settings.final_dir / f"{job_id}.mp4"
    shutil.copy2(str(mp4), str(final_path))
    log.info("Done! → %s", final_path)
    return final_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a number-line hop animation.")
    parser.add_argument("number_a", help="Starting operand")
    parser.add_argument("operator", help="'+' or '-'")
    parser.add_argument("number_b", help="Second operand")
    parser.add_argument("--quality", default=settings.render_quality, choices=["low", "medium", "high"])
    parser.add_argument("--kind", default="number_line_hop", choices=["number_line_hop", "solution_card"])
    parser.add_argument(
        "--svg", nargs="?", const="", default=None, metavar="PATH",
        help="Only write an SVG snapshot (to output/snapshots/<job-id>.svg when PATH is omitted)",
    )
    parser.add_argument("--job-id", default=None, help="Job ID (default: auto)")
    return parser


def snapshot_target(svg: str, job_id: str) -> Path:
    return Path(svg) if svg else settings.snapshot_dir / f"{job_id}.svg"


def main() -> None:
    args = build_parser().parse_args()

    try:
        number_a, operator, number_b = parse_problem(args.number_a, args.operator, args.number_b)
    except InvalidProblemInput as exc:
        print(f"ERROR: {exc}")
        sys.exit(2)

    job_id = args.job_id or f"problem_{int(time.time())}"

    if args.svg is not None:
        write_snapshot(operator, number_a, number_b, snapshot_target(args.svg, job_id))
        return

    log.info("Job ID: %s", job_id)

    t0 = time.monotonic()
    asyncio.run(run(operator, number_a, number_b, args.quality, args.kind, job_id))
    log.info("Total time: %.1fs", time.monotonic() - t0)


if __name__ == "__main__":
    main()

"""
Render Engine — turns a generated number-line scene file into an .mp4.

Manim runs in its own `python -m manim render` subprocess per job so its
global config and any crash stay out of the API process. The async wrapper
pushes the blocking call onto a worker thread and optionally holds a
render slot (semaphore) while it runs.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import subprocess
import sys
from pathlib import Path

from config.settings import PROJECT_ROOT

log = logging.getLogger(__name__)

# quality name → manim -q flag (480p15 / 720p30 / 1080p60)
QUALITY_FLAGS = {
    "low":    "l",
    "medium": "m",
    "high":   "h",
}

RENDER_TIMEOUT_S = 300
_TAIL = 2000


class ManimRenderError(RuntimeError):
    """Manim exited non-zero or did not finish in time."""

    def __init__(self, class_name: str, reason: str, stdout: str = "", stderr: str = ""):
        self.class_name = class_name
        self.stdout = stdout[-_TAIL:]
        self.stderr = stderr[-_TAIL:]
        super().__init__(
            f"Manim render failed for '{class_name}' ({reason}):\n"
            f"STDOUT: {self.stdout}\n"
            f"STDERR: {self.stderr}"
        )


def build_manim_command(scene_file: Path, class_name: str, media_dir: Path, quality: str) -> list[str]:
    flag = QUALITY_FLAGS.get(quality, QUALITY_FLAGS["medium"])
    return [
        sys.executable, "-m", "manim", "render",
        str(scene_file), class_name,
        f"-q{flag}",
        "--media_dir", str(media_dir),
        "--disable_caching",
    ]


def _as_text(stream: str | bytes | None) -> str:
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream or ""


def _subprocess_env() -> dict[str, str]:
    # Text() output and scene files may carry non-ASCII glyphs (× ÷).
    return {**os.environ, "PYTHONIOENCODING": "utf-8", "PYTHONUTF8": "1"}


def _find_rendered_mp4(media_dir: Path, class_name: str) -> Path | None:
    """
    The finished video for `class_name` under Manim's nested media tree.

    Manim writes <media_dir>/videos/<stem>/<quality>/<ClassName>.mp4 and keeps
    fragments under partial_movie_files/, which never count as output. When no
    file carries the class name the newest finished video wins.
    """
    finished = [
        p for p in media_dir.rglob("*.mp4")
        if "partial_movie_files" not in p.parts and not p.stem.endswith("_temp")
    ]
    named = [p for p in finished if p.stem == class_name]
    if named:
        return named[0]
    if finished:
        return max(finished, key=lambda p: p.stat().st_mtime)
    return None


def render_scene_subprocess(
    scene_file: Path,
    class_name: str,
    media_dir: Path,
    quality: str = "medium",
) -> Path:
    """
    Render `class_name` from `scene_file` and return the .mp4 path. Blocking.

    Raises:
        ManimRenderError:  Non-zero exit or timeout (a RuntimeError).
        FileNotFoundError: Manim exited cleanly but left no video behind.
    """
    media_dir.mkdir(parents=True, exist_ok=True)
    cmd = build_manim_command(scene_file, class_name, media_dir, quality)

    log.info("Rendering %s (%s quality)…", class_name, quality)
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            env=_subprocess_env(),
            cwd=str(PROJECT_ROOT),
            timeout=RENDER_TIMEOUT_S,
        )
    except subprocess.TimeoutExpired as exc:
        raise ManimRenderError(
            class_name, f"timed out after {RENDER_TIMEOUT_S}s",
            stdout=_as_text(exc.stdout), stderr=_as_text(exc.stderr),
        ) from exc

    if result.returncode != 0:
        raise ManimRenderError(class_name, f"exit code {result.returncode}", result.stdout, result.stderr)

    video = _find_rendered_mp4(media_dir, class_name)
    if video is None:
        raise FileNotFoundError(f"Manim reported success but no .mp4 found in {media_dir}")

    log.info("Rendered %s → %s", class_name, video)
    return video


async def render_scene(
    scene_file: Path,
    class_name: str,
    media_dir: Path,
    quality: str = "medium",
    semaphore: asyncio.Semaphore | None = None,
) -> Path:
    """Async render_scene_subprocess; holds a slot of `semaphore` while running."""
    async with semaphore or contextlib.nullcontext():
        return await asyncio.to_thread(
            render_scene_subprocess, scene_file, class_name, media_dir, quality,
        )

"""
Number Line Hop — Configuration & Settings.

Loads settings from environment variables / .env file with sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

# Project root directory (one level up from config/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from .env or environment variables."""

    # ── Canvas ─────────────────────────────────────────────────────
    canvas_width: int = Field(default=700, description="Drawing surface width (px)")
    canvas_height: int = Field(default=250, description="Drawing surface height (px)")
    theme: str = Field(default="light", description="Visual theme: 'light' or 'dark'")

    # ── Number line geometry ───────────────────────────────────────
    line_width: float = Field(default=600, description="Number line width (px), arrowheads included")
    line_scale: int = Field(default=1, description="Units per tick")
    line_min: int = Field(default=-10, description="Smallest labeled integer")
    line_max: int = Field(default=10, description="Largest labeled integer")
    line_x: float = Field(default=50, description="Left end of the axis (px)")
    line_y: float = Field(default=150, description="Axis baseline (px)")

    # ── Math problem text ──────────────────────────────────────────
    problem_x: float = Field(default=300, description="Expression anchor x (px)")
    problem_y: float = Field(default=40, description="Expression baseline y (px)")
    problem_font_size: float = Field(default=25, description="Expression font size (px)")

    # ── Animation timing ───────────────────────────────────────────
    step_duration_ms: float = Field(
        default=1000,
        description="Period of the stage timer; one hop is drawn within one period",
    )
    hop_frames: int = Field(default=20, description="Arc slices per hop")

    # ── Sprites ────────────────────────────────────────────────────
    sprite_dir: Path = Field(
        default=PROJECT_ROOT / "assets" / "sprites",
        description="Directory holding sprite-stand.png, sprite-look-left.png, sprite-look-right.png",
    )
    sprite_scale: float = Field(default=0.2, description="Sprite draw scale relative to image size")

    # ── Output Directories ─────────────────────────────────────────
    output_dir: Path = Field(default=PROJECT_ROOT / "output", description="Base output directory")

    # ── Rendering ──────────────────────────────────────────────────
    render_quality: Literal["low", "medium", "high"] = Field(
        default="medium",
        description="Quality used when a render request or the CLI does not name one",
    )
    max_render_workers: int = Field(
        default=2,
        description="Max parallel Manim render subprocesses",
    )

    # ── FastAPI ────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0", description="FastAPI host")
    api_port: int = Field(default=8000, description="FastAPI port")

    model_config = {
        "env_file": str(PROJECT_ROOT / ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # ── Derived Paths ──────────────────────────────────────────────
    @property
    def scene_dir(self) -> Path:
        return self.output_dir / "scene_files"

    @property
    def media_dir(self) -> Path:
        return self.output_dir / "media"

    @property
    def final_dir(self) -> Path:
        return self.output_dir / "final"

    @property
    def snapshot_dir(self) -> Path:
        # Default target of `render_problem.py --svg` without a path.
        return self.output_dir / "snapshots"

    def ensure_dirs(self) -> None:
        """Create all output directories if they don't exist."""
        for d in [
            self.scene_dir,
            self.media_dir,
            self.final_dir,
            self.snapshot_dir,
        ]:
            d.mkdir(parents=True, exist_ok=True)


# Singleton instance
settings = Settings()

"""
Root conftest — sys.path setup + shared geometry, sprite and settings fixtures.
"""

import sys
from pathlib import Path

import pytest
from PIL import Image

# ── Add project root to sys.path so `from core.x import ...` works ─────────
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from animation.scheduler import VirtualScheduler  # noqa: E402
from config.settings import Settings  # noqa: E402
from core.number_line import NumberLine  # noqa: E402
from renderer.surface import RecordingSurface  # noqa: E402

SPRITE_SIZE = (100, 200)


# ── Sprite helpers (plain functions, not fixtures) ──────────────────────────

def write_sprites(directory: Path, size: tuple[int, int] = SPRITE_SIZE) -> Path:
    """Write the three pose PNGs as plain RGBA images of `size`."""
    directory.mkdir(parents=True, exist_ok=True)
    for name in ("sprite-stand.png", "sprite-look-left.png", "sprite-look-right.png"):
        Image.new("RGBA", size, (0, 0, 0, 255)).save(directory / name)
    return directory


# ── Shared fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def number_line() -> NumberLine:
    """The default line: 600 px wide, labeled -10 … 10, anchored at (50, 150)."""
    return NumberLine(width=600, scale=1, min_value=-10, max_value=10, x=50, y=150)


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def surface(scheduler) -> RecordingSurface:
    return RecordingSurface(700, 250, clock=scheduler.now)


@pytest.fixture
def sprite_dir(tmp_path) -> Path:
    return write_sprites(tmp_path / "sprites")


@pytest.fixture
def test_settings(tmp_path, sprite_dir) -> Settings:
    return Settings(sprite_dir=sprite_dir, output_dir=tmp_path / "output")


@pytest.fixture
def sample_problem() -> dict:
    return {"kind": "number_line_hop", "number_a": 3, "operator": "add", "number_b": 5}


@pytest.fixture
def sample_style() -> dict:
    return {"theme": "light", "canvas_width": 700, "canvas_height": 250}

"""
Sprite source — resolves a pose name to a measured image handle.

Loading is fire-and-forget: the handle is delivered through the scheduler
on its own schedule, and a pose whose image cannot be read never resolves.
Callers draw inside the on_ready callback, so a missing sprite simply does
not appear.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from PIL import Image, UnidentifiedImageError

from animation.scheduler import Scheduler

log = logging.getLogger(__name__)

POSE_FILES: dict[str, str] = {
    "stand":     "sprite-stand.png",
    "lookLeft":  "sprite-look-left.png",
    "lookRight": "sprite-look-right.png",
}


@dataclass(frozen=True)
class Sprite:
    pose: str
    path: Path
    width: int
    height: int


class SpriteSource:
    def __init__(self, sprite_dir: str | Path, scheduler: Scheduler):
        self.sprite_dir = Path(sprite_dir)
        self._scheduler = scheduler
        self._cache: dict[str, Sprite] = {}

    def path_for(self, pose: str) -> Path:
        if pose not in POSE_FILES:
            raise KeyError(f"Unknown sprite pose: {pose!r}")
        return self.sprite_dir / POSE_FILES[pose]

    def _read(self, pose: str) -> Sprite | None:
        if pose in self._cache:
            return self._cache[pose]
        path = self.path_for(pose)
        try:
            with Image.open(path) as img:
                width, height = img.size
        except (OSError, UnidentifiedImageError) as exc:
            log.warning("Sprite %r could not be loaded from %s: %s", pose, path, exc)
            return None
        sprite = Sprite(pose=pose, path=path, width=width, height=height)
        self._cache[pose] = sprite
        return sprite

    def load(self, pose: str, on_ready: Callable[[Sprite], None]) -> None:
        """Resolve `pose` asynchronously; `on_ready` is only called on success."""
        path = self.path_for(pose)

        def _resolve() -> None:
            sprite = self._read(pose)
            if sprite is not None:
                on_ready(sprite)

        log.debug("Loading sprite %r from %s", pose, path)
        self._scheduler.call_later(0, _resolve)

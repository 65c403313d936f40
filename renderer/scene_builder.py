"""
Scene Builder — writes one Manim scene .py file per render job.

Each generated file subclasses the class returned by scenes.build_problem_scene()
so `manim render <file> <ClassName>` can run it in a clean subprocess.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from config.settings import PROJECT_ROOT

log = logging.getLogger(__name__)

_TEMPLATE = '''\
"""Generated scene for job {job_id}. Do not edit."""

import json
import sys

sys.path.insert(0, {root!r})

from scenes import build_problem_scene

_PROBLEM = json.loads({problem_json!r})
_STYLE = json.loads({style_json!r})


class {class_name}(build_problem_scene(_PROBLEM, _STYLE)):
    pass
'''


def _safe_id(job_id: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_]", "_", job_id)


def _to_class_name(job_id: str) -> str:
    """Turn a job id into a valid Python class name."""
    return f"NumberLineScene_{_safe_id(job_id)}"


def build_scene_file(
    job_id: str,
    problem: dict,
    style: dict,
    scene_dir: Path,
) -> tuple[Path, str]:
    """
    Write the scene file for `problem` and return (file_path, class_name).

    Values are embedded as JSON string literals so quotes and unicode in
    any field cannot break the generated source.
    """
    class_name = _to_class_name(job_id)
    payload = {**problem, "job_id": job_id}
    source = _TEMPLATE.format(
        job_id=_safe_id(job_id),
        root=str(PROJECT_ROOT),
        problem_json=json.dumps(payload, ensure_ascii=False),
        style_json=json.dumps(style, ensure_ascii=False),
        class_name=class_name,
    )

    scene_dir.mkdir(parents=True, exist_ok=True)
    file_path = scene_dir / f"scene_{_safe_id(job_id)}.py"
    file_path.write_text(source, encoding="utf-8")
    log.info("Scene file for %s → %s", job_id, file_path)
    return file_path, class_name

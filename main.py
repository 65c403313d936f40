"""
Number Line Hop — FastAPI backend.

POST /timeline         Problem → the full timestamped list of draw ops
GET  /snapshot.svg     Problem → the finished solution as an SVG image
WS   /ws/visualise     Problem → draw ops streamed in real time
POST /render           Problem → queue an .mp4 render, returns job_id
GET  /status/{job_id}  Poll render progress
GET  /output/{file}    Download the rendered video

Render pipeline (runs in background):
  1. Scene .py file generated for the problem
  2. Manim renders it in a subprocess (asyncio.to_thread)
  3. Job status updated with video_url
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import Literal

# ── Windows UTF-8 fix ────────────────────────────────────────────────────────
import os as _os
import sys as _sys

_os.environ.setdefault("PYTHONIOENCODING", "utf-8")
_os.environ.setdefault("PYTHONUTF8", "1")
_sys.path.insert(0, str(Path(__file__).resolve().parent))

from fastapi import BackgroundTasks, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, Response
from pydantic import BaseModel, Field, ValidationError

from animation.scheduler import AsyncioScheduler
from animation.session import record_timeline, render_solution, start_visualisation
from config.settings import settings
from core.inputs import InvalidProblemInput, parse_operator, parse_problem
from renderer import render_engine, scene_builder
from renderer.surface import RecordingSurface
from renderer.svg_surface import SvgSurface

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("numberline.api")

VERSION = "1.0.0"

# ── App ──────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Number Line Hop",
    description="Animate addition and subtraction as hops along a number line.",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── In-memory job store ───────────────────────────────────────────────────────
_jobs: dict[str, dict] = {}
_jobs_lock = asyncio.Lock()
_render_slots = asyncio.Semaphore(settings.max_render_workers)


async def _update_job(job_id: str, updates: dict) -> None:
    async with _jobs_lock:
        _jobs[job_id].update(updates)


# ── Request / Response models ─────────────────────────────────────────────────

class ProblemRequest(BaseModel):
    number_a: int = Field(..., description="Starting operand")
    operator: Literal["+", "-"] = Field(..., description="Operator symbol")
    number_b: int = Field(..., description="Second operand; |number_b| hops")


class RenderRequest(ProblemRequest):
    kind:    Literal["number_line_hop", "solution_card"] = Field("number_line_hop", description="Scene type")
    quality: Literal["low", "medium", "high"] = Field(
        default_factory=lambda: settings.render_quality,
        description="Render quality (default: RENDER_QUALITY)",
    )


class TimelineResponse(BaseModel):
    accepted:    bool
    duration_ms: float
    ops:         list[dict]


class RenderResponse(BaseModel):
    job_id:  str
    status:  str
    message: str


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.post("/timeline", response_model=TimelineResponse)
async def timeline(request: ProblemRequest):
    """Run the whole animation on a virtual clock and return every draw op."""
    operator = parse_operator(request.operator)
    surface, started = await asyncio.to_thread(
        record_timeline, operator, request.number_a, request.number_b, settings,
    )
    return TimelineResponse(accepted=started, duration_ms=surface.duration_ms, ops=surface.to_dicts())


@app.get("/snapshot.svg")
async def snapshot(a: str, op: str, b: str):
    """The finished solution as an SVG image. Pass '+' URL-encoded as %2B."""
    try:
        number_a, operator, number_b = parse_problem(a, op, b)
    except InvalidProblemInput as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    surface = SvgSurface(settings.canvas_width, settings.canvas_height)
    render_solution(surface, operator, number_a, number_b, settings)
    return Response(content=surface.to_svg(), media_type="image/svg+xml")


@app.websocket("/ws/visualise")
async def visualise_ws(websocket: WebSocket):
    """
    Stream the animation live. The client sends one ProblemRequest JSON object,
    then receives one message per draw op and a final {"kind": "done"} message.
    """
    await websocket.accept()
    try:
        request = ProblemRequest.model_validate(await websocket.receive_json())
    except ValidationError as exc:
        await websocket.send_json({"kind": "error", "detail": exc.errors(include_url=False)})
        await websocket.close(code=1003)
        return

    queue: asyncio.Queue = asyncio.Queue()
    scheduler = AsyncioScheduler()
    surface = RecordingSurface(
        settings.canvas_width,
        settings.canvas_height,
        clock=scheduler.now,
        listener=queue.put_nowait,
    )
    visualiser, started = start_visualisation(
        surface,
        scheduler,
        parse_operator(request.operator),
        request.number_a,
        request.number_b,
        settings,
        on_complete=lambda: queue.put_nowait(None),
    )
    if not started:
        queue.put_nowait(None)

    try:
        while (op := await queue.get()) is not None:
            await websocket.send_json(op.to_dict())
        await websocket.send_json({"kind": "done", "accepted": started})
        await websocket.close()
    except WebSocketDisconnect:
        log.info("Client disconnected during %s", visualiser.math_problem.describe(3))
    finally:
        visualiser.cancel()


@app.post("/render", response_model=RenderResponse, status_code=202)
async def render(request: RenderRequest, background_tasks: BackgroundTasks):
    """Queue an .mp4 render of the problem. Returns job_id immediately."""
    settings.ensure_dirs()

    job_id = uuid.uuid4().hex[:10]
    async with _jobs_lock:
        _jobs[job_id] = {
            "job_id":              job_id,
            "status":              "queued",
            "problem":             f"{request.number_a} {request.operator} {request.number_b}",
            "created_at":          time.time(),
            "render_time_seconds": None,
            "video_url":           None,
            "error":               None,
        }

    background_tasks.add_task(_run_render, job_id, request)

    return RenderResponse(
        job_id=job_id,
        status="queued",
        message=f"Job queued. Poll /status/{job_id} for progress.",
    )


@app.get("/status/{job_id}")
async def get_status(job_id: str):
    """Poll job progress and retrieve the video URL when complete."""
    async with _jobs_lock:
        job = _jobs.get(job_id)
    if not job:
        final_path = settings.final_dir / f"{job_id}.mp4"
        if final_path.exists():
            return {
                "job_id":    job_id,
                "status":    "completed",
                "video_url": f"/output/{job_id}.mp4",
            }
        raise HTTPException(status_code=404, detail=f"Job '{job_id}' not found.")
    return job


@app.get("/output/{filename}")
async def get_output(filename: str):
    """Download a rendered video file."""
    safe_name = Path(filename).name
    path = settings.final_dir / safe_name
    if not path.exists() or path.suffix != ".mp4":
        raise HTTPException(status_code=404, detail="Video not found.")
    return FileResponse(str(path), media_type="video/mp4", filename=safe_name)


@app.get("/health")
async def health():
    return {
        "status":  "ok",
        "line":    [settings.line_min, settings.line_max],
        "version": VERSION,
    }


# ── Render pipeline ───────────────────────────────────────────────────────────

async def _run_render(job_id: str, request: RenderRequest) -> None:
    """Build the scene file, render it with Manim and publish the .mp4."""
    t_start = time.monotonic()

    try:
        await _update_job(job_id, {"status": "building_scene"})
        problem = {
            "kind":     request.kind,
            "number_a": request.number_a,
            "operator": parse_operator(request.operator).value,
            "number_b": request.number_b,
        }
        style = {
            "theme":         settings.theme,
            "canvas_width":  settings.canvas_width,
            "canvas_height": settings.canvas_height,
        }
        scene_file, class_name = scene_builder.build_scene_file(
            job_id, problem, style, settings.scene_dir,
        )

        await _update_job(job_id, {"status": "rendering"})
        mp4 = await render_engine.render_scene(
            scene_file,
            class_name,
            settings.media_dir / job_id,
            quality=request.quality,
            semaphore=_render_slots,
        )

        final_path = settings.final_dir / f"{job_id}.mp4"
        final_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(str(mp4), str(final_path))

        render_time = round(time.monotonic() - t_start, 1)
        log.info("[%s] Done in %.1fs → %s", job_id, render_time, final_path)
        await _update_job(job_id, {
            "status":              "completed",
            "video_url":           f"/output/{final_path.name}",
            "render_time_seconds": render_time,
        })

    except Exception as exc:
        log.exception("[%s] Render failed: %s", job_id, exc)
        await _update_job(job_id, {
            "status":              "failed",
            "error":               str(exc),
            "render_time_seconds": round(time.monotonic() - t_start, 1),
        })


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level="info",
    )

"""
Unit tests for main.py (FastAPI app).

Rendering is mocked — no Manim subprocess runs. The live WebSocket stream
uses a shortened step duration so a full sequence finishes in well under
a second.
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

import main
from animation.visualiser import OUT_OF_BOUNDS_TEXT
from config.settings import settings


@pytest.fixture
def client():
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def isolated_output(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "output_dir", tmp_path / "output")
    return tmp_path / "output"


@pytest.fixture
def fast_steps(monkeypatch):
    monkeypatch.setattr(settings, "step_duration_ms", 50)
    monkeypatch.setattr(settings, "hop_frames", 2)


# ── /health ──────────────────────────────────────────────────────────────────

class TestHealth:

    def test_reports_line_bounds(self, client):
        body = client.get("/health").json()
        assert body == {"status": "ok", "line": [settings.line_min, settings.line_max], "version": main.VERSION}


# ── /timeline ────────────────────────────────────────────────────────────────

class TestTimeline:

    def test_full_sequence(self, client):
        resp = client.post("/timeline", json={"number_a": 3, "operator": "+", "number_b": 5})
        assert resp.status_code == 200

        body = resp.json()
        assert body["accepted"] is True
        assert body["duration_ms"] == 11 * settings.step_duration_ms
        texts = [op["args"]["text"] for op in body["ops"] if op["kind"] == "text"]
        assert texts[-1] == "3 + 5 = 8"

    def test_out_of_bounds(self, client):
        resp = client.post("/timeline", json={"number_a": 9, "operator": "+", "number_b": 5})
        body = resp.json()

        assert body["accepted"] is False
        assert body["ops"][-1]["args"]["text"] == OUT_OF_BOUNDS_TEXT

    @pytest.mark.parametrize("payload", [
        {"number_a": 3, "operator": "*", "number_b": 5},
        {"number_a": "three", "operator": "+", "number_b": 5},
        {"number_a": 3, "operator": "+"},
    ])
    def test_invalid_request(self, client, payload):
        assert client.post("/timeline", json=payload).status_code == 422


# ── /snapshot.svg ────────────────────────────────────────────────────────────

class TestSnapshot:

    def test_returns_svg(self, client):
        resp = client.get("/snapshot.svg", params={"a": "-2", "op": "-", "b": "-4"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("image/svg+xml")
        assert "-2 - -4 = 2" in resp.text

    def test_plus_sign_encoded(self, client):
        resp = client.get("/snapshot.svg", params={"a": "3", "op": "+", "b": "5"})
        assert "3 + 5 = 8" in resp.text

    def test_out_of_bounds_message(self, client):
        resp = client.get("/snapshot.svg", params={"a": "9", "op": "+", "b": "5"})
        assert resp.status_code == 200
        assert OUT_OF_BOUNDS_TEXT in resp.text

    @pytest.mark.parametrize("params", [
        {"a": "x", "op": "+", "b": "5"},
        {"a": "3", "op": "/", "b": "5"},
        {"a": "3", "op": "+", "b": "1.5"},
    ])
    def test_bad_input_is_422(self, client, params):
        resp = client.get("/snapshot.svg", params=params)
        assert resp.status_code == 422


# ── /ws/visualise ────────────────────────────────────────────────────────────

class TestVisualiseWebSocket:

    def _collect(self, client, payload) -> list[dict]:
        messages = []
        with client.websocket_connect("/ws/visualise") as ws:
            ws.send_json(payload)
            while True:
                msg = ws.receive_json()
                messages.append(msg)
                if msg["kind"] in ("done", "error"):
                    break
        return messages

    def test_streams_ops_then_done(self, client, fast_steps):
        messages = self._collect(client, {"number_a": 3, "operator": "+", "number_b": 2})

        assert messages[-1] == {"kind": "done", "accepted": True}
        ops = messages[:-1]
        texts = [m["args"]["text"] for m in ops if m["kind"] == "text"]
        assert texts[-1] == "3 + 2 = 5"
        assert len([m for m in ops if m["kind"] == "arc"]) == 4
        times = [m["at_ms"] for m in ops]
        assert times == sorted(times)

    def test_out_of_bounds_done_not_accepted(self, client, fast_steps):
        messages = self._collect(client, {"number_a": 9, "operator": "+", "number_b": 5})

        assert messages[-1] == {"kind": "done", "accepted": False}
        assert messages[-2]["args"]["text"] == OUT_OF_BOUNDS_TEXT

    def test_invalid_problem_reports_error(self, client):
        messages = self._collect(client, {"number_a": 3, "operator": "x", "number_b": 2})
        assert messages[-1]["kind"] == "error"
        assert messages[-1]["detail"]


# ── /render + /status ────────────────────────────────────────────────────────

class TestRenderJobs:

    def test_render_completes_with_mocked_manim(self, client, isolated_output, tmp_path):
        fake_mp4 = tmp_path / "fake.mp4"
        fake_mp4.write_bytes(b"video")

        with patch("main.render_engine.render_scene", new=AsyncMock(return_value=fake_mp4)) as mock_render:
            resp = client.post("/render", json={"number_a": 3, "operator": "+", "number_b": 5, "quality": "low"})
            assert resp.status_code == 202
            job_id = resp.json()["job_id"]

            status = client.get(f"/status/{job_id}").json()

        assert status["status"] == "completed"
        assert status["video_url"] == f"/output/{job_id}.mp4"
        assert status["problem"] == "3 + 5"
        assert (isolated_output / "final" / f"{job_id}.mp4").read_bytes() == b"video"

        scene_file, class_name, media_dir = mock_render.call_args.args
        assert Path(scene_file).exists()
        assert class_name == f"NumberLineScene_{job_id}"
        assert mock_render.call_args.kwargs["quality"] == "low"

    def test_quality_defaults_to_setting(self, client, isolated_output, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "render_quality", "high")
        fake_mp4 = tmp_path / "fake.mp4"
        fake_mp4.write_bytes(b"video")

        with patch("main.render_engine.render_scene", new=AsyncMock(return_value=fake_mp4)) as mock_render:
            client.post("/render", json={"number_a": 3, "operator": "+", "number_b": 5})

        assert mock_render.call_args.kwargs["quality"] == "high"

    def test_render_failure_marks_job_failed(self, client, isolated_output):
        failing = AsyncMock(side_effect=RuntimeError("Manim render failed for 'X'"))
        with patch("main.render_engine.render_scene", new=failing):
            job_id = client.post("/render", json={"number_a": 3, "operator": "-", "number_b": 1}).json()["job_id"]
            status = client.get(f"/status/{job_id}").json()

        assert status["status"] == "failed"
        assert "Manim render failed" in status["error"]

    def test_download_rendered_video(self, client, isolated_output):
        final = isolated_output / "final"
        final.mkdir(parents=True)
        (final / "abc.mp4").write_bytes(b"video")

        resp = client.get("/output/abc.mp4")
        assert resp.status_code == 200
        assert resp.content == b"video"

    def test_status_from_disk_when_job_unknown(self, client, isolated_output):
        final = isolated_output / "final"
        final.mkdir(parents=True)
        (final / "old.mp4").write_bytes(b"video")

        assert client.get("/status/old").json()["status"] == "completed"

    def test_unknown_status_404(self, client, isolated_output):
        assert client.get("/status/nope").status_code == 404

    def test_unknown_output_404(self, client, isolated_output):
        assert client.get("/output/nope.mp4").status_code == 404

    def test_non_mp4_output_404(self, client, isolated_output):
        final = isolated_output / "final"
        final.mkdir(parents=True)
        (final / "notes.txt").write_text("x")
        assert client.get("/output/notes.txt").status_code == 404

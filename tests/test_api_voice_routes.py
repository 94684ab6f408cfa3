from __future__ import annotations

import asyncio
import json
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from wonderland.apps.api import deps
from wonderland.apps.api.main import app
from wonderland.core.audio.schemas import AudioCapture
from wonderland.core.calendar.materializer import TaskMaterializer
from wonderland.core.calendar.store import InternalTaskStore
from wonderland.core.errors import TranscriptionFailed
from wonderland.core.extraction.engine import TaskExtractionEngine
from wonderland.core.history.store import HistoryStore
from wonderland.core.http import WonderlandHTTPStatusError
from wonderland.core.session.pipeline import VoiceTaskPipeline
from wonderland.core.transcription.schemas import Transcript


class FakeTranscriber:
    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc
        self.hints: list[str | None] = []

    def transcribe(self, capture: AudioCapture, language_hint: str | None = None) -> Transcript:
        self.hints.append(language_hint)
        if self.exc is not None:
            raise self.exc
        return Transcript(text=f"heard {capture.size_bytes} bytes", language_hint=language_hint)


class SlowTranscriber(FakeTranscriber):
    def __init__(self, delay_s: float) -> None:
        super().__init__()
        self.delay_s = delay_s

    def transcribe(self, capture: AudioCapture, language_hint: str | None = None) -> Transcript:
        time.sleep(self.delay_s)
        return super().transcribe(capture, language_hint=language_hint)


class FakeLLM:
    def __init__(self, response: str = "", exc: Exception | None = None) -> None:
        self.response = response
        self.exc = exc

    def chat_completion(self, system, user, temperature, max_tokens, response_format=None) -> str:
        if self.exc is not None:
            raise self.exc
        return self.response


class MockCalendarConnector:
    def create_event(self, event) -> dict:
        if event.title == "Broken":
            raise RuntimeError("calendar rejected the event")
        return {"event_id": "evt_1", "html_link": "https://calendar.google.com/event?eid=evt_1"}


def _install(tmp_path, transcriber=None, llm=None) -> HistoryStore:
    history = HistoryStore(state_dir=tmp_path)
    pipeline = VoiceTaskPipeline(
        transcriber=transcriber or FakeTranscriber(),
        engine=TaskExtractionEngine(llm or FakeLLM("[]")),
        materializer=TaskMaterializer(
            store=InternalTaskStore(state_dir=tmp_path),
            connector_factory=lambda _token, _tz: MockCalendarConnector(),
        ),
        history_store=history,
    )
    app.dependency_overrides[deps.get_pipeline] = lambda: pipeline
    app.dependency_overrides[deps.get_history_store] = lambda: history
    return history


def test_transcribe_voice_returns_text(tmp_path) -> None:
    transcriber = FakeTranscriber()
    _install(tmp_path, transcriber=transcriber)

    with TestClient(app) as client:
        response = client.post(
            "/api/transcribe-voice",
            files={"audio": ("recording.webm", b"12345", "audio/webm")},
            data={"language": "fr-FR"},
        )
    app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {"success": True, "transcription": "heard 5 bytes", "warning": None}
    assert transcriber.hints == ["fr-FR"]
    assert response.headers["X-Correlation-ID"]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.mark.anyio
async def test_health_answers_while_transcription_is_running(tmp_path) -> None:
    _install(tmp_path, transcriber=SlowTranscriber(delay_s=1.0))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://wonderland.test") as client:
        upload = asyncio.create_task(
            client.post(
                "/api/transcribe-voice",
                files={"audio": ("recording.webm", b"12345", "audio/webm")},
            )
        )
        await asyncio.sleep(0.1)
        started = time.monotonic()
        health = await client.get("/healthz")
        health_elapsed = time.monotonic() - started
        transcribed = await upload

    assert health.status_code == 200
    assert health_elapsed < 0.5
    assert transcribed.status_code == 200
    assert transcribed.json()["transcription"] == "heard 5 bytes"


def test_transcribe_voice_requires_audio(tmp_path) -> None:
    _install(tmp_path)

    with TestClient(app) as client:
        response = client.post("/api/transcribe-voice", data={"language": "en-US"})
    app.dependency_overrides.clear()

    assert response.status_code == 400


def test_transcribe_voice_surfaces_vendor_status(tmp_path) -> None:
    failure = TranscriptionFailed("vendor_error", status_code=413, details={"error": "file too large"})
    _install(tmp_path, transcriber=FakeTranscriber(exc=failure))

    with TestClient(app) as client:
        response = client.post(
            "/api/transcribe-voice",
            files={"audio": ("recording.webm", b"12345", "audio/webm")},
        )
    app.dependency_overrides.clear()

    assert response.status_code == 413
    payload = response.json()
    assert payload["success"] is False
    assert payload["details"] == {"error": "file too large"}


def test_extract_tasks_returns_backfilled_tasks(tmp_path) -> None:
    _install(tmp_path, llm=FakeLLM(json.dumps([{"title": "Buy milk"}])))

    with TestClient(app) as client:
        response = client.post("/api/extract-tasks", json={"transcription": "buy milk"})
    app.dependency_overrides.clear()

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["degraded"] is False
    assert payload["tasks"] == [
        {
            "title": "Buy milk",
            "type": "task",
            "description": "Buy milk",
            "date": "today",
            "time": None,
            "priority": "medium",
            "category": "other",
        }
    ]


def test_extract_tasks_reports_degraded_fallback(tmp_path) -> None:
    _install(tmp_path, llm=FakeLLM("I cannot help with that."))

    with TestClient(app) as client:
        response = client.post("/api/extract-tasks", json={"transcription": "something vague"})
    app.dependency_overrides.clear()

    payload = response.json()
    assert payload["degraded"] is True
    assert payload["tasks"][0]["description"] == "something vague"


def test_extract_tasks_requires_transcription(tmp_path) -> None:
    _install(tmp_path)

    with TestClient(app) as client:
        response = client.post("/api/extract-tasks", json={"transcription": "  "})
    app.dependency_overrides.clear()

    assert response.status_code == 400


def test_extract_tasks_surfaces_vendor_status(tmp_path) -> None:
    _install(tmp_path, llm=FakeLLM(exc=WonderlandHTTPStatusError("HTTP status 401", status_code=401, payload="bad key")))

    with TestClient(app) as client:
        response = client.post("/api/extract-tasks", json={"transcription": "buy milk"})
    app.dependency_overrides.clear()

    assert response.status_code == 401
    assert response.json()["reason"] == "vendor_error"


def test_materialize_reports_per_task_results_and_records_history(tmp_path) -> None:
    history = _install(tmp_path)

    with TestClient(app) as client:
        response = client.post(
            "/api/materialize",
            json={
                "tasks": [{"title": "Call mom"}, {"title": "Broken"}, {"title": "Buy milk"}],
                "target": "google",
                "accessToken": "ya29.token",
                "transcription": "call mom and buy milk",
            },
        )
        history_response = client.get("/api/history", params={"limit": 5})
    app.dependency_overrides.clear()

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["cleared"] is True
    assert [item["ok"] for item in payload["results"]] == [True, False, True]
    assert payload["results"][1]["taskIndex"] == 1
    assert "calendar rejected" in payload["results"][1]["error"]
    items = history_response.json()["items"]
    assert len(items) == 1
    assert items[0]["transcription"] == "call mom and buy milk"
    assert len(history.list_recent(5)) == 1


def test_materialize_honours_selection(tmp_path) -> None:
    _install(tmp_path)

    with TestClient(app) as client:
        response = client.post(
            "/api/materialize",
            json={"tasks": [{"title": "One"}, {"title": "Two"}], "selected": [1], "target": "links"},
        )
    app.dependency_overrides.clear()

    results = response.json()["results"]
    assert [item["taskIndex"] for item in results] == [1]
    assert set(results[0]["result"]) == {"google", "outlook", "apple"}


def test_materialize_rejects_missing_credentials_and_bad_indices(tmp_path) -> None:
    _install(tmp_path)

    with TestClient(app) as client:
        missing_owner = client.post("/api/materialize", json={"tasks": [{"title": "One"}], "target": "internal"})
        bad_index = client.post(
            "/api/materialize",
            json={"tasks": [{"title": "One"}], "selected": [4], "target": "links"},
        )
        no_tasks = client.post("/api/materialize", json={"tasks": [], "target": "links"})
    app.dependency_overrides.clear()

    assert missing_owner.status_code == 400
    assert bad_index.status_code == 400
    assert no_tasks.status_code == 400

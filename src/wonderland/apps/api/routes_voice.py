from __future__ import annotations

from dataclasses import replace

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wonderland.core.audio.schemas import AudioCapture
from wonderland.core.calendar.materializer import CalendarTarget
from wonderland.core.errors import ExtractionFailed, TranscriptionFailed
from wonderland.core.extraction.schemas import backfill_task
from wonderland.core.history.store import HistoryStore
from wonderland.core.session.pipeline import EXTRACTION_DEGRADED_WARNING, VoiceTaskPipeline
from wonderland.core.session.state import SessionState
from wonderland.core.transcription.schemas import Transcript

from .deps import get_history_store, get_pipeline

router = APIRouter()


class ExtractRequest(BaseModel):
    transcription: str | None = None


class MaterializeRequest(BaseModel):
    tasks: list[dict] = []
    selected: list[int] | None = None
    target: CalendarTarget = CalendarTarget.LINKS
    userId: str | None = None
    accessToken: str | None = None
    transcription: str | None = None
    language: str | None = None


def _vendor_error(message: str, exc: TranscriptionFailed | ExtractionFailed) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code or 500,
        content={"success": False, "error": message, "reason": exc.reason, "details": exc.details},
    )


@router.post("/transcribe-voice")
def transcribe_voice(
    audio: UploadFile | None = File(default=None),
    language: str | None = Form(default=None),
    pipeline: VoiceTaskPipeline = Depends(get_pipeline),
):
    data = audio.file.read() if audio is not None else b""
    if not data:
        raise HTTPException(status_code=400, detail="No audio file provided")

    capture = AudioCapture(
        data=data,
        media_type=audio.content_type or "application/octet-stream",
        filename=audio.filename or "recording.webm",
    )
    state = pipeline.record_finished(SessionState(), capture)
    try:
        state = pipeline.transcribe(state, language_hint=language)
    except TranscriptionFailed as exc:
        return _vendor_error("Transcription failed", exc)

    return {
        "success": True,
        "transcription": state.transcript.text,
        "warning": state.warnings[0] if state.warnings else None,
    }


@router.post("/extract-tasks")
def extract_tasks(request: ExtractRequest, pipeline: VoiceTaskPipeline = Depends(get_pipeline)):
    text = (request.transcription or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="No transcription provided")

    state = SessionState().with_transcript(Transcript(text=text))
    try:
        state = pipeline.extract(state)
    except ExtractionFailed as exc:
        return _vendor_error("Task extraction failed", exc)

    return {
        "success": True,
        "tasks": [task.model_dump() for task in state.tasks],
        "degraded": EXTRACTION_DEGRADED_WARNING in state.warnings,
    }


@router.post("/materialize")
def materialize_tasks(request: MaterializeRequest, pipeline: VoiceTaskPipeline = Depends(get_pipeline)) -> dict:
    tasks = [backfill_task(task) for task in request.tasks]
    if not tasks:
        raise HTTPException(status_code=400, detail="No tasks provided")

    state = SessionState().with_tasks(tasks)
    if request.transcription:
        state = state.with_transcript(Transcript(text=request.transcription, language_hint=request.language))
    if request.selected is not None:
        state = replace(state, selection=frozenset(request.selected))

    try:
        new_state, report = pipeline.materialize(
            state,
            request.target,
            owner_id=request.userId,
            access_token=request.accessToken,
        )
    except (ValueError, IndexError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "success": report.any_succeeded,
        "results": [outcome.to_dict() for outcome in report.outcomes],
        "cleared": new_state.tasks != state.tasks,
    }


@router.get("/history")
def history(
    limit: int = Query(default=20),
    q: str = Query(default=""),
    store: HistoryStore = Depends(get_history_store),
) -> dict:
    normalized_limit = max(1, min(200, limit))
    records = store.search(q, limit=normalized_limit) if q.strip() else store.list_recent(normalized_limit)
    return {"limit": normalized_limit, "q": q, "items": [record.model_dump() for record in records]}

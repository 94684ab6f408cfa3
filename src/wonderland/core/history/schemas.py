from __future__ import annotations

from pydantic import BaseModel, Field

from wonderland.core.extraction.schemas import ExtractedTask


class RecordingHistory(BaseModel):
    history_id: str
    ts_iso: str
    transcription: str
    tasks: list[ExtractedTask] = Field(default_factory=list)
    duration_s: float | None = None
    language: str | None = None

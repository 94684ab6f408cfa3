from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

from wonderland.core.audio.normalize import NormalizationResult, normalize_audio
from wonderland.core.audio.schemas import AudioCapture
from wonderland.core.calendar.materializer import CalendarTarget, MaterializationReport, TaskMaterializer
from wonderland.core.extraction.engine import TaskExtractionEngine
from wonderland.core.history.schemas import RecordingHistory
from wonderland.core.history.store import HistoryStore
from wonderland.core.transcription.schemas import Transcript

from .state import SessionState

logger = logging.getLogger("wonderland.session")

EXTRACTION_DEGRADED_WARNING = "extraction_degraded"


class Transcriber(Protocol):
    def transcribe(self, capture: AudioCapture, language_hint: str | None = None) -> Transcript: ...


class VoiceTaskPipeline:
    """Runs the record, transcribe, extract and dispatch stages in order.

    Each stage takes the current ``SessionState`` and returns a new one.
    Nothing retries on its own; callers re-invoke a stage after a failure.
    """

    def __init__(
        self,
        transcriber: Transcriber,
        engine: TaskExtractionEngine,
        materializer: TaskMaterializer,
        history_store: HistoryStore | None = None,
        normalizer: Callable[[AudioCapture], NormalizationResult] = normalize_audio,
    ) -> None:
        self.transcriber = transcriber
        self.engine = engine
        self.materializer = materializer
        self.history_store = history_store
        self.normalizer = normalizer

    def record_finished(self, state: SessionState, capture: AudioCapture) -> SessionState:
        return state.with_capture(capture)

    def transcribe(self, state: SessionState, language_hint: str | None = None) -> SessionState:
        if state.capture is None:
            raise ValueError("no audio captured")
        normalized = self.normalizer(state.capture)
        if normalized.warning:
            state = state.with_warning(normalized.warning)
        transcript = self.transcriber.transcribe(normalized.capture, language_hint=language_hint)
        return state.with_transcript(transcript)

    def extract(self, state: SessionState) -> SessionState:
        if state.transcript is None:
            raise ValueError("no transcript available")
        result = self.engine.extract(state.transcript)
        state = state.with_tasks(result.tasks)
        if result.degraded:
            state = state.with_warning(EXTRACTION_DEGRADED_WARNING)
        return state

    def materialize(
        self,
        state: SessionState,
        target: CalendarTarget | str,
        **kwargs,
    ) -> tuple[SessionState, MaterializationReport]:
        report = self.materializer.materialize(state.tasks, state.selection, target, **kwargs)
        if not report.any_succeeded:
            return state, report

        if self.history_store is not None:
            try:
                self._remember(state)
            except OSError as exc:
                logger.warning("history_write_failed", extra={"extra_fields": {"error": str(exc)}})
        logger.info(
            "session_cleared",
            extra={"extra_fields": {"succeeded": len(report.succeeded), "failed": len(report.failed)}},
        )
        return state.cleared(), report

    def _remember(self, state: SessionState) -> None:
        transcript = state.transcript
        self.history_store.append(
            RecordingHistory(
                history_id=uuid.uuid4().hex,
                ts_iso=datetime.now(timezone.utc).isoformat(),
                transcription=transcript.text if transcript else "",
                tasks=list(state.tasks),
                duration_s=state.capture.duration_s if state.capture else None,
                language=transcript.language_hint if transcript else None,
            )
        )

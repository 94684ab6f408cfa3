"""Immutable state of one record, review and dispatch cycle."""

from __future__ import annotations

from dataclasses import dataclass, replace

from wonderland.core.audio.schemas import AudioCapture
from wonderland.core.extraction.schemas import ExtractedTask
from wonderland.core.transcription.schemas import Transcript


@dataclass(frozen=True)
class SessionState:
    capture: AudioCapture | None = None
    transcript: Transcript | None = None
    tasks: tuple[ExtractedTask, ...] = ()
    selection: frozenset[int] = frozenset()
    warnings: tuple[str, ...] = ()
    recording: bool = False

    def begin_recording(self) -> SessionState:
        return SessionState(recording=True)

    def with_capture(self, capture: AudioCapture) -> SessionState:
        return replace(self, capture=capture, recording=False)

    def with_transcript(self, transcript: Transcript) -> SessionState:
        return replace(self, transcript=transcript)

    def with_tasks(self, tasks) -> SessionState:
        tasks = tuple(tasks)
        return replace(self, tasks=tasks, selection=frozenset(range(len(tasks))))

    def with_warning(self, warning: str) -> SessionState:
        if warning in self.warnings:
            return self
        return replace(self, warnings=(*self.warnings, warning))

    def toggle(self, index: int) -> SessionState:
        if not 0 <= index < len(self.tasks):
            raise IndexError(f"task index out of range: {index}")
        return replace(self, selection=self.selection ^ {index})

    def selected_tasks(self) -> list[tuple[int, ExtractedTask]]:
        return [(index, task) for index, task in enumerate(self.tasks) if index in self.selection]

    def cleared(self) -> SessionState:
        return SessionState()

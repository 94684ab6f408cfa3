from __future__ import annotations

import json
from pathlib import Path

from .schemas import RecordingHistory


class HistoryStore:
    def __init__(self, state_dir: Path, max_records: int = 500) -> None:
        self.file_path = state_dir / "recording_history.jsonl"
        self.max_records = max(1, max_records)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def _load_all(self) -> list[RecordingHistory]:
        if not self.file_path.exists():
            return []
        records: list[RecordingHistory] = []
        with self.file_path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(RecordingHistory.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValueError):
                    continue
        return records

    def _write_all(self, records: list[RecordingHistory]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        with self.file_path.open("w", encoding="utf-8") as handle:
            for record in records:
                handle.write(json.dumps(record.model_dump(), ensure_ascii=False) + "\n")

    def append(self, record: RecordingHistory) -> RecordingHistory:
        with self.file_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record.model_dump(), ensure_ascii=False) + "\n")
        self.trim(self.max_records)
        return record

    def list_recent(self, limit: int = 50) -> list[RecordingHistory]:
        if limit <= 0:
            return []
        records = self._load_all()
        return list(reversed(records[-limit:]))

    def search(self, q: str, limit: int = 50) -> list[RecordingHistory]:
        query = q.casefold().strip()
        if limit <= 0:
            return []
        if not query:
            return self.list_recent(limit)

        matches: list[RecordingHistory] = []
        for record in reversed(self._load_all()):
            haystack = " ".join([record.transcription, *(task.title for task in record.tasks)]).casefold()
            if query in haystack:
                matches.append(record)
            if len(matches) >= limit:
                break
        return matches

    def trim(self, max_records: int) -> None:
        max_records = max(1, max_records)
        records = self._load_all()
        if len(records) <= max_records:
            return
        self._write_all(records[-max_records:])

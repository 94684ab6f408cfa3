from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel

from wonderland.core.extraction.schemas import ExtractedTask


class CalendarTaskRecord(BaseModel):
    task_id: str
    user_id: str
    title: str
    description: str
    type: str
    date: str
    time: str | None = None
    priority: str
    category: str
    status: str = "pending"
    created_at_iso: str
    updated_at_iso: str


class InternalTaskStore:
    def __init__(self, state_dir: Path) -> None:
        self.file_path = state_dir / "calendar_tasks.jsonl"
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def _load_all(self) -> list[CalendarTaskRecord]:
        if not self.file_path.exists():
            return []
        records: list[CalendarTaskRecord] = []
        with self.file_path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(CalendarTaskRecord.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValueError):
                    continue
        return records

    def add(self, task: ExtractedTask, owner_id: str) -> str:
        now_iso = datetime.now(timezone.utc).isoformat()
        record = CalendarTaskRecord(
            task_id=uuid.uuid4().hex,
            user_id=owner_id,
            created_at_iso=now_iso,
            updated_at_iso=now_iso,
            **task.model_dump(),
        )
        with self.file_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record.model_dump(), ensure_ascii=False) + "\n")
        return record.task_id

    def get(self, task_id: str) -> CalendarTaskRecord | None:
        for record in reversed(self._load_all()):
            if record.task_id == task_id:
                return record
        return None

    def list_for_user(self, user_id: str, limit: int = 50) -> list[CalendarTaskRecord]:
        if limit <= 0:
            return []
        matches = [record for record in reversed(self._load_all()) if record.user_id == user_id]
        return matches[:limit]

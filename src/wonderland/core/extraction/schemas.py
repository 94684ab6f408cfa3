from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field

TaskType = Literal["task", "event"]
Priority = Literal["low", "medium", "high"]
Category = Literal["work", "personal", "health", "shopping", "travel", "other"]

TASK_TYPES = ("task", "event")
PRIORITIES = ("low", "medium", "high")
CATEGORIES = ("work", "personal", "health", "shopping", "travel", "other")

DEFAULT_TITLE = "Untitled task"
DEFAULT_DESCRIPTION = "No description"
DEFAULT_DATE = "today"


class ExtractedTask(BaseModel):
    title: str = Field(min_length=1)
    type: TaskType = "task"
    description: str
    date: str = DEFAULT_DATE
    time: str | None = None
    priority: Priority = "medium"
    category: Category = "other"


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _choice(value: Any, allowed: tuple[str, ...], default: str) -> str:
    text = _text(value)
    if text is None:
        return default
    normalized = text.casefold()
    return normalized if normalized in allowed else default


def backfill_task(partial: dict[str, Any]) -> ExtractedTask:
    """Build a complete task from a partial model record.

    Missing, null, blank and out-of-range values take their defaults.
    """
    raw_title = _text(partial.get("title"))
    return ExtractedTask(
        title=raw_title or DEFAULT_TITLE,
        type=_choice(partial.get("type"), TASK_TYPES, "task"),
        description=_text(partial.get("description")) or raw_title or DEFAULT_DESCRIPTION,
        date=_text(partial.get("date")) or DEFAULT_DATE,
        time=_text(partial.get("time")),
        priority=_choice(partial.get("priority"), PRIORITIES, "medium"),
        category=_choice(partial.get("category"), CATEGORIES, "other"),
    )


def fallback_task(transcript: str) -> ExtractedTask:
    return ExtractedTask(title=DEFAULT_TITLE, description=transcript)


@dataclass
class ExtractionResult:
    tasks: list[ExtractedTask] = field(default_factory=list)
    degraded: bool = False
    tier: str = "direct"
    raw: str = ""

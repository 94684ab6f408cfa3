"""Turn extracted tasks into concrete calendar time ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from wonderland.core.extraction.schemas import ExtractedTask

EVENT_DURATION = timedelta(minutes=60)
ORIGIN_LINE = "Created via Voice Magic AI Assistant"


@dataclass(frozen=True)
class CalendarEvent:
    title: str
    description: str
    start: datetime
    end: datetime
    all_day: bool
    priority: str = "medium"
    category: str = "other"
    fallback: bool = False


def _resolve_date(value: str, today: date) -> date:
    token = value.strip().casefold()
    if token == "today":
        return today
    if token == "tomorrow":
        return today + timedelta(days=1)

    parts = token.split("-")
    if len(parts) != 3:
        raise ValueError(f"not an ISO date: {value!r}")
    year, month, day = (int(part) for part in parts)
    return date(year, month, day)


def _resolve_time(value: str) -> time:
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"not an HH:MM time: {value!r}")
    return time(int(parts[0]), int(parts[1]))


def resolve_event(task: ExtractedTask, now: datetime) -> CalendarEvent:
    """Compute the event window for ``task`` relative to ``now``.

    Dates are split into integer components rather than parsed with any
    locale-aware parser. Anything unparseable yields a one-hour window
    starting at ``now``.
    """
    common = {
        "title": task.title,
        "description": task.description,
        "priority": task.priority,
        "category": task.category,
    }
    try:
        day = _resolve_date(task.date, now.date())
        clock = _resolve_time(task.time) if task.time else None
        if clock is None:
            start = datetime.combine(day, time(0, 0), tzinfo=now.tzinfo)
            end = start + timedelta(days=1)
        else:
            start = datetime.combine(day, clock, tzinfo=now.tzinfo)
            end = start + EVENT_DURATION
    except (ValueError, OverflowError):
        # OverflowError: windows ending past 9999-12-31
        return CalendarEvent(start=now, end=now + EVENT_DURATION, all_day=False, fallback=True, **common)

    return CalendarEvent(start=start, end=end, all_day=clock is None, **common)


def event_details(event: CalendarEvent) -> str:
    return f"{event.description}\n\nPriority: {event.priority}\nCategory: {event.category}\n\n{ORIGIN_LINE}"

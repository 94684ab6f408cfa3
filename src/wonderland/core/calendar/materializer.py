"""Dispatch selected tasks to a calendar target, one task at a time."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from zoneinfo import ZoneInfo

from wonderland.core.errors import CalendarDispatchFailed
from wonderland.core.extraction.schemas import ExtractedTask

from .base import CalendarConnector
from .events import resolve_event
from .google_calendar import GoogleCalendarConnector
from .links import build_calendar_links
from .store import InternalTaskStore

logger = logging.getLogger("wonderland.calendar")


class CalendarTarget(str, Enum):
    INTERNAL = "internal"
    GOOGLE = "google"
    LINKS = "links"


@dataclass
class DispatchOutcome:
    task_index: int
    ok: bool
    result: dict | None = None
    error: CalendarDispatchFailed | None = None

    def to_dict(self) -> dict:
        return {
            "taskIndex": self.task_index,
            "ok": self.ok,
            "result": self.result,
            "error": self.error.reason if self.error is not None else None,
        }


@dataclass
class MaterializationReport:
    target: CalendarTarget
    outcomes: list[DispatchOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[DispatchOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[DispatchOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def any_succeeded(self) -> bool:
        return any(outcome.ok for outcome in self.outcomes)


def _google_connector(access_token: str, timezone: str) -> CalendarConnector:
    return GoogleCalendarConnector(access_token, timezone=timezone)


class TaskMaterializer:
    def __init__(
        self,
        store: InternalTaskStore | None = None,
        connector_factory: Callable[[str, str], CalendarConnector] = _google_connector,
        timezone: str = "UTC",
    ) -> None:
        self.store = store
        self.connector_factory = connector_factory
        self.timezone = timezone

    def now(self) -> datetime:
        return datetime.now(ZoneInfo(self.timezone))

    def materialize(
        self,
        tasks: Sequence[ExtractedTask],
        selection: Iterable[int],
        target: CalendarTarget | str,
        *,
        owner_id: str | None = None,
        access_token: str | None = None,
        now: datetime | None = None,
    ) -> MaterializationReport:
        target = CalendarTarget(target)
        indices = sorted(set(selection))
        for index in indices:
            if not 0 <= index < len(tasks):
                raise IndexError(f"task index out of range: {index}")

        if target is CalendarTarget.INTERNAL:
            if not owner_id:
                raise ValueError("owner_id is required for the internal calendar")
            if self.store is None:
                raise RuntimeError("internal task store is not configured")
        if target is CalendarTarget.GOOGLE and not access_token:
            raise ValueError("access_token is required for Google Calendar")

        current = now or self.now()
        connector: CalendarConnector | None = None
        report = MaterializationReport(target=target)

        for index in indices:
            task = tasks[index]
            try:
                if target is CalendarTarget.INTERNAL:
                    result = {"task_id": self.store.add(task, owner_id)}
                elif target is CalendarTarget.GOOGLE:
                    if connector is None:
                        connector = self.connector_factory(access_token, self.timezone)
                    result = connector.create_event(resolve_event(task, current))
                else:
                    result = build_calendar_links(resolve_event(task, current)).to_dict()
            except Exception as exc:  # one task failing must not stop the batch
                failure = CalendarDispatchFailed(index, str(exc) or exc.__class__.__name__)
                logger.warning(
                    "calendar_dispatch_failed",
                    extra={"extra_fields": {"target": target.value, "task_index": index, "reason": failure.reason}},
                )
                report.outcomes.append(DispatchOutcome(task_index=index, ok=False, error=failure))
                continue
            report.outcomes.append(DispatchOutcome(task_index=index, ok=True, result=result))

        logger.info(
            "calendar_dispatch_done",
            extra={
                "extra_fields": {
                    "target": target.value,
                    "succeeded": len(report.succeeded),
                    "failed": len(report.failed),
                }
            },
        )
        return report

from __future__ import annotations

from typing import Protocol

from .events import CalendarEvent


class CalendarConnector(Protocol):
    def create_event(self, event: CalendarEvent) -> dict: ...

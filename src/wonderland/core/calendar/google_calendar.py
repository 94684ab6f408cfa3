from __future__ import annotations

from .events import CalendarEvent, event_details
from .google_auth import build_calendar_service

_PRIORITY_COLORS = {"high": "11", "medium": "5", "low": "2"}


def priority_color(priority: str | None) -> str:
    return _PRIORITY_COLORS.get((priority or "").casefold(), "1")


def build_event_body(event: CalendarEvent, timezone: str) -> dict:
    if event.all_day:
        start = {"date": event.start.date().isoformat(), "timeZone": timezone}
        end = {"date": event.end.date().isoformat(), "timeZone": timezone}
    else:
        start = {"dateTime": event.start.isoformat(), "timeZone": timezone}
        end = {"dateTime": event.end.isoformat(), "timeZone": timezone}
    return {
        "summary": event.title,
        "description": event_details(event),
        "start": start,
        "end": end,
        "colorId": priority_color(event.priority),
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "popup", "minutes": 15},
                {"method": "email", "minutes": 60},
            ],
        },
    }


class GoogleCalendarConnector:
    def __init__(
        self,
        access_token: str,
        service=None,
        calendar_id: str = "primary",
        timezone: str = "UTC",
    ) -> None:
        self.service = service if service is not None else build_calendar_service(access_token)
        self.calendar_id = calendar_id
        self.timezone = timezone

    def create_event(self, event: CalendarEvent) -> dict:
        body = build_event_body(event, self.timezone)
        try:
            response = (
                self.service.events()
                .insert(calendarId=self.calendar_id, body=body, fields="id,htmlLink")
                .execute()
            )
        except Exception as exc:  # googleapiclient raises HttpError and transport errors
            raise RuntimeError(f"google_calendar_create_event_failed: {exc}") from exc
        return {
            "event_id": response.get("id"),
            "html_link": response.get("htmlLink"),
        }

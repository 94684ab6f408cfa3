"""Calendar deep links generated locally, with no provider round-trip."""

from __future__ import annotations

import hashlib
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from urllib.parse import quote, urlencode

from .events import CalendarEvent, event_details

GOOGLE_RENDER_URL = "https://calendar.google.com/calendar/render"
OUTLOOK_COMPOSE_URL = "https://outlook.live.com/calendar/0/deeplink/compose"


@dataclass(frozen=True)
class CalendarLinks:
    google: str
    outlook: str
    apple: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def _utc_stamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _utc_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _ics_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,").replace("\n", "\\n")


def google_link(event: CalendarEvent) -> str:
    if event.all_day:
        dates = f"{event.start:%Y%m%d}/{event.end:%Y%m%d}"
    else:
        dates = f"{_utc_stamp(event.start)}/{_utc_stamp(event.end)}"
    query = urlencode(
        {"action": "TEMPLATE", "text": event.title, "details": event_details(event)},
        quote_via=quote,
    )
    return f"{GOOGLE_RENDER_URL}?{query}&dates={dates}"


def outlook_link(event: CalendarEvent) -> str:
    params = {
        "subject": event.title,
        "body": event_details(event),
        "startdt": _utc_iso(event.start),
        "enddt": _utc_iso(event.end),
    }
    if event.all_day:
        params["startdt"] = event.start.date().isoformat()
        params["enddt"] = event.end.date().isoformat()
        params["allday"] = "true"
    return f"{OUTLOOK_COMPOSE_URL}?{urlencode(params, safe=':', quote_via=quote)}"


def ics_document(event: CalendarEvent) -> str:
    uid_source = f"{event.title}|{event.start.isoformat()}|{event.end.isoformat()}"
    uid = hashlib.sha1(uid_source.encode("utf-8")).hexdigest()
    if event.all_day:
        window = [f"DTSTART;VALUE=DATE:{event.start:%Y%m%d}", f"DTEND;VALUE=DATE:{event.end:%Y%m%d}"]
    else:
        window = [f"DTSTART:{_utc_stamp(event.start)}", f"DTEND:{_utc_stamp(event.end)}"]
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Digital Wonderland//Voice Magic//EN",
        "BEGIN:VEVENT",
        f"UID:{uid}@wonderland",
        f"DTSTAMP:{_utc_stamp(event.start)}",
        *window,
        f"SUMMARY:{_ics_escape(event.title)}",
        f"DESCRIPTION:{_ics_escape(event_details(event))}",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"


def apple_link(event: CalendarEvent) -> str:
    return "data:text/calendar;charset=utf8," + quote(ics_document(event))


def build_calendar_links(event: CalendarEvent) -> CalendarLinks:
    return CalendarLinks(google=google_link(event), outlook=outlook_link(event), apple=apple_link(event))

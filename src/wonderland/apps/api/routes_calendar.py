from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wonderland.core.calendar.google_auth import GoogleTokenError, build_google_auth_url
from wonderland.core.calendar.materializer import CalendarTarget, TaskMaterializer
from wonderland.core.config import Settings
from wonderland.core.extraction.schemas import backfill_task

from .deps import get_materializer, get_settings

router = APIRouter()


class AddToCalendarRequest(BaseModel):
    task: dict | None = None
    userId: str | None = None


class GoogleCalendarRequest(BaseModel):
    task: dict | None = None
    accessToken: str | None = None


class CalendarLinkRequest(BaseModel):
    task: dict | None = None


def _dispatch_error(message: str, details: str | None) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": message, "details": details})


@router.post("/add-to-calendar")
def add_to_calendar(request: AddToCalendarRequest, materializer: TaskMaterializer = Depends(get_materializer)):
    if not request.task or not request.userId:
        raise HTTPException(status_code=400, detail="Task and userId are required")

    report = materializer.materialize(
        [backfill_task(request.task)], [0], CalendarTarget.INTERNAL, owner_id=request.userId
    )
    outcome = report.outcomes[0]
    if not outcome.ok:
        return _dispatch_error("Failed to add task to calendar", outcome.error.reason)
    return {
        "success": True,
        "taskId": outcome.result["task_id"],
        "message": "Task added to calendar successfully",
    }


@router.post("/add-to-google-calendar")
def add_to_google_calendar(request: GoogleCalendarRequest, materializer: TaskMaterializer = Depends(get_materializer)):
    if not request.task or not request.accessToken:
        raise HTTPException(status_code=400, detail="Task and access token are required")

    report = materializer.materialize(
        [backfill_task(request.task)], [0], CalendarTarget.GOOGLE, access_token=request.accessToken
    )
    outcome = report.outcomes[0]
    if not outcome.ok:
        return _dispatch_error("Failed to add to Google Calendar", outcome.error.reason)
    return {
        "success": True,
        "eventId": outcome.result.get("event_id"),
        "eventLink": outcome.result.get("html_link"),
        "message": "Event added to Google Calendar successfully",
    }


@router.get("/add-to-google-calendar")
def google_calendar_auth_url(settings: Settings = Depends(get_settings)):
    try:
        auth_url = build_google_auth_url(settings.google_client_id, settings.google_redirect_uri)
    except GoogleTokenError as exc:
        return _dispatch_error("Google Calendar authorization is not configured", str(exc))
    return {
        "authUrl": auth_url,
        "message": "Redirect user to this URL for Google Calendar authorization",
    }


@router.post("/create-calendar-link")
def create_calendar_link(request: CalendarLinkRequest, materializer: TaskMaterializer = Depends(get_materializer)):
    if not request.task:
        raise HTTPException(status_code=400, detail="Task is required")

    report = materializer.materialize([backfill_task(request.task)], [0], CalendarTarget.LINKS)
    outcome = report.outcomes[0]
    if not outcome.ok:
        return _dispatch_error("Failed to create calendar links", outcome.error.reason)
    return {"success": True, "calendarLinks": outcome.result}

from __future__ import annotations

from urllib.parse import urlencode

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar.events"]


class GoogleDependencyError(RuntimeError):
    pass


class GoogleTokenError(RuntimeError):
    pass


def build_calendar_service(access_token: str):
    try:
        from google.oauth2.credentials import Credentials
        from googleapiclient.discovery import build
    except ImportError as exc:  # pragma: no cover - handled via the dispatch error path
        raise GoogleDependencyError(
            "Google integration dependencies are missing; install google-api-python-client and google-auth."
        ) from exc

    if not access_token:
        raise GoogleTokenError("Google Calendar access token required")

    creds = Credentials(token=access_token)
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


def build_google_auth_url(client_id: str, redirect_uri: str, scopes: list[str] | None = None) -> str:
    if not client_id:
        raise GoogleTokenError("GOOGLE_CLIENT_ID is not configured")
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": " ".join(scopes or CALENDAR_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from uuid import uuid4

import uvicorn
from fastapi import FastAPI

from wonderland.core.logging import configure_logging
from wonderland.core.logging.context import log_context

from .deps import get_settings
from .routes_calendar import router as calendar_router
from .routes_voice import router as voice_router


def _state_dir_writable(state_dir: Path) -> bool:
    try:
        state_dir.mkdir(parents=True, exist_ok=True)
        marker = state_dir / ".write-check"
        marker.write_text("ok", encoding="utf-8")
        marker.unlink(missing_ok=True)
        return True
    except OSError:
        return False


app = FastAPI(title="Digital Wonderland API")
configure_logging(get_settings())

app.include_router(voice_router, prefix="/api", tags=["voice"])
app.include_router(calendar_router, prefix="/api", tags=["calendar"])


@app.middleware("http")
async def request_context_middleware(request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
    with log_context(correlation_id=correlation_id):
        response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


@app.get("/healthz/full")
def healthz_full() -> dict[str, object]:
    settings = get_settings()
    state_writable = _state_dir_writable(settings.state_dir)
    payload: dict[str, object] = {
        "ok": True,
        "python": {"version": sys.version.split()[0]},
        "state_dir": {"path": str(settings.state_dir), "writable": state_writable},
        "timezone": settings.timezone,
        "openai": {
            "api_key_configured": bool(settings.openai_api_key),
            "transcribe_model": settings.transcribe_model,
            "llm_model": settings.llm_model,
        },
        "google": {"client_id_configured": bool(settings.google_client_id)},
        "audio": {"ffmpeg_available": shutil.which("ffmpeg") is not None},
    }
    if not state_writable:
        payload["ok"] = False
    return payload


def run() -> None:
    uvicorn.run("wonderland.apps.api.main:app", reload=True, host="127.0.0.1", port=8000)

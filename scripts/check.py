#!/usr/bin/env python3
from __future__ import annotations

import importlib
import os
import shutil
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


REQUIRED_PYTHON = (3, 10)


def _is_on(name: str, default: str = "on") -> bool:
    return os.getenv(name, default).strip().casefold() == "on"


def main() -> int:
    errors: list[str] = []

    if sys.version_info >= REQUIRED_PYTHON:
        print(f"OK: Python {sys.version.split()[0]} (>= 3.10)")
    else:
        errors.append("Python 3.10+ is required. Fix: install Python 3.10+ and recreate your virtual environment.")

    try:
        importlib.import_module("wonderland.apps.api.main")
        print("OK: import wonderland")
    except Exception as exc:
        errors.append(f"Could not import wonderland ({exc}). Fix: run `python -m pip install -e .[dev]` from repo root.")
        for message in errors:
            print(f"ERROR: {message}")
        return 1

    from wonderland.core.config import load_settings

    settings = load_settings()

    try:
        settings.state_dir.mkdir(parents=True, exist_ok=True)
        marker = settings.state_dir / ".write-check"
        marker.write_text("ok", encoding="utf-8")
        marker.unlink(missing_ok=True)
        print(f"OK: WONDERLAND_STATE_DIR writable at {settings.state_dir}")
    except OSError as exc:
        errors.append(
            f"WONDERLAND_STATE_DIR is not writable ({settings.state_dir}): {exc}. "
            "Fix: set WONDERLAND_STATE_DIR to a writable directory."
        )

    if settings.openai_api_key:
        print(f"OK: OpenAI key configured (transcription={settings.transcribe_model}, llm={settings.llm_model})")
    else:
        errors.append("OPENAI_API_KEY is missing. Fix: export OPENAI_API_KEY=<your-key>.")

    try:
        ZoneInfo(settings.timezone)
        print(f"OK: timezone {settings.timezone}")
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"Unknown timezone {settings.timezone!r}. Fix: set WONDERLAND_TIMEZONE to an IANA name.")

    if shutil.which("ffmpeg"):
        print("OK: ffmpeg found; uncommon audio formats will be converted")
    else:
        print("WARN: ffmpeg not found; uncommon audio formats are sent unconverted")

    if settings.google_client_id:
        print("OK: Google Calendar authorization configured")
    else:
        print("WARN: GOOGLE_CLIENT_ID not set; Google Calendar dispatch needs a caller-supplied token")

    if _is_on("WONDERLAND_CHECK_AUDIO", "on"):
        from wonderland.core.audio.capture import list_input_devices
        from wonderland.core.errors import PermissionDenied

        try:
            devices = list_input_devices()
        except PermissionDenied as exc:
            print(f"WARN: microphone unavailable ({exc}); uploads still work")
        else:
            print(f"OK: {len(devices)} audio input device(s) found")
    else:
        print("OK: audio device checks skipped (WONDERLAND_CHECK_AUDIO=off)")

    if errors:
        for message in errors:
            print(f"ERROR: {message}")
        return 1

    print("OK: environment check passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

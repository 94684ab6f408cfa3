from __future__ import annotations

import logging
import time

from wonderland.core.audio.schemas import AudioCapture
from wonderland.core.errors import TranscriptionFailed
from wonderland.core.http import WonderlandHTTPNetworkError, WonderlandHTTPStatusError, request_with_retry

from .schemas import Transcript

logger = logging.getLogger("wonderland.transcription")


def vendor_language(hint: str | None, default_language: str = "en-US") -> str | None:
    """Map a BCP-47-like hint to the vendor's short code.

    The default language is left out so the vendor auto-detects.
    """
    if not hint or not hint.strip():
        return None
    cleaned = hint.strip()
    if cleaned.casefold() == default_language.casefold():
        return None
    return cleaned.replace("_", "-").split("-")[0].casefold()


class TranscriptionClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "whisper-1",
        default_language: str = "en-US",
        timeout_s: float = 120.0,
    ) -> None:
        self.api_key = api_key
        self.url = f"{base_url.rstrip('/')}/audio/transcriptions"
        self.model = model
        self.default_language = default_language
        self.timeout_s = timeout_s

    def transcribe(self, capture: AudioCapture, language_hint: str | None = None) -> Transcript:
        if not self.api_key:
            raise TranscriptionFailed("api_key_not_configured")

        form: dict[str, str] = {"model": self.model}
        language = vendor_language(language_hint, self.default_language)
        if language:
            form["language"] = language

        start = time.perf_counter()
        try:
            response = request_with_retry(
                "POST",
                self.url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                data=form,
                files={"file": (capture.filename, capture.data, capture.media_type)},
                timeout_override=self.timeout_s,
                retries=0,
            )
        except WonderlandHTTPStatusError as exc:
            logger.warning("transcription_failed", extra={"extra_fields": {"status_code": exc.status_code}})
            raise TranscriptionFailed("vendor_error", status_code=exc.status_code, details=exc.payload) from exc
        except WonderlandHTTPNetworkError as exc:
            logger.warning("transcription_failed", extra={"extra_fields": {"reason": "network"}})
            raise TranscriptionFailed("network_error", details=str(exc)) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise TranscriptionFailed("invalid_response", status_code=response.status_code) from exc
        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str):
            raise TranscriptionFailed("invalid_response", status_code=response.status_code, details=payload)

        logger.info(
            "transcription_done",
            extra={
                "extra_fields": {
                    "model": self.model,
                    "language": language or "auto",
                    "audio_bytes": capture.size_bytes,
                    "chars": len(text),
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                }
            },
        )
        return Transcript(text=text, language_hint=language_hint)

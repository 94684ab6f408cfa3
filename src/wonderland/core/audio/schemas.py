from __future__ import annotations

from dataclasses import dataclass


def base_media_type(media_type: str) -> str:
    """``"Audio/WebM; codecs=opus"`` -> ``"audio/webm"``."""
    return media_type.split(";", 1)[0].strip().casefold()


@dataclass(frozen=True)
class AudioCapture:
    data: bytes
    media_type: str
    duration_s: float | None = None
    filename: str = "recording.webm"

    @property
    def base_media_type(self) -> str:
        return base_media_type(self.media_type)

    @property
    def size_bytes(self) -> int:
        return len(self.data)

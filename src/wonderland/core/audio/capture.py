"""Microphone capture into an in-memory buffer."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

import numpy as np

from wonderland.core.errors import PermissionDenied, RecorderBusyError, RecorderNotStartedError

from .schemas import AudioCapture
from .wav import encode_wav

logger = logging.getLogger("wonderland.audio")


def list_input_devices() -> list[dict[str, Any]]:
    try:
        import sounddevice as sd
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise PermissionDenied("sounddevice is required for device detection.") from exc

    try:
        devices = sd.query_devices()
    except sd.PortAudioError as exc:
        raise PermissionDenied(f"audio devices unavailable: {exc}") from exc
    return [dict(d) for d in devices if d.get("max_input_channels", 0) > 0]


def select_input_device(candidates: list[dict[str, Any]], prefer_name: str | None = None) -> dict[str, Any]:
    if not candidates:
        raise PermissionDenied("No input devices found.")
    if prefer_name:
        preferred = [d for d in candidates if prefer_name.lower() in d.get("name", "").lower()]
        if preferred:
            return preferred[0]
    return candidates[0]


def open_input_stream(**kwargs: Any) -> Any:
    try:
        import sounddevice as sd
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise PermissionDenied("sounddevice is required for recording.") from exc

    try:
        stream = sd.InputStream(**kwargs)
    except sd.PortAudioError as exc:
        raise PermissionDenied(f"microphone unavailable: {exc}") from exc
    try:
        stream.start()
    except sd.PortAudioError as exc:
        stream.close()
        raise PermissionDenied(f"microphone unavailable: {exc}") from exc
    return stream


class MicrophoneRecorder:
    """Records int16 frames from one input device until ``stop()``.

    The device is held only between ``start()`` and ``stop()``; ``stop()``
    closes the stream even when stopping it fails.
    """

    def __init__(
        self,
        sample_rate_hz: int = 16000,
        channels: int = 1,
        device_name: str | None = None,
        stream_opener: Callable[..., Any] | None = None,
        device_lister: Callable[[], list[dict[str, Any]]] | None = None,
    ) -> None:
        self.sample_rate_hz = sample_rate_hz
        self.channels = channels
        self.device_name = device_name
        self._open_stream = stream_opener or open_input_stream
        self._list_devices = device_lister or list_input_devices
        self._stream: Any | None = None
        self._chunks: list[np.ndarray] = []
        self._lock = threading.Lock()

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def _resolve_device(self) -> int | None:
        if not self.device_name:
            return None
        device = select_input_device(self._list_devices(), prefer_name=self.device_name)
        return device.get("index")

    def _on_audio(self, indata, _frames, _time, status) -> None:
        if status:
            logger.debug("audio_status", extra={"extra_fields": {"status": str(status)}})
        with self._lock:
            self._chunks.append(indata.copy())

    def start(self) -> None:
        if self._stream is not None:
            raise RecorderBusyError("recording already in progress")
        with self._lock:
            self._chunks = []
        device = self._resolve_device()
        self._stream = self._open_stream(
            samplerate=self.sample_rate_hz,
            channels=self.channels,
            dtype="int16",
            device=device,
            callback=self._on_audio,
        )
        logger.info("recording_started", extra={"extra_fields": {"device": device, "sample_rate_hz": self.sample_rate_hz}})

    def stop(self) -> AudioCapture:
        if self._stream is None:
            raise RecorderNotStartedError("recorder is not running")
        stream = self._stream
        self._stream = None
        try:
            stream.stop()
        finally:
            stream.close()

        with self._lock:
            chunks = self._chunks
            self._chunks = []
        if chunks:
            samples = np.concatenate(chunks)
        else:
            samples = np.zeros((0, self.channels), dtype=np.int16)

        frames = int(samples.shape[0])
        duration_s = frames / float(self.sample_rate_hz)
        logger.info("recording_stopped", extra={"extra_fields": {"frames": frames, "duration_s": round(duration_s, 2)}})
        return AudioCapture(
            data=encode_wav(samples, self.sample_rate_hz, self.channels),
            media_type="audio/wav",
            duration_s=duration_s,
            filename="recording.wav",
        )

"""WAV encoding helpers."""

from __future__ import annotations

import io
import wave

import numpy as np


def encode_wav(samples: np.ndarray, sample_rate_hz: int, channels: int = 1) -> bytes:
    """Encode int16 PCM samples as a self-describing 16-bit WAV payload."""
    if samples.dtype != np.int16:
        samples = samples.astype(np.int16)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as handle:
        handle.setnchannels(channels)
        handle.setsampwidth(2)
        handle.setframerate(sample_rate_hz)
        handle.writeframes(samples.tobytes())
    return buffer.getvalue()

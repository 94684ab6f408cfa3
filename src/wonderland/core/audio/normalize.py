"""Bring captured audio into an encoding the transcription vendor accepts."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from wonderland.core.errors import UnsupportedAudioFormat

from .schemas import AudioCapture, base_media_type
from .wav import encode_wav

logger = logging.getLogger("wonderland.audio")

ACCEPTED_MEDIA_TYPES = frozenset(
    {
        "audio/flac",
        "audio/x-flac",
        "audio/m4a",
        "audio/x-m4a",
        "audio/mp4",
        "audio/mpeg",
        "audio/mp3",
        "audio/mpga",
        "audio/ogg",
        "audio/oga",
        "audio/wav",
        "audio/x-wav",
        "audio/wave",
        "audio/webm",
        "video/mp4",
        "video/webm",
    }
)

TARGET_SAMPLE_RATE_HZ = 16000
UNSUPPORTED_FORMAT_WARNING = "unsupported_audio_format"

Decoder = Callable[[bytes, str], np.ndarray]


@dataclass(frozen=True)
class NormalizationResult:
    capture: AudioCapture
    warning: str | None = None
    converted: bool = False


def is_accepted(media_type: str) -> bool:
    return base_media_type(media_type) in ACCEPTED_MEDIA_TYPES


def ffmpeg_decode(data: bytes, media_type: str, timeout_s: float = 30.0) -> np.ndarray:
    """Decode any ffmpeg-readable payload to mono int16 PCM at 16 kHz."""
    command = [
        "ffmpeg",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        "pipe:0",
        "-vn",
        "-ac",
        "1",
        "-ar",
        str(TARGET_SAMPLE_RATE_HZ),
        "-acodec",
        "pcm_s16le",
        "-f",
        "s16le",
        "pipe:1",
    ]
    try:
        result = subprocess.run(command, input=data, capture_output=True, timeout=timeout_s, check=False)
    except FileNotFoundError as exc:
        raise UnsupportedAudioFormat("ffmpeg not found") from exc
    except subprocess.TimeoutExpired as exc:
        raise UnsupportedAudioFormat(f"decoding {media_type} timed out") from exc

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")[-500:]
        raise UnsupportedAudioFormat(f"cannot decode {media_type}: {stderr.strip()}")
    if not result.stdout:
        raise UnsupportedAudioFormat(f"decoding {media_type} produced no samples")
    return np.frombuffer(result.stdout, dtype=np.int16)


def _wav_filename(filename: str) -> str:
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    return f"{stem or 'recording'}.wav"


def normalize_audio(capture: AudioCapture, decoder: Decoder | None = None) -> NormalizationResult:
    if capture.base_media_type in ACCEPTED_MEDIA_TYPES:
        return NormalizationResult(capture=capture)

    decode = decoder or ffmpeg_decode
    try:
        samples = decode(capture.data, capture.media_type)
    except UnsupportedAudioFormat as exc:
        logger.warning(
            "audio_normalize_failed",
            extra={"extra_fields": {"media_type": capture.media_type, "reason": str(exc)}},
        )
        return NormalizationResult(capture=capture, warning=UNSUPPORTED_FORMAT_WARNING)

    samples = np.asarray(samples, dtype=np.int16).reshape(-1)
    converted = AudioCapture(
        data=encode_wav(samples, TARGET_SAMPLE_RATE_HZ, channels=1),
        media_type="audio/wav",
        duration_s=samples.shape[0] / float(TARGET_SAMPLE_RATE_HZ),
        filename=_wav_filename(capture.filename),
    )
    logger.info(
        "audio_normalized",
        extra={"extra_fields": {"from": capture.media_type, "bytes_in": capture.size_bytes, "bytes_out": converted.size_bytes}},
    )
    return NormalizationResult(capture=converted, converted=True)

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
_DEFAULT_GOOGLE_REDIRECT_URI = "http://localhost:3000/api/auth/google/callback"


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().casefold() in {"on", "1", "true", "yes"}


def state_dir() -> Path:
    configured = os.getenv("WONDERLAND_STATE_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".wonderland"


@dataclass
class Settings:
    openai_api_key: str
    openai_base_url: str
    transcribe_model: str
    default_language: str
    llm_model: str
    llm_temperature: float
    llm_max_tokens: int
    llm_timeout_s: float
    timezone: str
    state_dir: Path
    google_client_id: str
    google_redirect_uri: str
    history_max: int
    log_level: str
    log_to_file: bool
    log_dir: Path
    log_max_bytes: int
    log_backup_count: int


def load_settings() -> Settings:
    root = state_dir()
    configured_log_dir = os.getenv("WONDERLAND_LOG_DIR")
    return Settings(
        openai_api_key=os.getenv("WONDERLAND_OPENAI_API_KEY") or os.getenv("OPENAI_API_KEY", ""),
        openai_base_url=os.getenv("WONDERLAND_OPENAI_BASE_URL", _DEFAULT_OPENAI_BASE_URL).rstrip("/"),
        transcribe_model=os.getenv("WONDERLAND_TRANSCRIBE_MODEL", "whisper-1"),
        default_language=os.getenv("WONDERLAND_DEFAULT_LANGUAGE", "en-US"),
        llm_model=os.getenv("WONDERLAND_LLM_MODEL", "gpt-4o-mini"),
        llm_temperature=_get_float_env("WONDERLAND_LLM_TEMPERATURE", 0.1),
        llm_max_tokens=_get_int_env("WONDERLAND_LLM_MAX_TOKENS", 1000),
        llm_timeout_s=_get_float_env("WONDERLAND_LLM_TIMEOUT_S", 45.0),
        timezone=os.getenv("WONDERLAND_TIMEZONE", "UTC"),
        state_dir=root,
        google_client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        google_redirect_uri=os.getenv("GOOGLE_REDIRECT_URI", _DEFAULT_GOOGLE_REDIRECT_URI),
        history_max=max(1, _get_int_env("WONDERLAND_HISTORY_MAX", 500)),
        log_level=os.getenv("WONDERLAND_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        log_to_file=_get_bool_env("WONDERLAND_LOG_TO_FILE", False),
        log_dir=Path(configured_log_dir).expanduser() if configured_log_dir else root / "logs",
        log_max_bytes=max(1024, _get_int_env("WONDERLAND_LOG_MAX_BYTES", 5_000_000)),
        log_backup_count=max(0, _get_int_env("WONDERLAND_LOG_BACKUP_COUNT", 5)),
    )

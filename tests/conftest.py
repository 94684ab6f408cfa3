from __future__ import annotations

import pytest

from wonderland.apps.api import deps
from wonderland.apps.api.main import app
from wonderland.core.http import reset_http_client


def _clear_dependency_caches() -> None:
    deps.get_settings.cache_clear()
    deps.get_transcription_client.cache_clear()
    deps.get_extraction_engine.cache_clear()
    deps.get_task_store.cache_clear()
    deps.get_history_store.cache_clear()
    deps.get_materializer.cache_clear()
    deps.get_pipeline.cache_clear()


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("WONDERLAND_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("WONDERLAND_LOG_TO_FILE", "off")
    for name in (
        "OPENAI_API_KEY",
        "WONDERLAND_OPENAI_API_KEY",
        "WONDERLAND_OPENAI_BASE_URL",
        "WONDERLAND_LLM_MAX_TOKENS",
        "WONDERLAND_LLM_TEMPERATURE",
        "WONDERLAND_HISTORY_MAX",
        "WONDERLAND_TIMEZONE",
        "WONDERLAND_LOG_LEVEL",
        "WONDERLAND_LOG_DIR",
        "WONDERLAND_LOG_MAX_BYTES",
        "WONDERLAND_LOG_BACKUP_COUNT",
        "GOOGLE_CLIENT_ID",
        "GOOGLE_REDIRECT_URI",
    ):
        monkeypatch.delenv(name, raising=False)
    _clear_dependency_caches()
    yield
    app.dependency_overrides.clear()
    _clear_dependency_caches()
    reset_http_client()

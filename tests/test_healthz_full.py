from __future__ import annotations

from fastapi.testclient import TestClient

from wonderland.apps.api import deps
from wonderland.apps.api.main import app


def test_health_endpoints() -> None:
    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/healthz").json() == {"ok": True}


def test_healthz_full_defaults(tmp_path, monkeypatch) -> None:
    state_dir = tmp_path / "nested" / "state"
    monkeypatch.setenv("WONDERLAND_STATE_DIR", str(state_dir))
    deps.get_settings.cache_clear()

    with TestClient(app) as client:
        response = client.get("/healthz/full")
    deps.get_settings.cache_clear()

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["python"]["version"]
    assert payload["state_dir"] == {"path": str(state_dir), "writable": True}
    assert payload["timezone"] == "UTC"
    assert payload["openai"]["api_key_configured"] is False
    assert payload["google"] == {"client_id_configured": False}
    assert isinstance(payload["audio"]["ffmpeg_available"], bool)
    assert state_dir.exists()


def test_healthz_full_never_echoes_secrets(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-should-not-leak-123456")
    deps.get_settings.cache_clear()

    with TestClient(app) as client:
        response = client.get("/healthz/full")
    deps.get_settings.cache_clear()

    assert response.json()["openai"]["api_key_configured"] is True
    assert "sk-should-not-leak" not in response.text

from __future__ import annotations

import httpx
import pytest

from wonderland.core.audio.schemas import AudioCapture
from wonderland.core.errors import TranscriptionFailed
from wonderland.core.http import WonderlandHTTPNetworkError, WonderlandHTTPStatusError
from wonderland.core.transcription.client import TranscriptionClient, vendor_language

CAPTURE = AudioCapture(data=b"audio", media_type="audio/webm", filename="recording.webm")


@pytest.mark.parametrize(
    ("hint", "expected"),
    [
        (None, None),
        ("", None),
        ("en-US", None),
        ("EN-us", None),
        ("fr-FR", "fr"),
        ("pt_BR", "pt"),
        ("de", "de"),
    ],
)
def test_vendor_language_mapping(hint, expected) -> None:
    assert vendor_language(hint, "en-US") == expected


def test_transcribe_posts_multipart_and_returns_text(monkeypatch) -> None:
    captured: dict = {}

    def fake_request(method, url, **kwargs):
        captured.update({"method": method, "url": url, **kwargs})
        return httpx.Response(200, json={"text": "buy milk tomorrow"})

    monkeypatch.setattr("wonderland.core.transcription.client.request_with_retry", fake_request)
    client = TranscriptionClient(api_key="sk-test", base_url="https://vendor.local/v1")

    transcript = client.transcribe(CAPTURE, language_hint="fr-FR")

    assert transcript.text == "buy milk tomorrow"
    assert transcript.language_hint == "fr-FR"
    assert captured["url"] == "https://vendor.local/v1/audio/transcriptions"
    assert captured["data"] == {"model": "whisper-1", "language": "fr"}
    assert captured["files"]["file"] == ("recording.webm", b"audio", "audio/webm")
    assert captured["retries"] == 0


def test_default_language_lets_vendor_detect(monkeypatch) -> None:
    captured: dict = {}

    def fake_request(method, url, **kwargs):
        captured.update(kwargs)
        return httpx.Response(200, json={"text": "hello"})

    monkeypatch.setattr("wonderland.core.transcription.client.request_with_retry", fake_request)

    TranscriptionClient(api_key="sk-test").transcribe(CAPTURE, language_hint="en-US")

    assert "language" not in captured["data"]


def test_missing_api_key_fails_without_network(monkeypatch) -> None:
    def fake_request(*_args, **_kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr("wonderland.core.transcription.client.request_with_retry", fake_request)

    with pytest.raises(TranscriptionFailed) as excinfo:
        TranscriptionClient(api_key="").transcribe(CAPTURE)
    assert excinfo.value.reason == "api_key_not_configured"


def test_vendor_status_is_surfaced(monkeypatch) -> None:
    def fake_request(*_args, **_kwargs):
        raise WonderlandHTTPStatusError("HTTP status 400", status_code=400, payload={"error": "bad audio"})

    monkeypatch.setattr("wonderland.core.transcription.client.request_with_retry", fake_request)

    with pytest.raises(TranscriptionFailed) as excinfo:
        TranscriptionClient(api_key="sk-test").transcribe(CAPTURE)
    assert excinfo.value.status_code == 400
    assert excinfo.value.details == {"error": "bad audio"}


def test_network_failure_is_surfaced(monkeypatch) -> None:
    def fake_request(*_args, **_kwargs):
        raise WonderlandHTTPNetworkError("timeout")

    monkeypatch.setattr("wonderland.core.transcription.client.request_with_retry", fake_request)

    with pytest.raises(TranscriptionFailed) as excinfo:
        TranscriptionClient(api_key="sk-test").transcribe(CAPTURE)
    assert excinfo.value.reason == "network_error"


def test_response_without_text_is_invalid(monkeypatch) -> None:
    monkeypatch.setattr(
        "wonderland.core.transcription.client.request_with_retry",
        lambda *_a, **_k: httpx.Response(200, json={"segments": []}),
    )

    with pytest.raises(TranscriptionFailed) as excinfo:
        TranscriptionClient(api_key="sk-test").transcribe(CAPTURE)
    assert excinfo.value.reason == "invalid_response"

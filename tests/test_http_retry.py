from __future__ import annotations

import httpx
import pytest

from wonderland.core.http import WonderlandHTTPNetworkError, WonderlandHTTPStatusError
from wonderland.core.http.client import request_with_retry


def _install(monkeypatch, handler) -> None:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    monkeypatch.setattr("wonderland.core.http.client.get_http_client", lambda: client)
    monkeypatch.setattr("wonderland.core.http.client.time.sleep", lambda _: None)
    monkeypatch.setattr("wonderland.core.http.client.random.random", lambda: 0.5)


def test_request_with_retry_retries_transient_http_status(monkeypatch) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] < 3:
            return httpx.Response(503, request=request)
        return httpx.Response(200, request=request, json={"ok": True})

    _install(monkeypatch, handler)

    response = request_with_retry("GET", "http://service.local/test", retries=2)

    assert response.status_code == 200
    assert calls["count"] == 3


def test_zero_retries_surfaces_status_and_payload(monkeypatch) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(429, request=request, json={"error": {"message": "rate limited"}})

    _install(monkeypatch, handler)

    with pytest.raises(WonderlandHTTPStatusError) as excinfo:
        request_with_retry("POST", "http://service.local/v1/audio/transcriptions", retries=0)

    assert calls["count"] == 1
    assert excinfo.value.status_code == 429
    assert excinfo.value.payload == {"error": {"message": "rate limited"}}


def test_transport_errors_become_network_errors(monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    _install(monkeypatch, handler)

    with pytest.raises(WonderlandHTTPNetworkError):
        request_with_retry("GET", "http://service.local/test", retries=1)

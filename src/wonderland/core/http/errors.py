from __future__ import annotations


class WonderlandHTTPError(RuntimeError):
    """Base error for shared HTTP client operations."""


class WonderlandHTTPStatusError(WonderlandHTTPError):
    def __init__(self, message: str, status_code: int | None = None, payload: object | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class WonderlandHTTPNetworkError(WonderlandHTTPError):
    """Raised when request retries are exhausted for transport errors."""

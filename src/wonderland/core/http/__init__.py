from .client import get_http_client, request_with_retry, reset_http_client
from .errors import WonderlandHTTPError, WonderlandHTTPNetworkError, WonderlandHTTPStatusError

__all__ = [
    "get_http_client",
    "request_with_retry",
    "reset_http_client",
    "WonderlandHTTPError",
    "WonderlandHTTPNetworkError",
    "WonderlandHTTPStatusError",
]

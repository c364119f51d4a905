"""Internal machinery: HTTP transport."""

from .http import (
    Auth,
    HttpClient,
    QueryAuth,
    RawResponse,
)

__all__ = [
    "Auth",
    "HttpClient",
    "QueryAuth",
    "RawResponse",
]

"""Custom exception hierarchy for dropkit.

All dropkit-specific exceptions inherit from DropkitError, enabling
users to catch all dropkit exceptions with a single except clause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dropkit.providers.digitalocean.events import EventKind


class DropkitError(Exception):
    """Base exception for all dropkit errors."""


class ProviderError(DropkitError):
    """Raised when the API answers with an ``ERROR`` envelope."""


class AuthorizationError(ProviderError):
    """Raised on HTTP 401 or an error envelope rejecting the credentials."""


class NotFoundError(DropkitError):
    """Raised on HTTP 404 for endpoints that do not tolerate absence."""


class TransportError(DropkitError):
    """Raised for I/O failures, unexpected HTTP statuses and undecodable bodies."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class TimeoutError(DropkitError):  # noqa: A001
    """Raised when an event does not complete within its time budget."""

    def __init__(self, kind: EventKind, event_id: int, timeout: float) -> None:
        self.kind = kind
        self.event_id = event_id
        self.timeout = timeout
        super().__init__(
            f"Event {event_id} did not complete within {timeout:.1f}s ({kind.value})"
        )


class OperationFailedError(DropkitError):
    """Raised when an event reaches a terminal state other than done."""

    def __init__(self, event_id: int) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} finished with an error")


class KeyFormatError(DropkitError):
    """Raised when an SSH public key cannot be decoded or encoded."""


class ConfigurationError(DropkitError):
    """Raised for invalid configuration or missing required settings."""


class NoSuchElementError(DropkitError):
    """Raised when a required node or image cannot be found."""

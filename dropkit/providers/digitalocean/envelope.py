"""Response envelope interpretation.

Every v1 response is a JSON envelope::

    {"status": "OK" | "ERROR", "message": ..., "error_message": ..., <field>: ...}

and failures usually arrive with HTTP 200 and ``status == "ERROR"``. This
module turns an ``(http status, body)`` pair into the payload under the
requested field or into one of the dropkit errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, cast

from dropkit.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ProviderError,
    TransportError,
)

# Error envelopes whose message names a credential problem.
_AUTH_MARKERS = ("access denied", "unauthorized", "invalid api key", "invalid client")


class EnvelopeStatus(Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True, slots=True)
class Envelope[T]:
    status: EnvelopeStatus
    payload: T | None = None
    message: str | None = None
    error_message: str | None = None

    @property
    def details(self) -> str:
        return self.message or self.error_message or ""

    @classmethod
    def parse(cls, body: Any, field: str | None = None) -> Envelope[T]:
        if not isinstance(body, dict):
            raise TransportError(f"Expected a JSON object, got {type(body).__name__}")
        raw_status = body.get("status")
        try:
            status = EnvelopeStatus(str(raw_status).upper())
        except ValueError as e:
            raise TransportError(f"Unknown envelope status: {raw_status!r}") from e
        return cls(
            status=status,
            payload=cast("T | None", body.get(field)) if field else None,
            message=body.get("message"),
            error_message=body.get("error_message"),
        )

    def unwrap(self, field: str | None = None) -> T | None:
        """Return the payload or raise the error the envelope carries."""
        if self.status is EnvelopeStatus.ERROR:
            details = self.details
            if any(marker in details.lower() for marker in _AUTH_MARKERS):
                raise AuthorizationError(details)
            raise ProviderError(details)
        if field is not None and self.payload is None:
            raise TransportError(f"Response is missing the '{field}' field")
        return self.payload


def _error_details(status: int, body: Any) -> str:
    if isinstance(body, dict):
        details = body.get("message") or body.get("error_message")
        if details:
            return str(details)
    if isinstance(body, str) and body.strip():
        return body.strip()
    return f"HTTP {status}"


def interpret(
    status: int,
    body: Any,
    field: str | None = None,
    *,
    null_on_404: bool = False,
    absent: Any = None,
) -> Any:
    """Map an HTTP status and decoded body to a payload or a typed error.

    Args:
        status: HTTP status code.
        body: Decoded JSON body, or ``None`` when the response had none.
        field: Envelope field holding the payload (``droplet``, ``event_id``...).
            ``None`` for calls that return nothing.
        null_on_404: Return ``absent`` instead of raising on HTTP 404.
        absent: Value returned when there is nothing to return, such as an
            empty body. List endpoints pass ``[]``.

    Returns:
        The payload under ``field``, or ``absent``.
    """
    if status == 401:
        raise AuthorizationError(_error_details(status, body))
    if status == 404:
        if null_on_404:
            return absent
        raise NotFoundError(_error_details(status, body))
    if status >= 400:
        raise TransportError(_error_details(status, body), status=status)
    if body is None:
        return absent
    return Envelope.parse(body, field).unwrap(field)


__all__ = ["Envelope", "EnvelopeStatus", "interpret"]

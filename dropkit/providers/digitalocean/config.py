"""DigitalOcean provider configuration.

Immutable configuration dataclasses for the DigitalOcean v1 API.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dropkit.core.exceptions import ConfigurationError

DEFAULT_ENDPOINT = "https://api.digitalocean.com/v1"


# =============================================================================
# Event Budgets
# =============================================================================


@dataclass(frozen=True, slots=True)
class Timeouts:
    """How long, in seconds, to wait for each kind of event to complete."""

    node_running: float = 1200.0
    node_suspended: float = 30.0
    node_terminated: float = 30.0
    image_available: float = 3600.0


@dataclass(frozen=True, slots=True)
class Polling:
    """Event poll periods in seconds. The period doubles up to ``max_period``."""

    initial_period: float = 0.05
    max_period: float = 1.0

    def __post_init__(self) -> None:
        if self.initial_period <= 0:
            raise ConfigurationError("polling.initial_period must be positive")
        if self.max_period < self.initial_period:
            raise ConfigurationError("polling.max_period must be >= initial_period")


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class DigitalOcean:
    """DigitalOcean provider configuration.

    Example:
        >>> from dropkit.providers.digitalocean import DigitalOcean
        >>> config = DigitalOcean(client_id="...", api_key="...")

    Args:
        client_id: Account client id. Falls back to DIGITALOCEAN_CLIENT_ID env var.
        api_key: Account API key. Falls back to DIGITALOCEAN_API_KEY env var.
        endpoint: Base URL of the v1 API.
        request_timeout: Per-request HTTP timeout in seconds. Default: 30.
        timeouts: Completion budgets per event kind.
        polling: Initial and maximum event poll periods.
        credentials_group: Group used to name the generated default key pair.
        login_user: User of the default login credentials. Default: root.
        key_bits: Size of the generated default RSA key. Default: 2048.
    """

    client_id: str | None = None
    api_key: str | None = None
    endpoint: str = DEFAULT_ENDPOINT
    request_timeout: float = 30.0
    timeouts: Timeouts = field(default_factory=Timeouts)
    polling: Polling = field(default_factory=Polling)
    credentials_group: str = "credentials"
    login_user: str = "root"
    key_bits: int = 2048

    @property
    def type(self) -> str:
        return "digitalocean"

    def credentials(self) -> tuple[str, str]:
        """Resolve the account credentials from config or environment."""
        client_id = self.client_id or os.environ.get("DIGITALOCEAN_CLIENT_ID")
        api_key = self.api_key or os.environ.get("DIGITALOCEAN_API_KEY")
        if not client_id or not api_key:
            raise ConfigurationError(
                "DigitalOcean credentials not provided. "
                "Set DIGITALOCEAN_CLIENT_ID and DIGITALOCEAN_API_KEY or pass "
                "client_id/api_key to DigitalOcean()"
            )
        return client_id, api_key


# =============================================================================
# Exports
# =============================================================================

__all__ = ["DEFAULT_ENDPOINT", "DigitalOcean", "Polling", "Timeouts"]

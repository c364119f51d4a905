"""DigitalOcean v1 API response types.

TypedDicts mirroring the JSON the API returns.
"""

from __future__ import annotations

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Envelope
# =============================================================================

type EnvelopeStatusValue = Literal["OK", "ERROR"]


class EnvelopeResponse(TypedDict):
    """Fields shared by every response body."""

    status: EnvelopeStatusValue
    message: NotRequired[str | None]
    error_message: NotRequired[str | None]


# =============================================================================
# Resources
# =============================================================================


class DropletResponse(TypedDict):
    id: int
    name: str
    image_id: int
    size_id: int
    region_id: int
    backups_active: bool
    ip_address: str
    private_ip_address: NotRequired[str | None]
    locked: bool
    status: str  # new, active, off, archive
    created_at: str


class DropletCreationResponse(TypedDict):
    id: int
    name: str
    image_id: int
    size_id: int
    event_id: int


class ImageResponse(TypedDict):
    id: int
    name: str
    distribution: str
    public: NotRequired[bool]
    slug: NotRequired[str | None]


class RegionResponse(TypedDict):
    id: int | str
    name: str
    slug: str


class SizeResponse(TypedDict):
    id: int
    name: str
    slug: str
    memory: int
    cpu: int
    disk: int
    cost_per_hour: float | str
    cost_per_month: float | str


class SshKeyResponse(TypedDict):
    id: int
    name: str
    ssh_pub_key: NotRequired[str]


class EventResponse(TypedDict):
    id: int
    action_status: str | None  # null while pending, then "done"
    droplet_id: NotRequired[int | None]
    event_type_id: NotRequired[int | None]
    percentage: NotRequired[str | int | None]


# =============================================================================
# Request Parameters
# =============================================================================


class CreateDropletParams(TypedDict, total=False):
    name: str
    image_id: int
    size_id: int
    region_id: int
    ssh_key_ids: list[int]
    private_networking: bool
    backups_enabled: bool

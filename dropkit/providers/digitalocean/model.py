"""DigitalOcean domain values.

Frozen dataclasses built from the raw API records in ``types``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from dropkit.core.exceptions import TransportError

from .ssh import PublicKey, decode_public_key, encode_public_key
from .types import (
    DropletCreationResponse,
    DropletResponse,
    EventResponse,
    ImageResponse,
    RegionResponse,
    SizeResponse,
    SshKeyResponse,
)


def _required(record: Any, key: str, kind: str) -> Any:
    value = record.get(key) if isinstance(record, dict) else None
    if value is None:
        raise TransportError(f"Malformed {kind}: missing '{key}'")
    return value


def _float(value: float | str | None) -> float:
    return float(value) if value not in (None, "") else 0.0


# =============================================================================
# Droplets
# =============================================================================


class DropletStatus(Enum):
    NEW = "new"
    ACTIVE = "active"
    OFF = "off"
    ARCHIVE = "archive"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def _missing_(cls, value: object) -> DropletStatus:
        if isinstance(value, str) and value.lower() != value:
            return cls(value.lower())
        return cls.UNRECOGNIZED


@dataclass(frozen=True, slots=True)
class Droplet:
    id: int
    name: str
    image_id: int
    size_id: int
    region_id: int
    backups_active: bool
    ip: str
    locked: bool
    status: DropletStatus
    created: datetime
    private_ip: str | None = None

    @classmethod
    def from_response(cls, data: DropletResponse) -> Droplet:
        created = _required(data, "created_at", "droplet")
        try:
            created_at = datetime.fromisoformat(created)
        except (TypeError, ValueError) as e:
            raise TransportError(f"Malformed droplet: bad created_at {created!r}") from e
        return cls(
            id=int(_required(data, "id", "droplet")),
            name=_required(data, "name", "droplet"),
            image_id=int(data.get("image_id") or 0),
            size_id=int(data.get("size_id") or 0),
            region_id=int(data.get("region_id") or 0),
            backups_active=bool(data.get("backups_active", False)),
            ip=_required(data, "ip_address", "droplet"),
            private_ip=data.get("private_ip_address"),
            locked=bool(data.get("locked", False)),
            status=DropletStatus(_required(data, "status", "droplet")),
            created=created_at,
        )


@dataclass(frozen=True, slots=True)
class DropletCreation:
    """What the create call returns: the new droplet id and the event to wait on."""

    id: int
    event_id: int

    @classmethod
    def from_response(cls, data: DropletCreationResponse) -> DropletCreation:
        return cls(
            id=int(_required(data, "id", "droplet creation")),
            event_id=int(_required(data, "event_id", "droplet creation")),
        )


@dataclass(frozen=True, slots=True)
class CreateDropletOptions:
    """Optional droplet creation parameters."""

    ssh_key_ids: tuple[int, ...] = ()
    private_networking: bool | None = None
    backups_enabled: bool | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.ssh_key_ids:
            params["ssh_key_ids"] = list(self.ssh_key_ids)
        if self.private_networking is not None:
            params["private_networking"] = self.private_networking
        if self.backups_enabled is not None:
            params["backups_enabled"] = self.backups_enabled
        return params


# =============================================================================
# Catalog
# =============================================================================

_VERSION_PATTERN = re.compile(r"\d+(\.?\d+)?")
_ARCH_PATTERN = re.compile(r"x\d{2}")


@dataclass(frozen=True, slots=True)
class OperatingSystem:
    """Distribution, version and architecture guessed from an image name.

    "Ubuntu 12.10 x64" gives version "12.10" and arch "x64".
    """

    distribution: str
    version: str
    arch: str

    @classmethod
    def from_image(cls, distribution: str, name: str) -> OperatingSystem:
        version = _VERSION_PATTERN.search(name)
        arch = _ARCH_PATTERN.search(name)
        return cls(
            distribution=distribution,
            version=version.group(0) if version else "",
            arch=arch.group(0) if arch else "",
        )


@dataclass(frozen=True, slots=True)
class Image:
    id: int
    name: str
    distribution: str
    public_image: bool
    slug: str | None = None

    @property
    def operating_system(self) -> OperatingSystem:
        return OperatingSystem.from_image(self.distribution, self.name)

    @classmethod
    def from_response(cls, data: ImageResponse) -> Image:
        return cls(
            id=int(_required(data, "id", "image")),
            name=_required(data, "name", "image"),
            distribution=data.get("distribution") or "",
            public_image=bool(data.get("public", False)),
            slug=data.get("slug"),
        )


@dataclass(frozen=True, slots=True)
class Region:
    id: str
    name: str
    slug: str

    @classmethod
    def from_response(cls, data: RegionResponse) -> Region:
        return cls(
            id=str(_required(data, "id", "region")),
            name=_required(data, "name", "region"),
            slug=data.get("slug", ""),
        )


@dataclass(frozen=True, slots=True)
class Size:
    id: int
    name: str
    slug: str
    memory: int
    cpu: int
    disk: int
    cost_per_hour: float
    cost_per_month: float

    @classmethod
    def from_response(cls, data: SizeResponse) -> Size:
        return cls(
            id=int(_required(data, "id", "size")),
            name=_required(data, "name", "size"),
            slug=data.get("slug", ""),
            memory=int(data.get("memory") or 0),
            cpu=int(data.get("cpu") or 0),
            disk=int(data.get("disk") or 0),
            cost_per_hour=_float(data.get("cost_per_hour")),
            cost_per_month=_float(data.get("cost_per_month")),
        )


# =============================================================================
# SSH Keys
# =============================================================================


@dataclass(frozen=True, slots=True)
class SshKey:
    id: int
    name: str
    public_key: PublicKey | None = field(default=None, compare=False)

    @property
    def public_openssh(self) -> str | None:
        return encode_public_key(self.public_key) if self.public_key is not None else None

    @classmethod
    def from_response(cls, data: SshKeyResponse) -> SshKey:
        pub = data.get("ssh_pub_key")
        return cls(
            id=int(_required(data, "id", "ssh key")),
            name=_required(data, "name", "ssh key"),
            public_key=decode_public_key(pub) if pub else None,
        )


# =============================================================================
# Events
# =============================================================================


class EventStatus(Enum):
    PENDING = "pending"
    DONE = "done"
    ERROR = "error"

    @property
    def terminal(self) -> bool:
        return self is not EventStatus.PENDING

    @classmethod
    def from_action_status(cls, value: str | None) -> EventStatus:
        match (value or "").lower():
            case "done":
                return cls.DONE
            case "error" | "failed":
                return cls.ERROR
            case _:
                return cls.PENDING


@dataclass(frozen=True, slots=True)
class Event:
    id: int
    status: EventStatus
    droplet_id: int | None = None
    action: int | None = None
    percentage: int | None = None

    @classmethod
    def from_response(cls, data: EventResponse) -> Event:
        percentage = data.get("percentage")
        return cls(
            id=int(_required(data, "id", "event")),
            status=EventStatus.from_action_status(data.get("action_status")),
            droplet_id=data.get("droplet_id"),
            action=data.get("event_type_id"),
            percentage=int(percentage) if percentage not in (None, "") else None,
        )


__all__ = [
    "CreateDropletOptions",
    "Droplet",
    "DropletCreation",
    "DropletStatus",
    "Event",
    "EventStatus",
    "Image",
    "OperatingSystem",
    "Region",
    "Size",
    "SshKey",
]

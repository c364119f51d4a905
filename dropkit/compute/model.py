"""Provider-agnostic compute model.

The shapes a compute provider hands back to callers: nodes, images,
hardware profiles, locations and the credentials used to log in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"
    ERROR = "error"
    UNRECOGNIZED = "unrecognized"


class ImageStatus(Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    DELETED = "deleted"
    UNRECOGNIZED = "unrecognized"


class LocationScope(Enum):
    PROVIDER = "provider"
    REGION = "region"
    ZONE = "zone"


class OsFamily(Enum):
    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    CENTOS = "centos"
    FEDORA = "fedora"
    ARCH = "arch"
    COREOS = "coreos"
    FREEBSD = "freebsd"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_value(cls, value: str | None) -> OsFamily:
        if not value:
            return cls.UNRECOGNIZED
        normalized = value.strip().lower().replace(" ", "")
        for family in cls:
            if family.value == normalized:
                return family
        return cls.UNRECOGNIZED


@dataclass(frozen=True, slots=True)
class OperatingSystem:
    family: OsFamily
    name: str = ""
    description: str = ""
    version: str = ""
    arch: str = ""
    is_64bit: bool = False


@dataclass(frozen=True, slots=True)
class LoginCredentials:
    """How to log into a node: a user plus a password and/or a private key."""

    user: str
    private_key: str | None = None
    password: str | None = None

    def __repr__(self) -> str:
        secrets = []
        if self.private_key:
            secrets.append("private_key=***")
        if self.password:
            secrets.append("password=***")
        return f"LoginCredentials(user={self.user!r}{''.join(', ' + s for s in secrets)})"


@dataclass(frozen=True, slots=True)
class Location:
    id: str
    description: str
    scope: LocationScope = LocationScope.REGION
    slug: str = ""


@dataclass(frozen=True, slots=True)
class Processor:
    cores: float
    speed: float = 1.0


@dataclass(frozen=True, slots=True)
class Hardware:
    id: str
    provider_id: str
    name: str
    ram_mb: int
    processors: tuple[Processor, ...]
    disk_gb: float
    slug: str = ""
    cost_per_hour: float | None = None
    cost_per_month: float | None = None

    @property
    def vcpus(self) -> float:
        return sum(p.cores for p in self.processors)


@dataclass(frozen=True, slots=True)
class Image:
    id: str
    provider_id: str
    name: str
    description: str
    status: ImageStatus
    operating_system: OperatingSystem
    default_credentials: LoginCredentials | None = None


@dataclass(frozen=True, slots=True)
class NodeMetadata:
    id: str
    provider_id: str
    name: str
    status: NodeStatus
    backend_status: str
    image_id: str | None = None
    hardware: Hardware | None = None
    location: Location | None = None
    operating_system: OperatingSystem | None = None
    public_addresses: frozenset[str] = frozenset()
    private_addresses: frozenset[str] = frozenset()
    credentials: LoginCredentials | None = None
    group: str | None = None


@dataclass(frozen=True, slots=True)
class TemplateOptions:
    """Portable options every provider understands."""

    public_key: str | None = None
    login_credentials: LoginCredentials | None = None


@dataclass(frozen=True, slots=True)
class Template:
    image: Image
    hardware: Hardware
    location: Location
    options: TemplateOptions = field(default_factory=TemplateOptions)


@dataclass(frozen=True, slots=True)
class CloneImageTemplate:
    """Request to build a new image by cloning an existing node."""

    name: str
    source_node_id: str


@dataclass(frozen=True, slots=True)
class NodeAndInitialCredentials[N]:
    node: N
    id: str
    credentials: LoginCredentials | None = None

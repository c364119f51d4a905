"""Conversions from DigitalOcean values to the portable compute model."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from dropkit.compute.model import (
    Hardware,
    ImageStatus,
    Location,
    LocationScope,
    NodeMetadata,
    NodeStatus,
    OperatingSystem,
    OsFamily,
    Processor,
)
from dropkit.compute.model import Image as PortableImage
from dropkit.compute.naming import GroupNamingConvention

from .model import Droplet, DropletStatus, Image, Region, Size

_PORTABLE_STATUS = {
    DropletStatus.ACTIVE: NodeStatus.RUNNING,
    DropletStatus.NEW: NodeStatus.PENDING,
    DropletStatus.OFF: NodeStatus.SUSPENDED,
    DropletStatus.ARCHIVE: NodeStatus.TERMINATED,
}


def to_portable_status(status: DropletStatus | str) -> NodeStatus:
    """Map a droplet lifecycle state to the portable node status."""
    return _PORTABLE_STATUS.get(DropletStatus(status), NodeStatus.UNRECOGNIZED)


def image_to_image(image: Image) -> PortableImage:
    os = image.operating_system
    return PortableImage(
        id=str(image.id),
        provider_id=str(image.id),
        name=image.name,
        description=image.name,
        status=ImageStatus.AVAILABLE,
        operating_system=OperatingSystem(
            family=OsFamily.from_value(image.distribution),
            name=image.name,
            description=image.name,
            version=os.version,
            arch=os.arch,
            is_64bit=os.arch == "x64",
        ),
    )


def size_to_hardware(size: Size) -> Hardware:
    return Hardware(
        id=str(size.id),
        provider_id=str(size.id),
        name=size.name,
        slug=size.slug,
        ram_mb=size.memory,
        processors=tuple(Processor(cores=1.0) for _ in range(size.cpu)),
        disk_gb=float(size.disk),
        cost_per_hour=size.cost_per_hour,
        cost_per_month=size.cost_per_month,
    )


def region_to_location(region: Region) -> Location:
    return Location(
        id=region.id,
        description=region.name,
        scope=LocationScope.REGION,
        slug=region.slug,
    )


@dataclass(frozen=True, slots=True)
class Catalog:
    """Portable images, hardware and locations indexed by provider id.

    Droplets only carry the ids of their image, size and region; the
    catalog resolves them when building node metadata.
    """

    images: Mapping[str, PortableImage] = field(default_factory=dict)
    hardware: Mapping[str, Hardware] = field(default_factory=dict)
    locations: Mapping[str, Location] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        images: Iterable[Image],
        sizes: Iterable[Size],
        regions: Iterable[Region],
    ) -> Catalog:
        return cls(
            images={str(i.id): image_to_image(i) for i in images},
            hardware={str(s.id): size_to_hardware(s) for s in sizes},
            locations={r.id: region_to_location(r) for r in regions},
        )


def droplet_to_node(
    droplet: Droplet,
    catalog: Catalog,
    naming: GroupNamingConvention | None = None,
) -> NodeMetadata:
    image = catalog.images.get(str(droplet.image_id))
    return NodeMetadata(
        id=str(droplet.id),
        provider_id=str(droplet.id),
        name=droplet.name,
        status=to_portable_status(droplet.status),
        backend_status=droplet.status.value,
        image_id=image.id if image else str(droplet.image_id),
        hardware=catalog.hardware.get(str(droplet.size_id)),
        location=catalog.locations.get(str(droplet.region_id)),
        operating_system=image.operating_system if image else None,
        public_addresses=frozenset({droplet.ip}),
        private_addresses=frozenset({droplet.private_ip}) if droplet.private_ip else frozenset(),
        group=naming.group_in_unique_name(droplet.name) if naming else None,
    )


__all__ = [
    "Catalog",
    "droplet_to_node",
    "image_to_image",
    "region_to_location",
    "size_to_hardware",
    "to_portable_status",
]

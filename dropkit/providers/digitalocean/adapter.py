"""Compute service adapter for DigitalOcean.

Exposes droplets, images, sizes and regions through the portable
``ComputeServiceAdapter`` contract. Mutations return once the event they
start has completed, so callers can read the resulting state right away.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from dropkit.compute.model import NodeAndInitialCredentials, Template, TemplateOptions
from dropkit.core.exceptions import NoSuchElementError

from .client import DigitalOceanClient
from .events import EventKind, EventPoller
from .model import CreateDropletOptions, Droplet, Image, Region, Size

log = logger.bind(provider="digitalocean", component="adapter")


@dataclass(frozen=True, slots=True)
class DigitalOceanTemplateOptions(TemplateOptions):
    """Template options only DigitalOcean understands.

    Args:
        ssh_key_ids: Registered keys to install on the droplet.
        private_networking: Enable the private network interface.
        backups_enabled: Enable automated backups.
    """

    ssh_key_ids: tuple[int, ...] = ()
    private_networking: bool | None = None
    backups_enabled: bool | None = None


def parse_id(id: str | int) -> int | None:
    """Portable ids are strings; the API wants integers."""
    try:
        return int(id)
    except (TypeError, ValueError):
        return None


def _require_id(id: str | int) -> int:
    parsed = parse_id(id)
    if parsed is None:
        raise NoSuchElementError(f"Invalid DigitalOcean id: {id!r}")
    return parsed


class DigitalOceanComputeServiceAdapter:
    """``ComputeServiceAdapter[Droplet, Size, Image, Region]`` over the v1 API.

    Args:
        client: Typed v1 client.
        poller: Waits for the events mutations start.
        await_transitions: Whether reboot, resume and suspend wait for the
            droplet to reach the target state. Destroy never waits.
    """

    def __init__(
        self,
        client: DigitalOceanClient,
        poller: EventPoller,
        *,
        await_transitions: bool = True,
    ) -> None:
        self._client = client
        self._poller = poller
        self._await_transitions = await_transitions

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    async def _register_key(self, name: str, public_key: str) -> int:
        key = await self._client.keys.create(name, public_key)
        log.info("Registered SSH key {key_name} (id={id})", key_name=name, id=key.id)
        return key.id

    async def _creation_options(self, name: str, options: TemplateOptions) -> CreateDropletOptions:
        key_ids: list[int] = []
        if options.public_key:
            key_ids.append(await self._register_key(name, options.public_key))

        match options:
            case DigitalOceanTemplateOptions():
                key_ids.extend(options.ssh_key_ids)
                return CreateDropletOptions(
                    ssh_key_ids=tuple(key_ids),
                    private_networking=options.private_networking,
                    backups_enabled=options.backups_enabled,
                )
            case _:
                return CreateDropletOptions(ssh_key_ids=tuple(key_ids))

    async def create_node(
        self, group: str, name: str, template: Template
    ) -> NodeAndInitialCredentials[Droplet]:
        """Create a droplet and wait until it is running.

        The creation call only returns the droplet id, so the full droplet
        is fetched once the creation event is done. Credentials are left for
        the caller to resolve from the template or the image defaults.
        """
        options = await self._creation_options(name, template.options)
        creation = await self._client.droplets.create(
            name,
            _require_id(template.image.provider_id),
            _require_id(template.hardware.provider_id),
            _require_id(template.location.id),
            options,
        )
        log.info(
            "Creating droplet {name} in group {group} (id={droplet_id})",
            name=name, group=group, droplet_id=creation.id,
        )
        await self._poller.wait_for(creation.event_id, EventKind.NODE_RUNNING)

        droplet = await self._client.droplets.get(creation.id)
        if droplet is None:
            raise NoSuchElementError(f"Droplet {creation.id} vanished after creation")
        log.info("Droplet {name} is running at {ip}", name=name, ip=droplet.ip, droplet_id=droplet.id)
        return NodeAndInitialCredentials(node=droplet, id=str(droplet.id))

    async def list_nodes(self) -> list[Droplet]:
        return await self._client.droplets.list()

    async def list_nodes_by_ids(self, ids: Iterable[str]) -> list[Droplet]:
        # TODO: fetch each droplet with droplets.get when only a handful of ids are wanted.
        wanted = set(map(str, ids))
        return [d for d in await self.list_nodes() if str(d.id) in wanted]

    async def get_node(self, id: str) -> Droplet | None:
        droplet_id = parse_id(id)
        if droplet_id is None:
            return None
        return await self._client.droplets.get(droplet_id)

    async def destroy_node(self, id: str) -> None:
        event_id = await self._client.droplets.destroy(_require_id(id), scrub_data=True)
        log.info("Destroying droplet {droplet_id} (event {event_id})", droplet_id=id, event_id=event_id)

    async def _transition(self, event_id: int, kind: EventKind) -> None:
        if self._await_transitions:
            await self._poller.wait_for(event_id, kind)

    async def reboot_node(self, id: str) -> None:
        event_id = await self._client.droplets.reboot(_require_id(id))
        await self._transition(event_id, EventKind.NODE_RUNNING)

    async def resume_node(self, id: str) -> None:
        event_id = await self._client.droplets.power_on(_require_id(id))
        await self._transition(event_id, EventKind.NODE_RUNNING)

    async def suspend_node(self, id: str) -> None:
        event_id = await self._client.droplets.power_off(_require_id(id))
        await self._transition(event_id, EventKind.NODE_SUSPENDED)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def list_images(self) -> list[Image]:
        return await self._client.images.list()

    async def get_image(self, id: str) -> Image | None:
        image_id = parse_id(id)
        if image_id is None:
            return None
        return await self._client.images.get(image_id)

    async def list_hardware_profiles(self) -> list[Size]:
        return await self._client.sizes.list()

    async def list_locations(self) -> list[Region]:
        return await self._client.regions.list()


__all__ = [
    "DigitalOceanComputeServiceAdapter",
    "DigitalOceanTemplateOptions",
    "parse_id",
]

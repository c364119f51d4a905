"""Portable compute service backed by DigitalOcean.

Wires the client, the event poller, the adapter, the image extension and
the default-credentials provisioner together, and translates DigitalOcean
values into the portable compute model.

Example:
    async with DigitalOceanComputeService(DigitalOcean()) as compute:
        sizes = await compute.list_hardware_profiles()
        node = await compute.create_node("web", template)
        await compute.destroy_node(node.id)
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Iterable
from typing import Any

from loguru import logger

from dropkit.compute.model import (
    Hardware,
    Image,
    Location,
    LoginCredentials,
    NodeMetadata,
    Template,
    TemplateOptions,
)
from dropkit.compute.naming import GroupNamingConvention

from .adapter import DigitalOceanComputeServiceAdapter, DigitalOceanTemplateOptions
from .client import DigitalOceanClient
from .config import DigitalOcean
from .credentials import DefaultCredentialsProvisioner, DefaultImageCredentials
from .events import EventPoller
from .images import DigitalOceanImageExtension
from .transforms import (
    Catalog,
    droplet_to_node,
    image_to_image,
    region_to_location,
    size_to_hardware,
)

log = logger.bind(provider="digitalocean", component="service")


def _with_key(options: TemplateOptions, key_id: int) -> DigitalOceanTemplateOptions:
    match options:
        case DigitalOceanTemplateOptions():
            return dataclasses.replace(options, ssh_key_ids=(*options.ssh_key_ids, key_id))
        case _:
            return DigitalOceanTemplateOptions(
                public_key=options.public_key,
                login_credentials=options.login_credentials,
                ssh_key_ids=(key_id,),
            )


class DigitalOceanComputeService:
    """Portable compute operations on a DigitalOcean account.

    Args:
        config: Provider configuration.
        naming: Naming convention for nodes and generated keys.
        client: Pre-built client. Built from ``config`` when omitted.
        adapter: Pre-built adapter. Built around ``client`` when omitted.
        images: Pre-built image extension.
        credentials: Pre-built default-credentials provisioner.
    """

    def __init__(
        self,
        config: DigitalOcean,
        *,
        naming: GroupNamingConvention | None = None,
        client: DigitalOceanClient | None = None,
        adapter: DigitalOceanComputeServiceAdapter | None = None,
        images: DigitalOceanImageExtension | None = None,
        credentials: DefaultCredentialsProvisioner | None = None,
    ) -> None:
        self._config = config
        self._naming = naming or GroupNamingConvention()
        self._client = client or DigitalOceanClient(config)
        poller = EventPoller(self._client.events, config.timeouts, config.polling)
        self._adapter = adapter or DigitalOceanComputeServiceAdapter(self._client, poller)
        self._images = images or DigitalOceanImageExtension(self._client, poller)
        self._credentials = credentials or DefaultCredentialsProvisioner(
            self._client, config, self._naming
        )

    @property
    def config(self) -> DigitalOcean:
        return self._config

    @property
    def image_extension(self) -> DigitalOceanImageExtension:
        return self._images

    async def __aenter__(self) -> DigitalOceanComputeService:
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    async def default_credentials(self) -> DefaultImageCredentials:
        return await self._credentials.get()

    async def populate_default_credentials(self, image: Image | None = None) -> LoginCredentials:
        return await self._credentials.populate_default_credentials(image)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    async def _catalog(self) -> Catalog:
        images, sizes, regions = await asyncio.gather(
            self._client.images.list(),
            self._client.sizes.list(),
            self._client.regions.list(),
        )
        return Catalog.build(images, sizes, regions)

    async def create_node(self, group: str, template: Template) -> NodeMetadata:
        """Create a node in ``group`` and return it with its login credentials.

        Unless the template brings its own login credentials, the default
        key pair is installed on the node and its credentials returned.
        """
        name = self._naming.unique_name_for_group(group)
        credentials = template.options.login_credentials or template.image.default_credentials
        if credentials is None:
            defaults = await self._credentials.get()
            template = dataclasses.replace(
                template, options=_with_key(template.options, defaults.key.id)
            )
            credentials = defaults.credentials

        created = await self._adapter.create_node(group, name, template)
        catalog = Catalog(
            images={template.image.provider_id: template.image},
            hardware={template.hardware.provider_id: template.hardware},
            locations={template.location.id: template.location},
        )
        node = droplet_to_node(created.node, catalog, self._naming)
        log.info("Node {name} ready in group {group}", name=node.name, group=group)
        return dataclasses.replace(node, credentials=created.credentials or credentials, group=group)

    async def list_nodes(self) -> list[NodeMetadata]:
        droplets, catalog = await asyncio.gather(self._adapter.list_nodes(), self._catalog())
        return [droplet_to_node(d, catalog, self._naming) for d in droplets]

    async def list_nodes_by_ids(self, ids: Iterable[str]) -> list[NodeMetadata]:
        droplets, catalog = await asyncio.gather(
            self._adapter.list_nodes_by_ids(ids), self._catalog()
        )
        return [droplet_to_node(d, catalog, self._naming) for d in droplets]

    async def get_node(self, id: str) -> NodeMetadata | None:
        droplet = await self._adapter.get_node(id)
        if droplet is None:
            return None
        return droplet_to_node(droplet, await self._catalog(), self._naming)

    async def destroy_node(self, id: str) -> None:
        await self._adapter.destroy_node(id)

    async def reboot_node(self, id: str) -> None:
        await self._adapter.reboot_node(id)

    async def resume_node(self, id: str) -> None:
        await self._adapter.resume_node(id)

    async def suspend_node(self, id: str) -> None:
        await self._adapter.suspend_node(id)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def list_images(self) -> list[Image]:
        return [image_to_image(i) for i in await self._adapter.list_images()]

    async def get_image(self, id: str) -> Image | None:
        image = await self._adapter.get_image(id)
        return image_to_image(image) if image else None

    async def list_hardware_profiles(self) -> list[Hardware]:
        return [size_to_hardware(s) for s in await self._adapter.list_hardware_profiles()]

    async def list_locations(self) -> list[Location]:
        return [region_to_location(r) for r in await self._adapter.list_locations()]


__all__ = ["DigitalOceanComputeService"]

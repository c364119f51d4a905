"""Image extension: snapshot droplets into reusable images."""

from __future__ import annotations

from loguru import logger

from dropkit.compute.model import CloneImageTemplate, Image
from dropkit.core.exceptions import (
    AuthorizationError,
    NoSuchElementError,
    NotFoundError,
    ProviderError,
)

from .adapter import parse_id
from .client import DigitalOceanClient
from .events import EventKind, EventPoller
from .transforms import image_to_image

log = logger.bind(provider="digitalocean", component="images")


class DigitalOceanImageExtension:
    """Clones droplets into images and deletes images.

    A snapshot is only consistent when taken from a stopped droplet, so the
    source droplet is powered off first and left off afterwards.
    """

    def __init__(self, client: DigitalOceanClient, poller: EventPoller) -> None:
        self._client = client
        self._poller = poller

    async def build_image_template_from_node(self, name: str, id: str) -> CloneImageTemplate:
        droplet_id = parse_id(id)
        try:
            droplet = await self._client.droplets.get(droplet_id) if droplet_id is not None else None
        except AuthorizationError:
            raise
        except (ProviderError, NotFoundError) as e:
            raise NoSuchElementError(f"Cannot find droplet with id: {id}") from e
        if droplet is None:
            raise NoSuchElementError(f"Cannot find droplet with id: {id}")
        return CloneImageTemplate(name=name, source_node_id=str(droplet.id))

    async def create_image(self, template: CloneImageTemplate) -> Image:
        droplet_id = parse_id(template.source_node_id)
        if droplet_id is None:
            raise NoSuchElementError(f"Cannot find droplet with id: {template.source_node_id}")

        event_id = await self._client.droplets.power_off(droplet_id)
        await self._poller.wait_for(event_id, EventKind.NODE_SUSPENDED)
        log.debug("Droplet {droplet_id} is off, taking snapshot {name}", droplet_id=droplet_id, name=template.name)

        event_id = await self._client.droplets.snapshot(droplet_id, template.name)
        await self._poller.wait_for(event_id, EventKind.IMAGE_AVAILABLE)

        # The snapshot event does not carry the image id.
        for image in await self._client.images.list():
            if image.name == template.name:
                log.info("Snapshot {name} available as image {image_id}", name=image.name, image_id=image.id)
                return image_to_image(image)
        raise NoSuchElementError(f"Could not find an image named {template.name}")

    async def create_image_from_node(self, name: str, node_id: str) -> Image:
        template = await self.build_image_template_from_node(name, node_id)
        return await self.create_image(template)

    async def delete_image(self, id: str) -> bool:
        """Delete an image. Returns ``False`` instead of raising on any failure."""
        try:
            image_id = parse_id(id)
            if image_id is None:
                raise NoSuchElementError(f"Invalid image id: {id!r}")
            await self._client.images.delete(image_id)
        except Exception as e:
            log.warning("Error deleting image {image_id}: {error}", image_id=id, error=e)
            return False
        return True


__all__ = ["DigitalOceanImageExtension"]

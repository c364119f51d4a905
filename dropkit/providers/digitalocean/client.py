"""Async HTTP client for the DigitalOcean v1 API.

Every v1 call is a GET with the account credentials in the query string;
mutations live under paths such as ``/droplets/new`` or
``/droplets/{id}/power_off`` and answer with the id of the event that
tracks them.

Example:
    async with DigitalOceanClient(DigitalOcean(client_id="...", api_key="...")) as client:
        droplets = await client.droplets.list()
        event_id = await client.droplets.power_off(droplets[0].id)
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from dropkit.core.exceptions import TransportError
from dropkit.infra.http import HttpClient, QueryAuth

from .config import DigitalOcean
from .envelope import interpret
from .model import (
    CreateDropletOptions,
    Droplet,
    DropletCreation,
    Event,
    Image,
    Region,
    Size,
    SshKey,
)
from .ssh import PublicKey, encode_public_key


class _Api:
    __slots__ = ("_http", "_log")

    def __init__(self, http: HttpClient, component: str) -> None:
        self._http = http
        self._log = logger.bind(provider="digitalocean", component=component)

    async def _call(
        self,
        path: str,
        field: str | None = None,
        *,
        params: dict[str, Any] | None = None,
        null_on_404: bool = False,
        absent: Any = None,
    ) -> Any:
        resp = await self._http.get(path, params=params)
        return interpret(resp.status, resp.data, field, null_on_404=null_on_404, absent=absent)

    async def _require(self, path: str, field: str, params: dict[str, Any] | None = None) -> Any:
        data = await self._call(path, field, params=params)
        if data is None:
            raise TransportError(f"Empty response from {path}")
        return data

    async def _event(self, path: str, params: dict[str, Any] | None = None) -> int:
        event_id = int(await self._require(path, "event_id", params))
        self._log.debug("{path} started event {event_id}", path=path, event_id=event_id)
        return event_id


def _key_text(public_key: str | PublicKey) -> str:
    return public_key if isinstance(public_key, str) else encode_public_key(public_key)


# =============================================================================
# Droplets
# =============================================================================


class DropletApi(_Api):
    """Operations under ``/droplets``."""

    async def list(self) -> list[Droplet]:
        return [Droplet.from_response(d) for d in await self._call("/droplets", "droplets", absent=[])]

    async def get(self, id: int) -> Droplet | None:
        """Droplet details, or ``None`` if no droplet has that id."""
        data = await self._call(f"/droplets/{id}", "droplet", null_on_404=True)
        return Droplet.from_response(data) if data else None

    async def create(
        self,
        name: str,
        image_id: int,
        size_id: int,
        region_id: int,
        options: CreateDropletOptions | None = None,
    ) -> DropletCreation:
        params: dict[str, Any] = {
            "name": name,
            "image_id": image_id,
            "size_id": size_id,
            "region_id": region_id,
        }
        if options is not None:
            params.update(options.to_params())
        data = await self._require("/droplets/new", "droplet", params)
        creation = DropletCreation.from_response(data)
        self._log.debug(
            "Droplet {name} created with id {id} (event {event_id})",
            name=name, id=creation.id, event_id=creation.event_id,
        )
        return creation

    async def reboot(self, id: int) -> int:
        return await self._event(f"/droplets/{id}/reboot")

    async def power_cycle(self, id: int) -> int:
        return await self._event(f"/droplets/{id}/power_cycle")

    async def shutdown(self, id: int) -> int:
        return await self._event(f"/droplets/{id}/shutdown")

    async def power_off(self, id: int) -> int:
        return await self._event(f"/droplets/{id}/power_off")

    async def power_on(self, id: int) -> int:
        return await self._event(f"/droplets/{id}/power_on")

    async def reset_password(self, id: int) -> int:
        return await self._event(f"/droplets/{id}/password_reset")

    async def resize(self, id: int, size_id: int) -> int:
        return await self._event(f"/droplets/{id}/resize", {"size_id": size_id})

    async def snapshot(self, id: int, name: str | None = None) -> int:
        return await self._event(f"/droplets/{id}/snapshot", {"name": name})

    async def restore(self, id: int, image_id: int) -> int:
        return await self._event(f"/droplets/{id}/restore", {"image_id": image_id})

    async def rebuild(self, id: int, image_id: int) -> int:
        return await self._event(f"/droplets/{id}/rebuild", {"image_id": image_id})

    async def rename(self, id: int, name: str) -> int:
        return await self._event(f"/droplets/{id}/rename", {"name": name})

    async def destroy(self, id: int, scrub_data: bool = False) -> int:
        params = {"scrub_data": True} if scrub_data else None
        return await self._event(f"/droplets/{id}/destroy", params)


# =============================================================================
# Images
# =============================================================================


class ImageApi(_Api):
    """Operations under ``/images``."""

    async def list(self) -> list[Image]:
        return [Image.from_response(i) for i in await self._call("/images", "images", absent=[])]

    async def get(self, id: int) -> Image | None:
        data = await self._call(f"/images/{id}", "image", null_on_404=True)
        return Image.from_response(data) if data else None

    async def delete(self, id: int) -> None:
        await self._call(f"/images/{id}/destroy")

    async def transfer(self, id: int, region_id: int) -> int:
        return await self._event(f"/images/{id}/transfer", {"region_id": region_id})


# =============================================================================
# Sizes & Regions
# =============================================================================


class SizeApi(_Api):
    async def list(self) -> list[Size]:
        return [Size.from_response(s) for s in await self._call("/sizes", "sizes", absent=[])]


class RegionApi(_Api):
    async def list(self) -> list[Region]:
        return [Region.from_response(r) for r in await self._call("/regions", "regions", absent=[])]


# =============================================================================
# SSH Keys
# =============================================================================


class KeyApi(_Api):
    """Operations under ``/ssh_keys``. Public keys may be given as text or key objects."""

    async def list(self) -> list[SshKey]:
        return [SshKey.from_response(k) for k in await self._call("/ssh_keys", "ssh_keys", absent=[])]

    async def get(self, id: int) -> SshKey | None:
        data = await self._call(f"/ssh_keys/{id}", "ssh_key", null_on_404=True)
        return SshKey.from_response(data) if data else None

    async def create(self, name: str, public_key: str | PublicKey) -> SshKey:
        params = {"name": name, "ssh_pub_key": _key_text(public_key)}
        data = await self._require("/ssh_keys/new", "ssh_key", params)
        return SshKey.from_response(data)

    async def edit(self, id: int, public_key: str | PublicKey) -> SshKey:
        params = {"ssh_pub_key": _key_text(public_key)}
        data = await self._require(f"/ssh_keys/{id}/edit", "ssh_key", params)
        return SshKey.from_response(data)

    async def delete(self, id: int) -> None:
        await self._call(f"/ssh_keys/{id}/destroy")


# =============================================================================
# Events
# =============================================================================


class EventApi(_Api):
    async def get(self, id: int) -> Event:
        return Event.from_response(await self._require(f"/events/{id}", "event"))


# =============================================================================
# Client
# =============================================================================


class DigitalOceanClient:
    """Typed access to the v1 API, grouped by resource.

    The underlying HTTP session is opened lazily and closed by ``close()``
    or on leaving the ``async with`` block. One client can be shared by
    concurrent tasks.
    """

    def __init__(self, config: DigitalOcean) -> None:
        client_id, api_key = config.credentials()
        self._http = HttpClient(
            config.endpoint,
            QueryAuth(client_id, api_key),
            timeout=config.request_timeout,
        )
        self.droplets = DropletApi(self._http, "droplets")
        self.images = ImageApi(self._http, "images")
        self.sizes = SizeApi(self._http, "sizes")
        self.regions = RegionApi(self._http, "regions")
        self.keys = KeyApi(self._http, "keys")
        self.events = EventApi(self._http, "events")

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> DigitalOceanClient:
        await self._http.__aenter__()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


__all__ = [
    "DigitalOceanClient",
    "DropletApi",
    "EventApi",
    "ImageApi",
    "KeyApi",
    "RegionApi",
    "SizeApi",
]

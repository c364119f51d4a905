from __future__ import annotations

import json
from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

from dropkit.compute.model import (
    Hardware,
    ImageStatus,
    Location,
    OperatingSystem,
    OsFamily,
    Processor,
    Template,
    TemplateOptions,
)
from dropkit.compute.model import Image as PortableImage
from dropkit.core.exceptions import NotFoundError
from dropkit.providers.digitalocean.config import DigitalOcean, Polling, Timeouts
from dropkit.providers.digitalocean.events import EventPoller
from dropkit.providers.digitalocean.model import (
    CreateDropletOptions,
    Droplet,
    DropletCreation,
    DropletStatus,
    Event,
    EventStatus,
    Image,
    Region,
    Size,
    SshKey,
)
from dropkit.providers.digitalocean.ssh import PublicKey, decode_public_key

RESOURCES = Path(__file__).parent / "resources"


def load_resource(name: str) -> Any:
    return json.loads((RESOURCES / name).read_text())


def make_droplet(**overrides: Any) -> Droplet:
    data = {
        "id": 100823,
        "name": "test222",
        "image_id": 1,
        "size_id": 33,
        "region_id": 1,
        "backups_active": False,
        "ip_address": "1.2.3.4",
        "locked": False,
        "status": "active",
        "created_at": "2014-01-13T20:53:08Z",
    }
    data.update(overrides)
    return Droplet.from_response(data)  # type: ignore[arg-type]


def make_template(options: TemplateOptions | None = None) -> Template:
    return Template(
        image=PortableImage(
            id="1601",
            provider_id="1601",
            name="CentOS 5.8 x64",
            description="CentOS 5.8 x64",
            status=ImageStatus.AVAILABLE,
            operating_system=OperatingSystem(family=OsFamily.CENTOS),
        ),
        hardware=Hardware(
            id="33", provider_id="33", name="512MB", ram_mb=512,
            processors=(Processor(cores=1),), disk_gb=20,
        ),
        location=Location(id="1", description="New York 1"),
        options=options or TemplateOptions(),
    )


# ─── In-memory API fakes ─────────────────────────────────────────────


class FakeEventApi:
    """Events whose status sequence is scripted per id. The last status repeats."""

    def __init__(self) -> None:
        self.scripts: dict[int, list[EventStatus]] = {}
        self.calls: Counter[int] = Counter()

    def script(self, event_id: int, *statuses: EventStatus) -> None:
        self.scripts[event_id] = list(statuses)

    async def get(self, id: int) -> Event:
        self.calls[id] += 1
        script = self.scripts.get(id, [EventStatus.DONE])
        status = script.pop(0) if len(script) > 1 else script[0]
        return Event(id=id, status=status)


class FakeDropletApi:
    def __init__(self) -> None:
        self.droplets: dict[int, Droplet] = {}
        self.created: list[tuple[str, int, int, int, CreateDropletOptions | None]] = []
        self.actions: list[tuple[str, int]] = []
        self.snapshots: list[tuple[int, str | None]] = []
        self.scrubbed: list[tuple[int, bool]] = []
        self.next_id = 42
        self.next_event = 7

    def _event(self, action: str, id: int) -> int:
        self.actions.append((action, id))
        self.next_event += 1
        return self.next_event

    async def list(self) -> list[Droplet]:
        return list(self.droplets.values())

    async def get(self, id: int) -> Droplet | None:
        return self.droplets.get(id)

    async def create(
        self,
        name: str,
        image_id: int,
        size_id: int,
        region_id: int,
        options: CreateDropletOptions | None = None,
    ) -> DropletCreation:
        self.created.append((name, image_id, size_id, region_id, options))
        droplet_id = self.next_id
        self.next_id += 1
        self.droplets[droplet_id] = make_droplet(
            id=droplet_id, name=name, image_id=image_id, size_id=size_id, region_id=region_id,
        )
        return DropletCreation(id=droplet_id, event_id=self.next_event)

    async def reboot(self, id: int) -> int:
        return self._event("reboot", id)

    async def power_on(self, id: int) -> int:
        return self._event("power_on", id)

    async def power_off(self, id: int) -> int:
        if id in self.droplets:
            self.droplets[id] = replace(self.droplets[id], status=DropletStatus.OFF)
        return self._event("power_off", id)

    async def snapshot(self, id: int, name: str | None = None) -> int:
        self.snapshots.append((id, name))
        return self._event("snapshot", id)

    async def destroy(self, id: int, scrub_data: bool = False) -> int:
        self.scrubbed.append((id, scrub_data))
        return self._event("destroy", id)


class FakeImageApi:
    def __init__(self, images: list[Image]) -> None:
        self.images = list(images)
        self.deleted: list[int] = []

    async def list(self) -> list[Image]:
        return list(self.images)

    async def get(self, id: int) -> Image | None:
        return next((i for i in self.images if i.id == id), None)

    async def delete(self, id: int) -> None:
        if not any(i.id == id for i in self.images):
            raise NotFoundError(f"No image {id}")
        self.deleted.append(id)
        self.images = [i for i in self.images if i.id != id]


class FakeSizeApi:
    def __init__(self, sizes: list[Size]) -> None:
        self.sizes = sizes

    async def list(self) -> list[Size]:
        return list(self.sizes)


class FakeRegionApi:
    def __init__(self, regions: list[Region]) -> None:
        self.regions = regions

    async def list(self) -> list[Region]:
        return list(self.regions)


class FakeKeyApi:
    def __init__(self, keys: list[SshKey] | None = None) -> None:
        self.keys = list(keys or [])
        self.created: list[tuple[str, str]] = []
        self.list_calls = 0

    async def list(self) -> list[SshKey]:
        self.list_calls += 1
        return list(self.keys)

    async def create(self, name: str, public_key: str | PublicKey) -> SshKey:
        assert isinstance(public_key, str)
        self.created.append((name, public_key))
        key = SshKey(id=1000 + len(self.created), name=name, public_key=decode_public_key(public_key))
        self.keys.append(key)
        return key


class FakeClient:
    def __init__(self) -> None:
        self.droplets = FakeDropletApi()
        self.images = FakeImageApi([
            Image.from_response(i) for i in load_resource("images.json")["images"]
        ])
        self.sizes = FakeSizeApi([
            Size.from_response(s) for s in load_resource("sizes.json")["sizes"]
        ])
        self.regions = FakeRegionApi([
            Region.from_response(r) for r in load_resource("regions.json")["regions"]
        ])
        self.keys = FakeKeyApi()
        self.events = FakeEventApi()
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    async def __aenter__(self) -> FakeClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


# ─── Fixtures ────────────────────────────────────────────────────────


FAST_POLLING = Polling(initial_period=0.001, max_period=0.005)
SHORT_TIMEOUTS = Timeouts(
    node_running=0.5, node_suspended=0.5, node_terminated=0.5, image_available=0.5,
)


@pytest.fixture
def config() -> DigitalOcean:
    return DigitalOcean(
        client_id="client",
        api_key="secret",
        timeouts=SHORT_TIMEOUTS,
        polling=FAST_POLLING,
        key_bits=1024,
    )


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def poller(client: FakeClient, config: DigitalOcean) -> EventPoller:
    return EventPoller(client.events, config.timeouts, config.polling)

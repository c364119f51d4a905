from __future__ import annotations

import pytest
from conftest import FakeClient, make_droplet

from dropkit.compute.model import ImageStatus, OsFamily
from dropkit.compute.protocols import ImageExtension
from dropkit.core.exceptions import (
    NoSuchElementError,
    NotFoundError,
    OperationFailedError,
    ProviderError,
)
from dropkit.providers.digitalocean.events import EventPoller
from dropkit.providers.digitalocean.images import DigitalOceanImageExtension
from dropkit.providers.digitalocean.model import DropletStatus, EventStatus, Image

pytestmark = [pytest.mark.unit]


@pytest.fixture
def extension(client: FakeClient, poller: EventPoller) -> DigitalOceanImageExtension:
    client.droplets.droplets[100823] = make_droplet()
    return DigitalOceanImageExtension(client, poller)  # type: ignore[arg-type]


def test_satisfies_protocol(extension: DigitalOceanImageExtension):
    assert isinstance(extension, ImageExtension)


@pytest.mark.asyncio
async def test_clone_powers_off_then_snapshots(
    extension: DigitalOceanImageExtension, client: FakeClient
):
    client.images.images.append(
        Image(id=5000, name="img", distribution="Ubuntu", public_image=False)
    )

    image = await extension.create_image_from_node("img", "100823")

    assert client.droplets.actions == [("power_off", 100823), ("snapshot", 100823)]
    assert client.droplets.snapshots == [(100823, "img")]
    assert client.events.calls == {8: 1, 9: 1}
    assert client.droplets.droplets[100823].status is DropletStatus.OFF
    assert image.id == "5000"
    assert image.name == "img"
    assert image.status is ImageStatus.AVAILABLE
    assert image.operating_system.family is OsFamily.UBUNTU


@pytest.mark.asyncio
async def test_template_from_node(extension: DigitalOceanImageExtension):
    template = await extension.build_image_template_from_node("img", "100823")
    assert template.name == "img"
    assert template.source_node_id == "100823"


@pytest.mark.asyncio
@pytest.mark.parametrize("node_id", ["1", "not-a-number"])
async def test_missing_node(extension: DigitalOceanImageExtension, client: FakeClient, node_id: str):
    with pytest.raises(NoSuchElementError):
        await extension.create_image_from_node("img", node_id)
    assert client.droplets.actions == []


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [ProviderError("Not Found"), NotFoundError("HTTP 404")])
async def test_lookup_error_means_missing_node(
    extension: DigitalOceanImageExtension, client: FakeClient, monkeypatch: pytest.MonkeyPatch, error: Exception
):
    async def failing_get(id: int):
        raise error

    monkeypatch.setattr(client.droplets, "get", failing_get)

    with pytest.raises(NoSuchElementError, match="100823") as exc_info:
        await extension.create_image_from_node("img", "100823")

    assert exc_info.value.__cause__ is error
    assert client.droplets.actions == []


@pytest.mark.asyncio
async def test_snapshot_not_listed(extension: DigitalOceanImageExtension):
    with pytest.raises(NoSuchElementError, match="img"):
        await extension.create_image_from_node("img", "100823")


@pytest.mark.asyncio
async def test_snapshot_not_taken_when_power_off_fails(
    extension: DigitalOceanImageExtension, client: FakeClient
):
    client.events.script(8, EventStatus.ERROR)

    with pytest.raises(OperationFailedError):
        await extension.create_image_from_node("img", "100823")

    assert client.droplets.snapshots == []


class TestDeleteImage:
    @pytest.mark.asyncio
    async def test_success(self, extension: DigitalOceanImageExtension, client: FakeClient):
        assert await extension.delete_image("1601") is True
        assert client.images.deleted == [1601]

    @pytest.mark.asyncio
    async def test_missing_image_is_false(self, extension: DigitalOceanImageExtension):
        assert await extension.delete_image("424242") is False

    @pytest.mark.asyncio
    async def test_invalid_id_is_false(self, extension: DigitalOceanImageExtension):
        assert await extension.delete_image("abc") is False

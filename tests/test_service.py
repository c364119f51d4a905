from __future__ import annotations

import pytest
from conftest import FakeClient, make_droplet, make_template
from injector import Injector

from dropkit.compute.model import LoginCredentials, NodeStatus, TemplateOptions
from dropkit.compute.naming import GroupNamingConvention
from dropkit.providers.digitalocean import DigitalOceanModule
from dropkit.providers.digitalocean.adapter import DigitalOceanTemplateOptions
from dropkit.providers.digitalocean.client import DigitalOceanClient
from dropkit.providers.digitalocean.config import DigitalOcean
from dropkit.providers.digitalocean.credentials import DefaultCredentialsProvisioner
from dropkit.providers.digitalocean.service import DigitalOceanComputeService

pytestmark = [pytest.mark.unit]


@pytest.fixture
def service(client: FakeClient, config: DigitalOcean) -> DigitalOceanComputeService:
    return DigitalOceanComputeService(
        config,
        naming=GroupNamingConvention(suffix=lambda: "a1f"),
        client=client,  # type: ignore[arg-type]
    )


class TestCreateNode:
    @pytest.mark.asyncio
    async def test_installs_default_key_and_returns_its_credentials(
        self, service: DigitalOceanComputeService, client: FakeClient
    ):
        node = await service.create_node("web", make_template())

        defaults = await service.default_credentials()
        assert node.name == "web-a1f"
        assert node.group == "web"
        assert node.status is NodeStatus.RUNNING
        assert node.credentials == defaults.credentials
        assert node.hardware is not None and node.hardware.name == "512MB"
        assert node.location is not None and node.location.id == "1"
        options = client.droplets.created[0][4]
        assert options is not None and options.ssh_key_ids == (defaults.key.id,)

    @pytest.mark.asyncio
    async def test_keeps_provider_options(
        self, service: DigitalOceanComputeService, client: FakeClient
    ):
        template = make_template(DigitalOceanTemplateOptions(ssh_key_ids=(5,), backups_enabled=True))

        await service.create_node("web", template)

        options = client.droplets.created[0][4]
        assert options is not None
        assert options.ssh_key_ids[0] == 5
        assert len(options.ssh_key_ids) == 2
        assert options.backups_enabled is True

    @pytest.mark.asyncio
    async def test_template_credentials_take_precedence(
        self, service: DigitalOceanComputeService, client: FakeClient
    ):
        login = LoginCredentials(user="deploy", password="hunter2")

        node = await service.create_node("web", make_template(TemplateOptions(login_credentials=login)))

        assert node.credentials == login
        assert client.keys.created == []


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_nodes(self, service: DigitalOceanComputeService, client: FakeClient):
        client.droplets.droplets[100823] = make_droplet()

        nodes = await service.list_nodes()

        assert [n.id for n in nodes] == ["100823"]
        assert nodes[0].operating_system is not None
        assert nodes[0].location is not None and nodes[0].location.slug == "nyc1"

    @pytest.mark.asyncio
    async def test_get_node(self, service: DigitalOceanComputeService, client: FakeClient):
        client.droplets.droplets[100823] = make_droplet(status="off")

        node = await service.get_node("100823")

        assert node is not None and node.status is NodeStatus.SUSPENDED
        assert await service.get_node("1") is None

    @pytest.mark.asyncio
    async def test_list_nodes_by_ids(self, service: DigitalOceanComputeService, client: FakeClient):
        client.droplets.droplets[1] = make_droplet(id=1)
        client.droplets.droplets[2] = make_droplet(id=2)

        nodes = await service.list_nodes_by_ids(["2"])

        assert [n.id for n in nodes] == ["2"]

    @pytest.mark.asyncio
    async def test_catalog(self, service: DigitalOceanComputeService):
        images = await service.list_images()
        hardware = await service.list_hardware_profiles()
        locations = await service.list_locations()

        assert [i.id for i in images] == ["1601", "1602", "1"]
        assert [h.name for h in hardware] == ["512MB", "2GB"]
        assert [loc.slug for loc in locations] == ["nyc1", "ams1"]
        image = await service.get_image("1")
        assert image is not None and image.name == "Ubuntu 12.10 x64"

    @pytest.mark.asyncio
    async def test_lifecycle_delegates(self, service: DigitalOceanComputeService, client: FakeClient):
        await service.suspend_node("42")
        await service.resume_node("42")
        await service.reboot_node("42")
        await service.destroy_node("42")

        assert [a for a, _ in client.droplets.actions] == ["power_off", "power_on", "reboot", "destroy"]

    @pytest.mark.asyncio
    async def test_populate_default_credentials(self, service: DigitalOceanComputeService):
        image = (await service.list_images())[0]
        credentials = await service.populate_default_credentials(image)
        assert credentials.user == "root"


@pytest.mark.asyncio
async def test_context_manager_closes_client(service: DigitalOceanComputeService, client: FakeClient):
    async with service as compute:
        assert compute is service
    assert client.closed


def test_module_wires_singletons():
    injector = Injector([DigitalOceanModule(DigitalOcean(client_id="c", api_key="k"))])

    service = injector.get(DigitalOceanComputeService)

    assert service is injector.get(DigitalOceanComputeService)
    assert service.config.client_id == "c"
    assert isinstance(injector.get(DigitalOceanClient), DigitalOceanClient)
    assert injector.get(DefaultCredentialsProvisioner) is injector.get(DefaultCredentialsProvisioner)

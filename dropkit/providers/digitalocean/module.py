"""Dependency injection wiring for the DigitalOcean provider."""

from __future__ import annotations

from injector import Binder, Module, provider, singleton

from dropkit.compute.naming import GroupNamingConvention

from .adapter import DigitalOceanComputeServiceAdapter
from .client import DigitalOceanClient
from .config import DigitalOcean
from .credentials import DefaultCredentialsProvisioner
from .events import EventPoller
from .images import DigitalOceanImageExtension
from .service import DigitalOceanComputeService


class DigitalOceanModule(Module):
    """DI module that provides the DigitalOcean compute stack.

    Usage:
        >>> from injector import Injector
        >>> from dropkit.providers.digitalocean import DigitalOcean, DigitalOceanModule
        >>>
        >>> injector = Injector([DigitalOceanModule(DigitalOcean(client_id="...", api_key="..."))])
        >>> compute = injector.get(DigitalOceanComputeService)
    """

    def __init__(
        self,
        config: DigitalOcean | None = None,
        naming: GroupNamingConvention | None = None,
    ) -> None:
        self._config = config or DigitalOcean()
        self._naming = naming or GroupNamingConvention()

    def configure(self, binder: Binder) -> None:
        binder.bind(DigitalOcean, to=self._config)
        binder.bind(GroupNamingConvention, to=self._naming)

    @singleton
    @provider
    def provide_client(self, config: DigitalOcean) -> DigitalOceanClient:
        return DigitalOceanClient(config)

    @singleton
    @provider
    def provide_poller(self, client: DigitalOceanClient, config: DigitalOcean) -> EventPoller:
        return EventPoller(client.events, config.timeouts, config.polling)

    @singleton
    @provider
    def provide_adapter(
        self, client: DigitalOceanClient, poller: EventPoller
    ) -> DigitalOceanComputeServiceAdapter:
        return DigitalOceanComputeServiceAdapter(client, poller)

    @singleton
    @provider
    def provide_image_extension(
        self, client: DigitalOceanClient, poller: EventPoller
    ) -> DigitalOceanImageExtension:
        return DigitalOceanImageExtension(client, poller)

    @singleton
    @provider
    def provide_credentials(
        self,
        client: DigitalOceanClient,
        config: DigitalOcean,
        naming: GroupNamingConvention,
    ) -> DefaultCredentialsProvisioner:
        return DefaultCredentialsProvisioner(client, config, naming)

    @singleton
    @provider
    def provide_compute_service(
        self,
        config: DigitalOcean,
        naming: GroupNamingConvention,
        client: DigitalOceanClient,
        adapter: DigitalOceanComputeServiceAdapter,
        images: DigitalOceanImageExtension,
        credentials: DefaultCredentialsProvisioner,
    ) -> DigitalOceanComputeService:
        return DigitalOceanComputeService(
            config,
            naming=naming,
            client=client,
            adapter=adapter,
            images=images,
            credentials=credentials,
        )


__all__ = ["DigitalOceanModule"]

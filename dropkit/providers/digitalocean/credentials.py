"""Default login credentials for images.

DigitalOcean images have no default password we can use, so the first
time credentials are needed a key pair is generated locally and its public
half registered with the account. Droplets created with that key accept
``root`` logins with the private half.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from loguru import logger

from dropkit.compute.model import Image, LoginCredentials
from dropkit.compute.naming import GroupNamingConvention
from dropkit.core.exceptions import ConfigurationError

from .client import DigitalOceanClient
from .config import DigitalOcean
from .model import SshKey
from .ssh import KeyPair, generate_rsa_key_pair

log = logger.bind(provider="digitalocean", component="credentials")

MAX_NAME_ATTEMPTS = 100


@dataclass(frozen=True, slots=True)
class DefaultImageCredentials:
    """The registered key and the login credentials that go with it."""

    key: SshKey
    credentials: LoginCredentials


def pick_unused_name(
    naming: GroupNamingConvention,
    group: str,
    taken: set[str],
    attempts: int = MAX_NAME_ATTEMPTS,
) -> str:
    """Sample ``unique_name_for_group`` until a name outside ``taken`` turns up."""
    for _ in range(attempts):
        candidate = naming.unique_name_for_group(group)
        if candidate not in taken:
            return candidate
    raise ConfigurationError("Could not generate a name for the credentials key pair")


class DefaultCredentialsProvisioner:
    """Creates the default credentials once per instance and caches them.

    Concurrent first callers share a single initialization.
    """

    def __init__(
        self,
        client: DigitalOceanClient,
        config: DigitalOcean,
        naming: GroupNamingConvention | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._naming = naming or GroupNamingConvention()
        self._lock = asyncio.Lock()
        self._value: DefaultImageCredentials | None = None

    async def _create(self) -> DefaultImageCredentials:
        key_pair: KeyPair = await asyncio.to_thread(generate_rsa_key_pair, self._config.key_bits)
        existing = await self._client.keys.list()
        name = pick_unused_name(
            self._naming,
            self._config.credentials_group,
            {k.name for k in existing},
        )

        key = await self._client.keys.create(name, key_pair.public_openssh)
        log.info("Registered default credentials key {key_name} (id={id})", key_name=name, id=key.id)
        return DefaultImageCredentials(
            key=key,
            credentials=LoginCredentials(
                user=self._config.login_user,
                private_key=key_pair.private_pem,
            ),
        )

    async def get(self) -> DefaultImageCredentials:
        if self._value is not None:
            return self._value
        async with self._lock:
            if self._value is None:
                self._value = await self._create()
            return self._value

    async def populate_default_credentials(self, image: Image | None = None) -> LoginCredentials:
        """Login credentials for nodes created from ``image``.

        Every image shares the same key, so ``image`` does not change the result.
        """
        return (await self.get()).credentials


__all__ = [
    "MAX_NAME_ATTEMPTS",
    "DefaultCredentialsProvisioner",
    "DefaultImageCredentials",
    "pick_unused_name",
]

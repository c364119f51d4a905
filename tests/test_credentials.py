from __future__ import annotations

import asyncio
import itertools

import pytest
from conftest import FakeClient
from cryptography.hazmat.primitives import serialization

from dropkit.compute.naming import GroupNamingConvention
from dropkit.core.exceptions import ConfigurationError
from dropkit.providers.digitalocean.config import DigitalOcean
from dropkit.providers.digitalocean.credentials import (
    MAX_NAME_ATTEMPTS,
    DefaultCredentialsProvisioner,
    pick_unused_name,
)
from dropkit.providers.digitalocean.model import SshKey
from dropkit.providers.digitalocean.ssh import decode_public_key, same_public_key

pytestmark = [pytest.mark.unit]


def sequence_naming(*suffixes: str) -> GroupNamingConvention:
    it = itertools.cycle(suffixes)
    return GroupNamingConvention(suffix=lambda: next(it))


class TestPickUnusedName:
    def test_resamples_until_free(self):
        naming = sequence_naming("aaa", "bbb", "ccc")
        taken = {"credentials-aaa", "credentials-bbb"}
        assert pick_unused_name(naming, "credentials", taken) == "credentials-ccc"

    def test_gives_up_after_max_attempts(self):
        calls = 0

        def suffix() -> str:
            nonlocal calls
            calls += 1
            return "aaa"

        naming = GroupNamingConvention(suffix=suffix)
        with pytest.raises(ConfigurationError, match="Could not generate a name"):
            pick_unused_name(naming, "credentials", {"credentials-aaa"})
        assert calls == MAX_NAME_ATTEMPTS


class TestProvisioner:
    @pytest.mark.asyncio
    async def test_registers_key_and_builds_credentials(
        self, client: FakeClient, config: DigitalOcean
    ):
        client.keys.keys.append(SshKey(id=1, name="credentials-aaa"))
        provisioner = DefaultCredentialsProvisioner(
            client, config, sequence_naming("aaa", "bbb")  # type: ignore[arg-type]
        )

        result = await provisioner.get()

        assert result.key.name == "credentials-bbb"
        assert result.credentials.user == "root"
        assert result.credentials.private_key is not None
        name, public_line = client.keys.created[0]
        assert name == "credentials-bbb"
        private_key = serialization.load_pem_private_key(
            result.credentials.private_key.encode(), password=None
        )
        assert same_public_key(private_key.public_key(), decode_public_key(public_line))  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_memoized(self, client: FakeClient, config: DigitalOcean):
        provisioner = DefaultCredentialsProvisioner(client, config)  # type: ignore[arg-type]

        first = await provisioner.get()
        second = await provisioner.get()

        assert first is second
        assert len(client.keys.created) == 1
        assert client.keys.list_calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_initialize_once(
        self, client: FakeClient, config: DigitalOcean
    ):
        provisioner = DefaultCredentialsProvisioner(client, config)  # type: ignore[arg-type]

        results = await asyncio.gather(*(provisioner.get() for _ in range(5)))

        assert all(r is results[0] for r in results)
        assert len(client.keys.created) == 1

    @pytest.mark.asyncio
    async def test_exhausted_names(self, client: FakeClient, config: DigitalOcean):
        client.keys.keys.append(SshKey(id=1, name="credentials-aaa"))
        provisioner = DefaultCredentialsProvisioner(
            client, config, sequence_naming("aaa")  # type: ignore[arg-type]
        )

        with pytest.raises(ConfigurationError):
            await provisioner.get()
        assert client.keys.created == []

    @pytest.mark.asyncio
    async def test_populate_uses_configured_user(self, client: FakeClient):
        config = DigitalOcean(client_id="c", api_key="k", login_user="admin", key_bits=1024)
        provisioner = DefaultCredentialsProvisioner(client, config)  # type: ignore[arg-type]

        credentials = await provisioner.populate_default_credentials()

        assert credentials.user == "admin"
        assert "***" in repr(credentials)

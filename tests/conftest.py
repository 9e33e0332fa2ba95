# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for vault_bootstrap tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from vault_bootstrap.enums import EnumLifecycleMode
from vault_bootstrap.handlers import VaultLifecycleHandler
from vault_bootstrap.models import ModelLifecycleConfig

# Seal status payload values (dicts as returned by the hvac JSON adapter)
SealStatusFactory = Callable[..., dict[str, object]]

TEST_UNSEAL_KEY = "d34db33fcafe0123456789abcdef0123456789abcdef0123456789abcdef0001"
TEST_ROOT_TOKEN = "hvs.rootTOKENabcdef123456"
TEST_OPERATOR_TOKEN = "hvs.operatorTOKEN98765"


def _seal_status(
    initialized: bool = True,
    sealed: bool = False,
    t: int = 1,
    n: int = 1,
    progress: int = 0,
    **extra: object,
) -> dict[str, object]:
    payload: dict[str, object] = {
        "type": "shamir",
        "initialized": initialized,
        "sealed": sealed,
        "t": t,
        "n": n,
        "progress": progress,
        "nonce": "",
        "version": "1.15.4",
        "build_date": "2023-12-04T17:45:28Z",
        "migration": False,
        "recovery_seal": False,
        "storage_type": "raft",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def seal_status() -> SealStatusFactory:
    """Factory for /v1/sys/seal-status response bodies."""
    return _seal_status


@pytest.fixture
def init_response() -> dict[str, object]:
    """A /v1/sys/init response body for a single-share cluster."""
    return {
        "keys": [TEST_UNSEAL_KEY],
        "keys_base64": ["0026vM/K/gEjRWeJq83vASNFZ4mrze8BI0VniavN7wAB"],
        "root_token": TEST_ROOT_TOKEN,
    }


@pytest.fixture
def mock_hvac_client(seal_status: SealStatusFactory) -> MagicMock:
    """Provide a mocked hvac.Client reporting an unsealed cluster."""
    client = MagicMock()
    client.sys = MagicMock()
    client.sys.read_seal_status.return_value = seal_status()
    client.sys.read_health_status.return_value = None
    client.sys.read_leader_status.return_value = {
        "ha_enabled": True,
        "is_self": True,
        "leader_address": "http://127.0.0.1:8200",
    }
    return client


@pytest.fixture
def lifecycle_config() -> ModelLifecycleConfig:
    """Restore configuration pointing at a local Vault."""
    return ModelLifecycleConfig(
        vault_api_host="vault.test",
        vault_api_port=8200,
        mode=EnumLifecycleMode.RESTORE,
        snapshot_url="file:///var/backups/vault.snap",
        unseal_key=SecretStr(TEST_UNSEAL_KEY),
        poll_interval_seconds=0.5,
    )


@pytest.fixture
def handler(
    lifecycle_config: ModelLifecycleConfig, mock_hvac_client: MagicMock
) -> VaultLifecycleHandler:
    """VaultLifecycleHandler wired to the mocked hvac client."""
    return VaultLifecycleHandler(lifecycle_config, client=mock_hvac_client)


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault lifecycle services.

Exports:
    ServiceConnectivityProber: Block until the control API answers
    ServiceInitializer: Initialize and self-unseal an empty cluster
    ServiceSnapshotRestorer: Force-restore a snapshot stream
    ServiceSnapshotSaver: Download a snapshot to a local file
    ServiceUnsealer: Idempotent single-key unseal
"""

from vault_bootstrap.services.service_connectivity_prober import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    RetryCallback,
    ServiceConnectivityProber,
)
from vault_bootstrap.services.service_initializer import (
    InitCallback,
    ServiceInitializer,
)
from vault_bootstrap.services.service_snapshot_restorer import ServiceSnapshotRestorer
from vault_bootstrap.services.service_snapshot_saver import ServiceSnapshotSaver
from vault_bootstrap.services.service_unsealer import ServiceUnsealer

__all__: list[str] = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "InitCallback",
    "RetryCallback",
    "ServiceConnectivityProber",
    "ServiceInitializer",
    "ServiceSnapshotRestorer",
    "ServiceSnapshotSaver",
    "ServiceUnsealer",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Snapshot Restorer - stream a backup into the cluster with snapshot-force.

The caller has already established reachability and resolved the snapshot
reference to a stream. No retry; whether the cluster came back healthy is
checked by the caller with a subsequent seal-status read.
"""

from __future__ import annotations

import logging

from vault_bootstrap.handlers import VaultLifecycleHandler
from vault_bootstrap.models import ModelSnapshotStream
from vault_bootstrap.sources import SnapshotSourceRegistry

logger = logging.getLogger(__name__)


class ServiceSnapshotRestorer:
    """Force-restore raft snapshots from any registered source."""

    def __init__(
        self,
        handler: VaultLifecycleHandler,
        sources: SnapshotSourceRegistry | None = None,
    ) -> None:
        self._handler = handler
        self._sources = sources or SnapshotSourceRegistry.with_defaults()

    def restore(self, snapshot: ModelSnapshotStream) -> None:
        """POST an opened snapshot stream to snapshot-force.

        Raises:
            ControlPlaneError: If Vault rejects the snapshot (message verbatim).
            ConnectivityError: If Vault becomes unreachable.
        """
        self._handler.force_restore_snapshot(snapshot)
        logger.info(
            "Snapshot restore request completed",
            extra={
                "snapshot": snapshot.reference,
                "correlation_id": str(self._handler.correlation_id),
            },
        )

    def restore_from_url(self, url: str) -> None:
        """Resolve ``url`` through the source registry and restore it.

        The stream is closed once the request completes.

        Raises:
            SourceResolutionError: If the URL is unsupported or unreadable.
            ControlPlaneError: If Vault rejects the snapshot.
        """
        with self._sources.open(url) as snapshot:
            self.restore(snapshot)


__all__: list[str] = ["ServiceSnapshotRestorer"]

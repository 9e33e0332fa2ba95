# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Snapshot Saver - download a raft snapshot into a local file.

Produces the backups that the restore flow consumes. The snapshot is written
to a temporary file next to the destination and moved into place only after
the download completed, so a failed run never leaves a truncated snapshot
under the final name.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from vault_bootstrap.enums import EnumInfraTransportType
from vault_bootstrap.errors import (
    MissingInputError,
    ModelInfraErrorContext,
    SourceResolutionError,
)
from vault_bootstrap.handlers import VaultLifecycleHandler
from vault_bootstrap.sources import file_url_to_path

logger = logging.getLogger(__name__)


class ServiceSnapshotSaver:
    """Save raft snapshots to ``file://`` destinations."""

    def __init__(self, handler: VaultLifecycleHandler) -> None:
        self._handler = handler

    def prepare(self, destination_url: str) -> Path:
        """Check the token and destination before any network call.

        Returns:
            The local destination path.

        Raises:
            MissingInputError: If the handler carries no token.
            SourceResolutionError: If the destination is not a local path in an
                existing directory.
        """
        context = ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.FILESYSTEM,
            operation="save_snapshot",
            target_name=destination_url,
            correlation_id=self._handler.correlation_id,
        )
        if not self._handler.has_token:
            raise MissingInputError(
                "Saving a snapshot requires a Vault token",
                context=context,
                missing_input="vault_token",
            )

        path = file_url_to_path(destination_url)
        if not path.parent.is_dir():
            raise SourceResolutionError(
                f"Snapshot destination directory '{path.parent}' does not exist",
                context=context,
                path=str(path),
            )
        return path

    def save(self, destination_url: str) -> tuple[Path, int]:
        """Download a snapshot to ``destination_url``.

        Returns:
            (destination path, bytes written)

        Raises:
            MissingInputError: If the handler carries no token.
            SourceResolutionError: If the destination is not a writable local path.
            ControlPlaneError: If Vault refuses the snapshot request.
        """
        path = self.prepare(destination_url)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".partial", dir=path.parent
        )
        try:
            with os.fdopen(fd, "wb") as tmp:
                written = self._handler.take_snapshot(tmp)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info(
            "Snapshot saved",
            extra={
                "path": str(path),
                "size_bytes": written,
                "correlation_id": str(self._handler.correlation_id),
            },
        )
        return path, written


__all__: list[str] = ["ServiceSnapshotSaver"]

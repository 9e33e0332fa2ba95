# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Snapshot sources.

Exports:
    LocalFileSnapshotSource: ``file://`` snapshot source
    SnapshotSourceRegistry: Scheme to source registry
    file_url_to_path: ``file://`` URL to local Path conversion
"""

from vault_bootstrap.sources.registry_snapshot_source import SnapshotSourceRegistry
from vault_bootstrap.sources.source_local_file import (
    LocalFileSnapshotSource,
    file_url_to_path,
)

__all__: list[str] = [
    "LocalFileSnapshotSource",
    "SnapshotSourceRegistry",
    "file_url_to_path",
]

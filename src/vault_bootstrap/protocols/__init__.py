# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Bootstrap protocols.

Exports:
    ProtocolSnapshotSource: Resolve a snapshot URL to a byte stream
"""

from vault_bootstrap.protocols.protocol_snapshot_source import ProtocolSnapshotSource

__all__: list[str] = ["ProtocolSnapshotSource"]

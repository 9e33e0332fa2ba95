# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Bootstrap handlers.

Exports:
    VaultLifecycleHandler: hvac-backed Vault control-plane operations
"""

from vault_bootstrap.handlers.handler_vault import (
    SNAPSHOT_CHUNK_SIZE,
    VaultLifecycleHandler,
)

__all__: list[str] = ["SNAPSHOT_CHUNK_SIZE", "VaultLifecycleHandler"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Bootstrap - cold-start lifecycle automation for HashiCorp Vault.

Brings a freshly launched Vault server from "uninitialized" to "unsealed and
serving", optionally restoring it from a raft snapshot first.

Key Components:
    - VaultLifecycleHandler: hvac-backed control-plane operations
    - Lifecycle services: connectivity prober, initializer, snapshot
      restorer/saver, unsealer
    - LifecycleOrchestrator: bootstrap, restore and wait flows
    - ``vault-bootstrap`` CLI with environment variable binding
"""

__version__: str = "0.1.0"

__all__: list[str] = ["__version__"]

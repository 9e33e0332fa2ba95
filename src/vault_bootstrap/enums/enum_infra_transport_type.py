# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Transport Type Enumeration.

Defines the transport types the lifecycle tooling talks to.
Used for error context and transport identification.
"""

from enum import Enum


class EnumInfraTransportType(str, Enum):
    """Transport types used by vault_bootstrap components.

    Attributes:
        VAULT: HashiCorp Vault control-plane HTTP API
        FILESYSTEM: Local filesystem (snapshot sources and destinations)
        RUNTIME: Process-internal concerns (configuration, CLI input)
    """

    VAULT = "vault"
    FILESYSTEM = "filesystem"
    RUNTIME = "runtime"


__all__ = ["EnumInfraTransportType"]

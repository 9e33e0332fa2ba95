# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lifecycle mode enumeration (operator intent)."""

from enum import Enum


class EnumLifecycleMode(str, Enum):
    """Operator intent selecting the orchestrator flow.

    Attributes:
        BOOTSTRAP: Initialize an empty cluster and unseal it with the new key
        RESTORE: Force-restore a snapshot and unseal with an operator key
        WAIT: Only block until the control API is reachable
    """

    BOOTSTRAP = "bootstrap"
    RESTORE = "restore"
    WAIT = "wait"


__all__ = ["EnumLifecycleMode"]

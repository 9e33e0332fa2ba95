# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lifecycle Error Code Enumeration.

Classifies every fatal condition the lifecycle tooling can raise. The CLI maps
each code to a distinct process exit code (see ``EXIT_CODES`` in
``vault_bootstrap.errors.infra_errors``).
"""

from enum import Enum


class EnumLifecycleErrorCode(str, Enum):
    """Error classification for lifecycle failures.

    Attributes:
        OPERATION_FAILED: Unclassified failure
        INVALID_CONFIGURATION: Configuration values failed validation
        MISSING_INPUT: A required input (snapshot URL, key, token) is absent
        CONNECTIVITY: Connection-level failure talking to Vault
        TIMEOUT: The connectivity probe deadline was exceeded
        CANCELLED: The connectivity probe was cancelled
        ALREADY_INITIALIZED: Bootstrap attempted against an initialized cluster
        CONTROL_PLANE: Non-success response or malformed body from Vault
        SOURCE_RESOLUTION: Snapshot reference unsupported or unreadable
    """

    OPERATION_FAILED = "operation_failed"
    INVALID_CONFIGURATION = "invalid_configuration"
    MISSING_INPUT = "missing_input"
    CONNECTIVITY = "connectivity"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    ALREADY_INITIALIZED = "already_initialized"
    CONTROL_PLANE = "control_plane"
    SOURCE_RESOLUTION = "source_resolution"


__all__ = ["EnumLifecycleErrorCode"]

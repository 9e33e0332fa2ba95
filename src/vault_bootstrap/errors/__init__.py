# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Bootstrap Errors Module.

Exports:
    ModelInfraErrorContext: Configuration model for bundled error context
    EXIT_CODES: Error code to process exit code mapping
    RuntimeHostError: Base lifecycle error class
    ProtocolConfigurationError: Configuration validation errors
    MissingInputError: Required flow input absent
    ConnectivityError: Vault unreachable (transient for the prober only)
    ProbeTimeoutError: Connectivity probe deadline exceeded
    ProbeCancelledError: Connectivity probe cancelled
    AlreadyInitializedError: Bootstrap against an initialized cluster
    ControlPlaneError: Vault error response or malformed body
    SourceResolutionError: Snapshot reference unsupported or unreadable

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Unseal keys (hex or base64)
        - Root or operator tokens

    SAFE to include:
        - Vault base URL, host and port
        - Operation names (e.g., "initialize", "submit_unseal_key")
        - HTTP status codes and Vault's own error strings (after sanitizing)
        - Correlation IDs, attempt counts and timeout values
        - Snapshot URL schemes and local paths
"""

from vault_bootstrap.errors.error_snapshot_source import SourceResolutionError
from vault_bootstrap.errors.error_vault import (
    AlreadyInitializedError,
    ControlPlaneError,
)
from vault_bootstrap.errors.infra_errors import (
    EXIT_CODES,
    ConnectivityError,
    MissingInputError,
    ProbeCancelledError,
    ProbeTimeoutError,
    ProtocolConfigurationError,
    RuntimeHostError,
)
from vault_bootstrap.errors.model_infra_error_context import ModelInfraErrorContext

__all__: list[str] = [
    # Configuration model
    "ModelInfraErrorContext",
    "EXIT_CODES",
    # Error classes
    "RuntimeHostError",
    "ProtocolConfigurationError",
    "MissingInputError",
    "ConnectivityError",
    "ProbeTimeoutError",
    "ProbeCancelledError",
    "AlreadyInitializedError",
    "ControlPlaneError",
    "SourceResolutionError",
]

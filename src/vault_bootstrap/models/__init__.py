# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Bootstrap Models.

Exports:
    ModelInitRequest: /v1/sys/init request body
    ModelInitResult: Key material returned by /v1/sys/init
    ModelLifecycleConfig: Immutable run configuration
    ModelLifecycleReport: Outcome of an orchestrator flow
    ModelSealStatus: /v1/sys/seal-status response
    ModelSnapshotStream: Snapshot resolved to a byte stream
    ModelUnsealRequest: /v1/sys/unseal request body
"""

from vault_bootstrap.models.model_init_request import ModelInitRequest
from vault_bootstrap.models.model_init_result import ModelInitResult
from vault_bootstrap.models.model_lifecycle_config import ModelLifecycleConfig
from vault_bootstrap.models.model_lifecycle_report import ModelLifecycleReport
from vault_bootstrap.models.model_seal_status import ModelSealStatus
from vault_bootstrap.models.model_snapshot_stream import ModelSnapshotStream
from vault_bootstrap.models.model_unseal_request import ModelUnsealRequest

__all__: list[str] = [
    "ModelInitRequest",
    "ModelInitResult",
    "ModelLifecycleConfig",
    "ModelLifecycleReport",
    "ModelSealStatus",
    "ModelSnapshotStream",
    "ModelUnsealRequest",
]

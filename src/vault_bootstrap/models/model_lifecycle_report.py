# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lifecycle Report Model - outcome of one orchestrator flow."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from vault_bootstrap.enums import EnumLifecycleMode
from vault_bootstrap.models.model_init_result import ModelInitResult
from vault_bootstrap.models.model_seal_status import ModelSealStatus


class ModelLifecycleReport(BaseModel):
    """Summary of what a flow did against the server.

    Attributes:
        mode: The flow that ran
        correlation_id: Run correlation ID used in logs
        probe_attempts: Connectivity probes issued before the API answered
        initialized: Whether this run initialized the cluster
        init_result: Key material from initialization, when one happened
        snapshot_restored: Whether a snapshot was force-restored
        unseal_submitted: Whether an unseal request was sent
        final_status: Seal status read at the end of the flow (None for wait)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    mode: EnumLifecycleMode
    correlation_id: UUID
    probe_attempts: int = Field(default=0, ge=0)
    initialized: bool = False
    init_result: Optional[ModelInitResult] = None
    snapshot_restored: bool = False
    unseal_submitted: bool = False
    final_status: Optional[ModelSealStatus] = None

    def format_summary(self) -> str:
        """Human-readable one-block summary (no key material)."""
        lines = [
            f"Mode: {self.mode.value}",
            f"Probe attempts: {self.probe_attempts}",
            f"Initialized by this run: {'yes' if self.initialized else 'no'}",
            f"Snapshot restored: {'yes' if self.snapshot_restored else 'no'}",
            f"Unseal submitted: {'yes' if self.unseal_submitted else 'no'}",
        ]
        if self.final_status is not None:
            lines.append(
                f"Final state: initialized={self.final_status.initialized} "
                f"sealed={self.final_status.sealed}"
            )
        return "\n".join(lines)


__all__: list[str] = ["ModelLifecycleReport"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Seal Status Model.

Snapshot of the server state returned by ``GET /v1/sys/seal-status`` and by
``/v1/sys/unseal``. Fetched fresh on every query and never cached.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ModelSealStatus(BaseModel):
    """Seal and initialization state of a Vault server.

    Attributes:
        initialized: Whether the cluster has been initialized
        sealed: Whether the barrier is sealed
        t: Number of key shares required to unseal (threshold)
        n: Total number of key shares
        progress: Key shares submitted toward the threshold so far
        type: Seal type (e.g. "shamir")
        nonce: Nonce of the current unseal attempt
        version: Vault server version
        build_date: Vault build date
        migration: Whether a seal migration is in progress
        recovery_seal: Whether the cluster uses a recovery seal
        storage_type: Storage backend name (e.g. "raft")

    Example:
        >>> status = ModelSealStatus.model_validate(
        ...     {"initialized": True, "sealed": False, "t": 1, "n": 1, "progress": 0}
        ... )
        >>> status.is_unsealed
        True
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    initialized: bool = Field(description="Whether the cluster has been initialized")
    sealed: bool = Field(description="Whether the barrier is sealed")
    t: int = Field(ge=0, description="Unseal threshold")
    n: int = Field(ge=0, description="Total key shares")
    progress: int = Field(ge=0, description="Shares submitted toward the threshold")
    type: str = Field(default="", description="Seal type")
    nonce: str = Field(default="", description="Nonce of the current unseal attempt")
    version: str = Field(default="", description="Vault server version")
    build_date: str = Field(default="", description="Vault build date")
    migration: bool = Field(default=False, description="Seal migration in progress")
    recovery_seal: bool = Field(default=False, description="Recovery seal in use")
    storage_type: str = Field(default="", description="Storage backend name")

    @model_validator(mode="after")
    def validate_share_counts(self) -> ModelSealStatus:
        """Enforce ``progress <= t <= n``.

        Raises:
            ValueError: If the share counters are inconsistent.
        """
        if not self.progress <= self.t <= self.n:
            raise ValueError(
                f"Inconsistent share counters: progress={self.progress}, "
                f"t={self.t}, n={self.n}"
            )
        return self

    @property
    def is_unsealed(self) -> bool:
        """True when the cluster is initialized and unsealed."""
        return self.initialized and not self.sealed


__all__: list[str] = ["ModelSealStatus"]

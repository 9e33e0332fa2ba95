# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unseal Request Model for ``/v1/sys/unseal``."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ModelUnsealRequest(BaseModel):
    """One key share submitted toward the unseal threshold.

    Attributes:
        key: The unseal key share (SecretStr, never logged)
        reset: Discard the unseal progress made so far (unset by default)
        migrate: Submit the share in seal-migration mode (unset by default)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    key: SecretStr = Field(description="Unseal key share")
    reset: Optional[bool] = Field(default=None, description="Reset unseal progress")
    migrate: Optional[bool] = Field(default=None, description="Seal migration mode")


__all__: list[str] = ["ModelUnsealRequest"]

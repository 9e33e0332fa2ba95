# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Init Request Model for ``/v1/sys/init``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ModelInitRequest(BaseModel):
    """Desired cluster parameters for initialization.

    The lifecycle tooling always bootstraps a single-operator cluster, so both
    values default to 1.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    secret_shares: int = Field(default=1, ge=1, description="Total key shares")
    secret_threshold: int = Field(
        default=1, ge=1, description="Shares required to unseal"
    )

    @model_validator(mode="after")
    def validate_threshold(self) -> ModelInitRequest:
        if self.secret_threshold > self.secret_shares:
            raise ValueError(
                f"secret_threshold ({self.secret_threshold}) cannot exceed "
                f"secret_shares ({self.secret_shares})"
            )
        return self


__all__: list[str] = ["ModelInitRequest"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Error Context Configuration Model.

This module defines the configuration model for infrastructure error context,
encapsulating common structured fields to reduce __init__ parameter count
while keeping them strongly typed.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from vault_bootstrap.enums import EnumInfraTransportType


class ModelInfraErrorContext(BaseModel):
    """Configuration model for infrastructure error context.

    Attributes:
        transport_type: Type of infrastructure transport (VAULT, FILESYSTEM, RUNTIME)
        operation: Operation being performed (read_seal_status, initialize, ...)
        target_name: Target resource or endpoint name
        correlation_id: Run correlation ID for log tracing

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="read_seal_status",
        ...     target_name="http://localhost:8200",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise ControlPlaneError("Failed to read seal status", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    transport_type: Optional[EnumInfraTransportType] = Field(
        default=None,
        description="Type of infrastructure transport (VAULT, FILESYSTEM, RUNTIME)",
    )
    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed (read_seal_status, initialize, etc.)",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target resource or endpoint name",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Run correlation ID for log tracing",
    )


__all__ = ["ModelInfraErrorContext"]

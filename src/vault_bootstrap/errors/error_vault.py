# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault-Specific Error Classes.

This module defines the errors raised for Vault control-plane responses:
AlreadyInitializedError for the bootstrap guard and ControlPlaneError for any
non-success response or malformed body.
"""

from typing import Optional

from vault_bootstrap.enums import EnumLifecycleErrorCode
from vault_bootstrap.errors.infra_errors import RuntimeHostError
from vault_bootstrap.errors.model_infra_error_context import ModelInfraErrorContext


class AlreadyInitializedError(RuntimeHostError):
    """Bootstrap attempted against a cluster that is already initialized.

    Guards against accidentally re-bootstrapping a live cluster. Raised before
    any init request is issued.
    """

    default_error_code = EnumLifecycleErrorCode.ALREADY_INITIALIZED

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(message=message, context=context, **extra_context)


class ControlPlaneError(RuntimeHostError):
    """Error response or malformed body from the Vault control plane.

    Used for seal-status, init, unseal, snapshot restore and snapshot save
    failures. The context should use ``transport_type=EnumInfraTransportType.VAULT``.

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="force_restore_snapshot",
        ...     target_name="http://localhost:8200",
        ... )
        >>> raise ControlPlaneError(
        ...     "Vault rejected snapshot: unsupported snapshot format",
        ...     context=context,
        ...     status_code=400,
        ... )
    """

    default_error_code = EnumLifecycleErrorCode.CONTROL_PLANE

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        status_code: Optional[int] = None,
        **extra_context: object,
    ) -> None:
        """Initialize ControlPlaneError.

        Args:
            message: Human-readable error message
            context: Bundled infrastructure context (should use VAULT transport_type)
            status_code: HTTP status code of the failed response, when known
            **extra_context: Additional context information
        """
        if status_code is not None:
            extra_context["status_code"] = status_code
        super().__init__(message=message, context=context, **extra_context)
        self.status_code: Optional[int] = status_code


__all__: list[str] = [
    "AlreadyInitializedError",
    "ControlPlaneError",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure-Specific Error Classes.

This module defines the base error class and the generic infrastructure
errors raised by vault_bootstrap. Vault-specific and snapshot-source errors
live in ``error_vault`` and ``error_snapshot_source``.

Error Hierarchy:
    RuntimeHostError (base lifecycle error)
    ├── ProtocolConfigurationError
    │   └── MissingInputError
    ├── ConnectivityError
    ├── ProbeTimeoutError
    ├── ProbeCancelledError
    ├── AlreadyInitializedError      (error_vault)
    ├── ControlPlaneError            (error_vault)
    └── SourceResolutionError        (error_snapshot_source)

All errors:
    - Use EnumLifecycleErrorCode for classification
    - Map to a process exit code via EXIT_CODES
    - Support proper error chaining with `raise ... from e`
    - Include structured context for debugging
    - Accept ModelInfraErrorContext for bundled context parameters
"""

from typing import Optional
from uuid import UUID

from vault_bootstrap.enums import EnumLifecycleErrorCode
from vault_bootstrap.errors.model_infra_error_context import ModelInfraErrorContext

# Exit code per error classification. 2 matches click usage errors.
EXIT_CODES: dict[EnumLifecycleErrorCode, int] = {
    EnumLifecycleErrorCode.OPERATION_FAILED: 1,
    EnumLifecycleErrorCode.INVALID_CONFIGURATION: 2,
    EnumLifecycleErrorCode.MISSING_INPUT: 2,
    EnumLifecycleErrorCode.ALREADY_INITIALIZED: 3,
    EnumLifecycleErrorCode.CONTROL_PLANE: 4,
    EnumLifecycleErrorCode.SOURCE_RESOLUTION: 5,
    EnumLifecycleErrorCode.CONNECTIVITY: 6,
    EnumLifecycleErrorCode.TIMEOUT: 7,
    EnumLifecycleErrorCode.CANCELLED: 130,
}


class RuntimeHostError(Exception):
    """Base error class for lifecycle errors.

    All vault_bootstrap errors inherit from this class. Provides common
    structured fields for infrastructure operations.

    Structured Fields (via ModelInfraErrorContext):
        transport_type: Type of transport (vault, filesystem, runtime)
        operation: Operation being performed
        correlation_id: Run correlation ID for tracking
        target_name: Target resource/endpoint name

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="initialize",
        ...     target_name="http://localhost:8200",
        ... )
        >>> raise RuntimeHostError("Operation failed", context=context)
    """

    default_error_code: EnumLifecycleErrorCode = EnumLifecycleErrorCode.OPERATION_FAILED

    def __init__(
        self,
        message: str,
        error_code: Optional[EnumLifecycleErrorCode] = None,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize RuntimeHostError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to the class default)
            context: Bundled infrastructure context (transport_type, operation, etc.)
            **extra_context: Additional context information
        """
        structured_context: dict[str, object] = dict(extra_context)

        correlation_id: Optional[UUID] = None
        if context is not None:
            if context.transport_type is not None:
                structured_context["transport_type"] = context.transport_type
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            correlation_id = context.correlation_id

        super().__init__(message)
        self.message: str = message
        self.error_code: EnumLifecycleErrorCode = error_code or self.default_error_code
        self.correlation_id: Optional[UUID] = correlation_id
        self.context: dict[str, object] = structured_context

    @property
    def exit_code(self) -> int:
        """Process exit code for this error."""
        return EXIT_CODES.get(self.error_code, 1)

    def __str__(self) -> str:
        return self.message


class ProtocolConfigurationError(RuntimeHostError):
    """Raised when configuration validation fails.

    Used for invalid option values, malformed URLs, or schema validation
    failures while binding the lifecycle configuration.
    """

    default_error_code = EnumLifecycleErrorCode.INVALID_CONFIGURATION

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(message=message, context=context, **extra_context)


class MissingInputError(ProtocolConfigurationError):
    """Raised when a flow is invoked without an input it requires.

    Restore requires a snapshot URL and an unseal key; restoring into an
    already-initialized cluster also requires a Vault token. Interactive
    prompting is not supported, so absence is fatal.

    Example:
        >>> raise MissingInputError(
        ...     "Restore requires a snapshot URL",
        ...     context=context,
        ...     missing_input="snapshot_url",
        ... )
    """

    default_error_code = EnumLifecycleErrorCode.MISSING_INPUT


class ConnectivityError(RuntimeHostError):
    """Raised when the Vault control API cannot be reached.

    Covers refused connections, DNS failures and request timeouts. The
    connectivity prober treats it as transient and retries; every other
    caller treats it as fatal.
    """

    default_error_code = EnumLifecycleErrorCode.CONNECTIVITY

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(message=message, context=context, **extra_context)


class ProbeTimeoutError(RuntimeHostError):
    """Raised when the connectivity probe exceeds its deadline.

    Example:
        >>> raise ProbeTimeoutError(
        ...     "Vault did not become reachable within 60.0s",
        ...     context=context,
        ...     timeout_seconds=60.0,
        ...     attempts=61,
        ... )
    """

    default_error_code = EnumLifecycleErrorCode.TIMEOUT

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(message=message, context=context, **extra_context)


class ProbeCancelledError(RuntimeHostError):
    """Raised when the connectivity probe is cancelled by its caller."""

    default_error_code = EnumLifecycleErrorCode.CANCELLED

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(message=message, context=context, **extra_context)


__all__ = [
    "EXIT_CODES",
    "RuntimeHostError",
    "ProtocolConfigurationError",
    "MissingInputError",
    "ConnectivityError",
    "ProbeTimeoutError",
    "ProbeCancelledError",
]

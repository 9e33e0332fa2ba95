# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Snapshot source resolution error."""

from typing import Optional

from vault_bootstrap.enums import EnumLifecycleErrorCode
from vault_bootstrap.errors.infra_errors import RuntimeHostError
from vault_bootstrap.errors.model_infra_error_context import ModelInfraErrorContext


class SourceResolutionError(RuntimeHostError):
    """Raised when a snapshot reference cannot be turned into a byte stream.

    Used for unsupported URL schemes and for local files that are missing,
    unreadable, or not regular files.

    Example:
        >>> raise SourceResolutionError(
        ...     "s3 scheme not supported",
        ...     context=context,
        ...     scheme="s3",
        ... )
    """

    default_error_code = EnumLifecycleErrorCode.SOURCE_RESOLUTION

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(message=message, context=context, **extra_context)


__all__: list[str] = ["SourceResolutionError"]

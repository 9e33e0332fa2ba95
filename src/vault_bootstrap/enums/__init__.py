# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Bootstrap Enumerations Module.

Exports:
    EnumInfraTransportType: Transport type enumeration for error context
    EnumLifecycleErrorCode: Classification of fatal lifecycle conditions
    EnumLifecycleMode: Operator intent (BOOTSTRAP, RESTORE, WAIT)
"""

from vault_bootstrap.enums.enum_infra_transport_type import EnumInfraTransportType
from vault_bootstrap.enums.enum_lifecycle_error_code import EnumLifecycleErrorCode
from vault_bootstrap.enums.enum_lifecycle_mode import EnumLifecycleMode

__all__: list[str] = [
    "EnumInfraTransportType",
    "EnumLifecycleErrorCode",
    "EnumLifecycleMode",
]

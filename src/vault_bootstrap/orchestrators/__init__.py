# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lifecycle orchestrators.

Exports:
    LifecycleOrchestrator: Bootstrap, restore and wait flows
"""

from vault_bootstrap.orchestrators.orchestrator_lifecycle import LifecycleOrchestrator

__all__: list[str] = ["LifecycleOrchestrator"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Command-line interface for vault_bootstrap."""

from vault_bootstrap.cli.commands import cli, main

__all__: list[str] = ["cli", "main"]

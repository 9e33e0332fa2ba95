# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Bootstrap utilities."""

from vault_bootstrap.utils.util_error_sanitization import (
    REDACTED,
    sanitize_error_message,
    sanitize_error_string,
)

__all__: list[str] = [
    "REDACTED",
    "sanitize_error_message",
    "sanitize_error_string",
]

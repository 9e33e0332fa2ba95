# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error message sanitization utilities.

Vault error strings are reported verbatim to the operator, but they pass
through here first so that unseal keys and tokens never reach logs or the
terminal. Known secret values are masked in place; strings that still look
like Vault tokens are masked by pattern.

Example:
    >>> from vault_bootstrap.utils import sanitize_error_string
    >>> sanitize_error_string("bad key d34db33f", secrets=["d34db33f"])
    'bad key [REDACTED]'
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic import SecretStr

REDACTED: str = "[REDACTED]"

# Vault service, batch and recovery tokens plus legacy "s." tokens.
TOKEN_PATTERN: re.Pattern[str] = re.compile(r"\b(?:hvs|hvb|hvr|s|b|r)\.[A-Za-z0-9_-]{8,}")


def _secret_values(secrets: Iterable[str | SecretStr | None]) -> list[str]:
    values: list[str] = []
    for secret in secrets:
        if secret is None:
            continue
        value = (
            secret.get_secret_value() if isinstance(secret, SecretStr) else secret
        )
        if value:
            values.append(value)
    # Longest first so a key containing another key is masked whole.
    return sorted(values, key=len, reverse=True)


def sanitize_error_string(
    error_str: str,
    secrets: Iterable[str | SecretStr | None] = (),
    max_length: int = 500,
) -> str:
    """Sanitize a raw error string for safe inclusion in logs and output.

    Sanitization rules:
        1. Replace every occurrence of a known secret value with [REDACTED]
        2. Replace anything shaped like a Vault token with [REDACTED]
        3. Truncate long messages to prevent excessive data exposure

    Args:
        error_str: The error string to sanitize
        secrets: Secret values (keys, tokens) that must not appear
        max_length: Maximum length of the sanitized message (default 500)

    Returns:
        Sanitized error message safe for storage and logging.

    Example:
        >>> sanitize_error_string("permission denied for hvs.CAESIabcdefghij")
        'permission denied for [REDACTED]'
    """
    if not error_str:
        return ""

    for value in _secret_values(secrets):
        error_str = error_str.replace(value, REDACTED)
    error_str = TOKEN_PATTERN.sub(REDACTED, error_str)

    if len(error_str) > max_length:
        return error_str[:max_length] + "... [truncated]"
    return error_str


def sanitize_error_message(
    exception: Exception,
    secrets: Iterable[str | SecretStr | None] = (),
    max_length: int = 500,
) -> str:
    """Sanitize an exception message, prefixed with the exception type.

    Returns:
        "{ExceptionType}: {sanitized_message}"

    Example:
        >>> try:
        ...     raise ValueError("key d34db33f rejected")
        ... except ValueError as e:
        ...     sanitize_error_message(e, secrets=["d34db33f"])
        'ValueError: key [REDACTED] rejected'
    """
    return (
        f"{type(exception).__name__}: "
        f"{sanitize_error_string(str(exception), secrets, max_length)}"
    )


__all__: list[str] = [
    "REDACTED",
    "TOKEN_PATTERN",
    "sanitize_error_message",
    "sanitize_error_string",
]

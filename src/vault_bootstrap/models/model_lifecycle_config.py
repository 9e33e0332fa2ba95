# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lifecycle Configuration Model.

Host, port, mode and secrets are bound once (from CLI options or their
environment variables) into this immutable value and passed explicitly to
every component.

Security Note:
    The unseal key and the Vault token use SecretStr to prevent accidental
    logging. They should come from environment variables in pipelines.
"""

from __future__ import annotations

import ipaddress
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from vault_bootstrap.enums import EnumLifecycleMode


class ModelLifecycleConfig(BaseModel):
    """Configuration for a single lifecycle run.

    Attributes:
        vault_api_host: IP address or hostname of the Vault server
        vault_api_port: Port the Vault API listens on
        vault_api_scheme: "http" or "https"
        verify_ssl: Whether to verify TLS certificates
        mode: Operator intent (bootstrap, restore, wait)
        snapshot_url: Snapshot reference for restore (e.g. "file:///backups/vault.snap")
        unseal_key: Operator-supplied unseal key (restore)
        vault_token: Operator-supplied token (restore into an initialized
            cluster, snapshot save)
        poll_interval_seconds: Connectivity probe interval
        wait_timeout_seconds: Overall probe deadline; None waits forever
        request_timeout_seconds: Per-request timeout for control-plane calls

    Example:
        >>> config = ModelLifecycleConfig(
        ...     vault_api_host="vault.internal",
        ...     mode=EnumLifecycleMode.RESTORE,
        ...     snapshot_url="file:///backups/vault.snap",
        ...     unseal_key=SecretStr("d34db33f"),
        ... )
        >>> config.base_url
        'http://vault.internal:8200'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    vault_api_host: str = Field(
        default="localhost",
        min_length=1,
        description="IP address or hostname of the Vault server",
    )
    vault_api_port: int = Field(
        default=8200,
        ge=1,
        le=65535,
        description="Port that the Vault server API listens to",
    )
    vault_api_scheme: Literal["http", "https"] = Field(
        default="http",
        description="URL scheme of the Vault API",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify TLS certificates",
    )
    mode: EnumLifecycleMode = Field(
        default=EnumLifecycleMode.RESTORE,
        description="Operator intent selecting the orchestrator flow",
    )
    snapshot_url: Optional[str] = Field(
        default=None,
        description="URL of the snapshot to restore",
    )
    unseal_key: Optional[SecretStr] = Field(
        default=None,
        description="Key for unsealing the Vault",
    )
    vault_token: Optional[SecretStr] = Field(
        default=None,
        description="Token authorizing snapshot operations",
    )
    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0.0,
        le=60.0,
        description="Seconds between connectivity probes",
    )
    wait_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Overall connectivity deadline in seconds (None = unbounded)",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=3600.0,
        description="Per-request timeout in seconds",
    )

    @field_validator("vault_api_host", mode="after")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Reject hosts carrying a scheme, port or path.

        IPv6 literals are accepted with or without brackets and stored
        bracketed, ready for ``base_url``.

        Raises:
            ValueError: If the host contains URL syntax.
        """
        literal = v[1:-1] if v.startswith("[") and v.endswith("]") else v
        if ":" in literal:
            try:
                return f"[{ipaddress.IPv6Address(literal).compressed}]"
            except ValueError:
                pass
        if any(c in v for c in "/:@ []"):
            raise ValueError(
                "vault_api_host must be a hostname, an IPv4 address or an IPv6 "
                f"address such as [::1], got '{v}'"
            )
        return v

    @field_validator("snapshot_url", mode="after")
    @classmethod
    def validate_snapshot_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def base_url(self) -> str:
        """Vault API base URL without the ``/v1`` prefix."""
        return f"{self.vault_api_scheme}://{self.vault_api_host}:{self.vault_api_port}"


__all__: list[str] = ["ModelLifecycleConfig"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Init Result Model.

Output of a successful ``/v1/sys/init``. The server never re-exposes this
material, so callers must capture it immediately.

Security Note:
    Keys and the root token are stored as SecretStr so they never appear in
    repr() output or log records. Use ``to_secret_dict()`` only when writing
    the material to its final destination.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ModelInitResult(BaseModel):
    """Key material produced by cluster initialization.

    Attributes:
        keys: Raw (hex) unseal key shares, in server order
        keys_base64: Base64 encodings of the same shares
        root_token: Initial root token

    Example:
        >>> result = ModelInitResult.model_validate(
        ...     {"keys": ["abcd"], "keys_base64": ["q80="], "root_token": "hvs.x"}
        ... )
        >>> result.first_key.get_secret_value()
        'abcd'
        >>> result.root_token
        SecretStr('**********')
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    keys: list[SecretStr] = Field(min_length=1, description="Raw unseal key shares")
    keys_base64: list[SecretStr] = Field(
        default_factory=list, description="Base64 encoded unseal key shares"
    )
    root_token: SecretStr = Field(description="Initial root token")

    @property
    def first_key(self) -> SecretStr:
        """The first (and for single-share clusters, only) unseal key."""
        return self.keys[0]

    def to_secret_dict(self) -> dict[str, object]:
        """Reveal the key material as a plain dict for persisting it once."""
        return {
            "keys": [key.get_secret_value() for key in self.keys],
            "keys_base64": [key.get_secret_value() for key in self.keys_base64],
            "root_token": self.root_token.get_secret_value(),
        }


__all__: list[str] = ["ModelInitResult"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unsealer - submit one unseal key share when the cluster is sealed.

Only single-share unseal is supported. With a threshold above one, a single
submission leaves the cluster partially unsealed; that is not retried.
"""

from __future__ import annotations

import logging

from pydantic import SecretStr

from vault_bootstrap.handlers import VaultLifecycleHandler
from vault_bootstrap.models import ModelSealStatus, ModelUnsealRequest

logger = logging.getLogger(__name__)


class ServiceUnsealer:
    """Idempotent single-key unseal."""

    def __init__(self, handler: VaultLifecycleHandler) -> None:
        self._handler = handler

    def unseal(self, key: SecretStr) -> tuple[ModelSealStatus, bool]:
        """Unseal the cluster with ``key`` if it is sealed.

        Returns:
            (seal status after the call, whether an unseal request was sent).
            An already-unsealed cluster returns its current status and False.

        Raises:
            ControlPlaneError: If Vault rejects the key.
            ConnectivityError: If Vault becomes unreachable.
        """
        status = self._handler.read_seal_status()
        if not status.sealed:
            logger.info(
                "Vault already unsealed; nothing to do",
                extra={"correlation_id": str(self._handler.correlation_id)},
            )
            return status, False

        status = self._handler.submit_unseal_key(ModelUnsealRequest(key=key))
        if status.sealed:
            logger.warning(
                "Vault still sealed after submitting key",
                extra={
                    "progress": status.progress,
                    "threshold": status.t,
                    "correlation_id": str(self._handler.correlation_id),
                },
            )
        return status, True


__all__: list[str] = ["ServiceUnsealer"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Initializer - create a new single-share cluster and unseal it.

This is the only operation that creates key material. It happens once per
cluster lifetime and the material cannot be recovered if lost, so the result
is handed to the caller through ``on_initialized`` before anything else can
fail, and returned again at the end.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from vault_bootstrap.enums import EnumInfraTransportType
from vault_bootstrap.errors import AlreadyInitializedError, ModelInfraErrorContext
from vault_bootstrap.handlers import VaultLifecycleHandler
from vault_bootstrap.models import (
    ModelInitRequest,
    ModelInitResult,
    ModelSealStatus,
    ModelUnsealRequest,
)

logger = logging.getLogger(__name__)

# Called with the key material as soon as /v1/sys/init returns.
InitCallback = Callable[[ModelInitResult], None]


class ServiceInitializer:
    """Initialize an empty cluster with shares = threshold = 1."""

    def __init__(
        self,
        handler: VaultLifecycleHandler,
        request: ModelInitRequest | None = None,
        on_initialized: InitCallback | None = None,
    ) -> None:
        self._handler = handler
        self._request = request or ModelInitRequest()
        self._on_initialized = on_initialized

    def initialize(self, status: ModelSealStatus | None = None) -> ModelInitResult:
        """Initialize the cluster and submit the first key to unseal it.

        Args:
            status: Seal status already read by the caller; read fresh if None

        Returns:
            The key material and root token. The handler adopts the root
            token for the rest of the run. ``on_initialized`` receives the
            same result before the unseal is attempted.

        Raises:
            AlreadyInitializedError: If the cluster is already initialized
                (no init request is sent).
            ControlPlaneError: If init or unseal is rejected.
            ConnectivityError: If Vault becomes unreachable.
        """
        if status is None:
            status = self._handler.read_seal_status()
        if status.initialized:
            raise AlreadyInitializedError(
                "Vault is already initialized; refusing to bootstrap a live cluster",
                context=ModelInfraErrorContext(
                    transport_type=EnumInfraTransportType.VAULT,
                    operation="initialize",
                    target_name=self._handler.base_url,
                    correlation_id=self._handler.correlation_id,
                ),
                sealed=status.sealed,
            )

        result = self._handler.initialize(self._request)
        if self._on_initialized is not None:
            self._on_initialized(result)
        self._handler.set_token(result.root_token)

        unseal_status = self._handler.submit_unseal_key(
            ModelUnsealRequest(key=result.first_key)
        )
        logger.info(
            "Initialized cluster unsealed with generated key",
            extra={
                "sealed": unseal_status.sealed,
                "correlation_id": str(self._handler.correlation_id),
            },
        )
        return result


__all__: list[str] = ["InitCallback", "ServiceInitializer"]

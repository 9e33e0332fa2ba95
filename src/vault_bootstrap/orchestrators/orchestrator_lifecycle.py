# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lifecycle Orchestrator - compose the lifecycle services into flows.

Flows (selected by EnumLifecycleMode):

    WAIT:
        Prober.

    BOOTSTRAP:
        Prober -> Initializer (init shares=1/threshold=1, self-unseal)
        -> final seal-status read.

    RESTORE:
        Prober -> seal-status read -> init only if uninitialized (the
        generated root token authorizes the restore), or unseal an
        initialized sealed cluster with the operator key -> seal-status
        re-read -> wait for the node to become active -> snapshot-force
        -> Unsealer with the operator key -> final seal-status read.

Snapshot save (save_snapshot, not a mode):
    Prober -> wait for the node to become active -> raft snapshot
    download into a local file.

Server state machine (observed, never stored locally):

    Unreachable -> Reachable -> {Uninitialized, Initialized} x {Sealed, Unsealed}

Every step's precondition depends on the previous step's observed state, so
the flows are strictly sequential. The first failure propagates as a typed
RuntimeHostError; nothing except the connectivity and active-node polls is
retried, and the tool is meant to be re-run from scratch after a failure.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from uuid import UUID, uuid4

from pydantic import SecretStr

from vault_bootstrap.enums import EnumInfraTransportType, EnumLifecycleMode
from vault_bootstrap.errors import MissingInputError, ModelInfraErrorContext
from vault_bootstrap.handlers import VaultLifecycleHandler
from vault_bootstrap.models import (
    ModelInitResult,
    ModelLifecycleConfig,
    ModelLifecycleReport,
)
from vault_bootstrap.services import (
    InitCallback,
    RetryCallback,
    ServiceConnectivityProber,
    ServiceInitializer,
    ServiceSnapshotRestorer,
    ServiceSnapshotSaver,
    ServiceUnsealer,
)
from vault_bootstrap.sources import SnapshotSourceRegistry

logger = logging.getLogger(__name__)


class LifecycleOrchestrator:
    """Run the bootstrap, restore or wait flow against one Vault server.

    Example:
        >>> config = ModelLifecycleConfig(mode=EnumLifecycleMode.BOOTSTRAP)
        >>> report = LifecycleOrchestrator(config).run()
        >>> report.final_status.sealed
        False
    """

    def __init__(
        self,
        config: ModelLifecycleConfig,
        handler: VaultLifecycleHandler | None = None,
        sources: SnapshotSourceRegistry | None = None,
        cancel_event: threading.Event | None = None,
        on_retry: RetryCallback | None = None,
        on_initialized: InitCallback | None = None,
        sleep: Callable[[float], None] = time.sleep,
        correlation_id: UUID | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Immutable run configuration
            handler: Vault handler; built from config if None
            sources: Snapshot source registry; built-in sources if None
            cancel_event: Cancels the connectivity wait when set
            on_retry: Progress callback for failed connectivity probes
            on_initialized: Receives init key material the moment it exists
            sleep: Sleep function for the prober (tests)
            correlation_id: Run correlation ID; generated if None
        """
        self._config = config
        self._correlation_id = correlation_id or (
            handler.correlation_id if handler is not None else uuid4()
        )
        self._handler = handler or VaultLifecycleHandler(
            config, correlation_id=self._correlation_id
        )
        self._sources = sources or SnapshotSourceRegistry.with_defaults()
        self._cancel_event = cancel_event
        self._on_retry = on_retry
        self._on_initialized = on_initialized
        self._prober = ServiceConnectivityProber(
            self._handler,
            poll_interval_seconds=config.poll_interval_seconds,
            sleep=sleep,
        )

    @property
    def handler(self) -> VaultLifecycleHandler:
        return self._handler

    def _error_context(self, operation: str) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.RUNTIME,
            operation=operation,
            target_name=self._config.base_url,
            correlation_id=self._correlation_id,
        )

    def run(self) -> ModelLifecycleReport:
        """Run the flow selected by ``config.mode``."""
        logger.info(
            "Starting lifecycle flow",
            extra={
                "mode": self._config.mode.value,
                "url": self._config.base_url,
                "correlation_id": str(self._correlation_id),
            },
        )
        if self._config.mode is EnumLifecycleMode.BOOTSTRAP:
            return self.bootstrap()
        if self._config.mode is EnumLifecycleMode.RESTORE:
            return self.restore()
        return self.wait_for_server()

    def _initializer(self) -> ServiceInitializer:
        return ServiceInitializer(self._handler, on_initialized=self._on_initialized)

    def _wait(self) -> int:
        return self._prober.wait_for_server(
            deadline_seconds=self._config.wait_timeout_seconds,
            cancel_event=self._cancel_event,
            on_retry=self._on_retry,
        )

    def _wait_active(self) -> None:
        self._prober.wait_until_active(
            deadline_seconds=self._config.wait_timeout_seconds,
            cancel_event=self._cancel_event,
        )

    def wait_for_server(self) -> ModelLifecycleReport:
        """Block until the control API answers."""
        attempts = self._wait()
        return ModelLifecycleReport(
            mode=EnumLifecycleMode.WAIT,
            correlation_id=self._correlation_id,
            probe_attempts=attempts,
        )

    def bootstrap(self) -> ModelLifecycleReport:
        """Initialize an empty cluster and unseal it with the generated key.

        Raises:
            AlreadyInitializedError: If the cluster is already initialized.
            ControlPlaneError: If init or unseal is rejected.
        """
        if self._config.snapshot_url is not None:
            logger.warning(
                "Ignoring snapshot URL in bootstrap mode",
                extra={"correlation_id": str(self._correlation_id)},
            )

        attempts = self._wait()
        init_result = self._initializer().initialize()
        final_status = self._handler.read_seal_status()

        logger.info(
            "Bootstrap complete",
            extra={
                "sealed": final_status.sealed,
                "correlation_id": str(self._correlation_id),
            },
        )
        return ModelLifecycleReport(
            mode=EnumLifecycleMode.BOOTSTRAP,
            correlation_id=self._correlation_id,
            probe_attempts=attempts,
            initialized=True,
            init_result=init_result,
            unseal_submitted=True,
            final_status=final_status,
        )

    def _require_restore_inputs(self) -> tuple[str, SecretStr]:
        snapshot_url = self._config.snapshot_url
        if snapshot_url is None:
            raise MissingInputError(
                "Restore requires a snapshot URL (--snapshot-url / SNAPSHOT_URL)",
                context=self._error_context("restore"),
                missing_input="snapshot_url",
            )
        if self._config.unseal_key is None:
            raise MissingInputError(
                "Restore requires an unseal key (--unseal-key / UNSEAL_KEY)",
                context=self._error_context("restore"),
                missing_input="unseal_key",
            )
        # Unsupported schemes fail before any network call.
        self._sources.resolve(snapshot_url)
        return snapshot_url, self._config.unseal_key

    def restore(self) -> ModelLifecycleReport:
        """Force-restore a snapshot and unseal with the operator key.

        Raises:
            MissingInputError: If the snapshot URL or unseal key is absent,
                or the cluster is initialized and no token was supplied.
            SourceResolutionError: If the snapshot cannot be opened.
            ControlPlaneError: If any control-plane call is rejected.
        """
        snapshot_url, unseal_key = self._require_restore_inputs()

        attempts = self._wait()

        status = self._handler.read_seal_status()
        init_result: ModelInitResult | None = None
        if not status.initialized:
            # Fresh server: the generated key is superseded by the snapshot's
            # keyring. The root token authorizes the restore and is the only
            # credential a re-run has if a later step fails.
            init_result = self._initializer().initialize(status)
        else:
            logger.info(
                "Vault already initialized; skipping init",
                extra={
                    "sealed": status.sealed,
                    "correlation_id": str(self._correlation_id),
                },
            )
            if not self._handler.has_token:
                raise MissingInputError(
                    "Restoring into an initialized cluster requires a Vault token "
                    "(--vault-token / VAULT_TOKEN)",
                    context=self._error_context("restore"),
                    missing_input="vault_token",
                )
            if status.sealed:
                # snapshot-force is only served by an unsealed cluster.
                ServiceUnsealer(self._handler).unseal(unseal_key)

        status = self._handler.read_seal_status()
        logger.info(
            "Seal status before restore",
            extra={
                "initialized": status.initialized,
                "sealed": status.sealed,
                "correlation_id": str(self._correlation_id),
            },
        )

        self._wait_active()
        ServiceSnapshotRestorer(self._handler, self._sources).restore_from_url(
            snapshot_url
        )
        _, unseal_submitted = ServiceUnsealer(self._handler).unseal(unseal_key)
        final_status = self._handler.read_seal_status()

        logger.info(
            "Restore complete",
            extra={
                "sealed": final_status.sealed,
                "correlation_id": str(self._correlation_id),
            },
        )
        return ModelLifecycleReport(
            mode=EnumLifecycleMode.RESTORE,
            correlation_id=self._correlation_id,
            probe_attempts=attempts,
            initialized=init_result is not None,
            init_result=init_result,
            snapshot_restored=True,
            unseal_submitted=unseal_submitted,
            final_status=final_status,
        )

    def save_snapshot(self, destination_url: str) -> tuple[Path, int]:
        """Wait for the server, then download a snapshot to ``destination_url``.

        Raises:
            MissingInputError: If no Vault token was supplied.
            SourceResolutionError: If the destination is not a writable local path.
            ControlPlaneError: If Vault refuses the snapshot request.
        """
        saver = ServiceSnapshotSaver(self._handler)
        saver.prepare(destination_url)
        self._wait()
        self._wait_active()
        return saver.save(destination_url)


__all__: list[str] = ["LifecycleOrchestrator"]

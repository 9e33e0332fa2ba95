# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Connectivity Prober - block until the Vault control API answers.

Issues ``HEAD /v1/sys/health`` until any HTTP response comes back. Only
connection-level failures (refused connection, DNS failure, timeout) count as
"not yet reachable"; they are retried after a fixed poll interval.

After an unseal, a raft node needs a moment to win its leader election before
it serves snapshot requests. ``wait_until_active`` polls ``/v1/sys/leader``
with the same interval, deadline and cancellation rules.

The loop is unbounded unless the caller passes a deadline or a cancellation
event. In pipelines the outer job timeout usually provides the bound.

Example:
    >>> prober = ServiceConnectivityProber(handler, poll_interval_seconds=1.0)
    >>> attempts = prober.wait_for_server(deadline_seconds=120.0)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from vault_bootstrap.enums import EnumInfraTransportType
from vault_bootstrap.errors import (
    ConnectivityError,
    ModelInfraErrorContext,
    ProbeCancelledError,
    ProbeTimeoutError,
)
from vault_bootstrap.handlers import VaultLifecycleHandler

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS: float = 1.0

# Called after each failed probe with (attempt_number, error).
RetryCallback = Callable[[int, ConnectivityError], None]


class ServiceConnectivityProber:
    """Poll the Vault health endpoint until it responds.

    Attributes:
        poll_interval_seconds: Fixed delay between probes
    """

    def __init__(
        self,
        handler: VaultLifecycleHandler,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the prober.

        Args:
            handler: Vault control-plane handler
            poll_interval_seconds: Delay between probes (must be positive)
            sleep: Sleep function used when no cancellation event is given
            clock: Monotonic clock used for the deadline
        """
        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        self._handler = handler
        self.poll_interval_seconds = poll_interval_seconds
        self._sleep = sleep
        self._clock = clock

    def _error_context(self, operation: str) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.VAULT,
            operation=operation,
            target_name=self._handler.base_url,
            correlation_id=self._handler.correlation_id,
        )

    def wait_for_server(
        self,
        deadline_seconds: float | None = None,
        cancel_event: threading.Event | None = None,
        on_retry: RetryCallback | None = None,
    ) -> int:
        """Block until the control API answers.

        Args:
            deadline_seconds: Give up after this many seconds (None = never)
            cancel_event: Set from another thread to stop waiting
            on_retry: Progress callback invoked after each failed probe

        Returns:
            Number of probes issued, including the successful one.

        Raises:
            ProbeTimeoutError: If the deadline passes before Vault answers.
            ProbeCancelledError: If ``cancel_event`` is set while waiting.
        """

        def reachable() -> bool:
            self._handler.probe()
            return True

        attempts = self._poll(
            "wait_for_server",
            reachable,
            f"Vault at {self._handler.base_url} did not become reachable",
            deadline_seconds,
            cancel_event,
            on_retry,
        )
        logger.info(
            "Vault API reachable",
            extra={
                "attempts": attempts,
                "url": self._handler.base_url,
                "correlation_id": str(self._handler.correlation_id),
            },
        )
        return attempts

    def wait_until_active(
        self,
        deadline_seconds: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> int:
        """Block until the node reports itself as the active node.

        Returns:
            Number of leader-status reads issued.

        Raises:
            ProbeTimeoutError: If the deadline passes first.
            ProbeCancelledError: If ``cancel_event`` is set while waiting.
            ControlPlaneError: If Vault answers the leader query with an error.
        """
        attempts = self._poll(
            "wait_until_active",
            self._handler.is_active,
            f"Vault at {self._handler.base_url} did not become active",
            deadline_seconds,
            cancel_event,
            None,
        )
        logger.info(
            "Vault node active",
            extra={
                "attempts": attempts,
                "correlation_id": str(self._handler.correlation_id),
            },
        )
        return attempts

    def _poll(
        self,
        operation: str,
        check: Callable[[], bool],
        timeout_message: str,
        deadline_seconds: float | None,
        cancel_event: threading.Event | None,
        on_retry: RetryCallback | None,
    ) -> int:
        started = self._clock()
        attempt = 0
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise ProbeCancelledError(
                    "Waiting for Vault was cancelled",
                    context=self._error_context(operation),
                    attempts=attempt,
                )
            attempt += 1
            try:
                if check():
                    return attempt
            except ConnectivityError as e:
                logger.debug(
                    "Vault not reachable yet",
                    extra={
                        "attempt": attempt,
                        "correlation_id": str(self._handler.correlation_id),
                    },
                )
                if on_retry is not None:
                    on_retry(attempt, e)
            self._pause(
                operation,
                timeout_message,
                started,
                attempt,
                deadline_seconds,
                cancel_event,
            )

    def _pause(
        self,
        operation: str,
        timeout_message: str,
        started: float,
        attempt: int,
        deadline_seconds: float | None,
        cancel_event: threading.Event | None,
    ) -> None:
        delay = self.poll_interval_seconds
        if deadline_seconds is not None:
            remaining = deadline_seconds - (self._clock() - started)
            if remaining <= 0:
                raise ProbeTimeoutError(
                    f"{timeout_message} within {deadline_seconds}s",
                    context=self._error_context(operation),
                    timeout_seconds=deadline_seconds,
                    attempts=attempt,
                )
            delay = min(delay, remaining)
        if cancel_event is None:
            self._sleep(delay)
        elif cancel_event.wait(delay):
            raise ProbeCancelledError(
                "Waiting for Vault was cancelled",
                context=self._error_context(operation),
                attempts=attempt,
            )


__all__: list[str] = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "RetryCallback",
    "ServiceConnectivityProber",
]

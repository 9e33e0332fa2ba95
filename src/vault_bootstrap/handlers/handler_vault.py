# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HashiCorp Vault Control-Plane Handler using the hvac client.

Wraps the ``/v1/sys/*`` endpoints the lifecycle tooling needs: health probe,
leader status, seal status, init, unseal, and raft snapshot save / forced
restore. Every call blocks the calling thread; none of them retry.

Security Features:
    - SecretStr protection for unseal keys and tokens
    - Sanitized error messages (known secrets and token-shaped strings masked)
    - SSL verification enabled by default

Error Translation:
    - requests ConnectionError / Timeout -> ConnectivityError
    - hvac VaultError (non-success HTTP status) -> ControlPlaneError
    - Unexpected or invalid response body -> ControlPlaneError

Wire Note:
    hvac issues PUT for ``sys/init`` and ``sys/unseal``; Vault treats PUT and
    POST identically on these endpoints.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import BinaryIO, TypeVar
from uuid import UUID, uuid4

import hvac
import hvac.exceptions
import requests
from pydantic import SecretStr, ValidationError

from vault_bootstrap.enums import EnumInfraTransportType
from vault_bootstrap.errors import (
    ConnectivityError,
    ControlPlaneError,
    ModelInfraErrorContext,
)
from vault_bootstrap.models import (
    ModelInitRequest,
    ModelInitResult,
    ModelLifecycleConfig,
    ModelSealStatus,
    ModelSnapshotStream,
    ModelUnsealRequest,
)
from vault_bootstrap.utils import sanitize_error_string

T = TypeVar("T")

logger = logging.getLogger(__name__)

SNAPSHOT_CHUNK_SIZE: int = 1024 * 1024

# hvac raises one exception class per HTTP status family.
_STATUS_CODES: tuple[tuple[type[hvac.exceptions.VaultError], int], ...] = (
    (hvac.exceptions.InvalidRequest, 400),
    (hvac.exceptions.Unauthorized, 401),
    (hvac.exceptions.Forbidden, 403),
    (hvac.exceptions.InvalidPath, 404),
    (hvac.exceptions.RateLimitExceeded, 429),
    (hvac.exceptions.InternalServerError, 500),
    (hvac.exceptions.VaultNotInitialized, 501),
    (hvac.exceptions.VaultDown, 503),
)


def _status_code_for(error: hvac.exceptions.VaultError) -> int | None:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return None


def _vault_message(error: hvac.exceptions.VaultError) -> str:
    """Vault's error text without hvac's ``, on <method> <url>`` suffix.

    hvac joins the response's ``errors`` list into ``args[0]``; bodies without
    one only carry the raw ``text``. Whitespace is collapsed so multi-line
    Vault errors print on one line.
    """
    message = error.args[0] if error.args else None
    if not message:
        message = getattr(error, "text", None)
    return " ".join(str(message).split()) if message else ""


class VaultLifecycleHandler:
    """Synchronous Vault control-plane client for lifecycle operations.

    One handler is created per run from the immutable ModelLifecycleConfig.
    The hvac client keeps a single requests session, so consecutive calls
    reuse the keep-alive connection.

    Token Handling:
        The client starts with the operator-supplied token (if any). After a
        successful ``initialize`` the caller may adopt the generated root
        token via ``set_token``. Token values are added to the sanitizer's
        secret list and never logged.
    """

    def __init__(
        self,
        config: ModelLifecycleConfig,
        correlation_id: UUID | None = None,
        client: hvac.Client | None = None,
    ) -> None:
        """Create the handler.

        Args:
            config: Run configuration (URL parts, TLS, timeouts, secrets)
            correlation_id: Run correlation ID for logs and errors
            client: Preconfigured hvac client (tests); built from config if None
        """
        self._config = config
        self._correlation_id = correlation_id or uuid4()
        self._secrets: list[SecretStr] = [
            s for s in (config.unseal_key, config.vault_token) if s is not None
        ]
        self._client = client if client is not None else self._create_hvac_client()
        self._has_token = config.vault_token is not None

    @property
    def base_url(self) -> str:
        """Vault API base URL."""
        return self._config.base_url

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    @property
    def has_token(self) -> bool:
        """Whether the client carries a token for authenticated endpoints."""
        return self._has_token

    def _create_hvac_client(self) -> hvac.Client:
        token = self._config.vault_token
        return hvac.Client(
            url=self._config.base_url,
            token=token.get_secret_value() if token is not None else None,
            verify=self._config.verify_ssl,
            timeout=self._config.request_timeout_seconds,
        )

    def _error_context(self, operation: str) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.VAULT,
            operation=operation,
            target_name=self._config.base_url,
            correlation_id=self._correlation_id,
        )

    def _sanitize(self, text: str) -> str:
        return sanitize_error_string(text, secrets=self._secrets)

    def set_token(self, token: SecretStr) -> None:
        """Authenticate subsequent requests with ``token``."""
        self._secrets.append(token)
        self._client.token = token.get_secret_value()
        self._has_token = True

    def _call(self, operation: str, func: Callable[[], T]) -> T:
        """Run one hvac call and translate its failures.

        Raises:
            ConnectivityError: On connection-level failures.
            ControlPlaneError: On non-success HTTP responses.
        """
        try:
            return func()
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise ConnectivityError(
                f"Failed to connect to Vault at {self._config.base_url}: "
                f"{type(e).__name__}",
                context=self._error_context(operation),
                host=self._config.vault_api_host,
                port=self._config.vault_api_port,
            ) from e
        except hvac.exceptions.VaultError as e:
            status_code = _status_code_for(e)
            raise ControlPlaneError(
                f"Vault {operation} failed: "
                f"{self._sanitize(_vault_message(e)) or type(e).__name__}",
                context=self._error_context(operation),
                status_code=status_code,
            ) from e

    def _parse(self, operation: str, model: type[T], body: object) -> T:
        """Validate a JSON response body into ``model``.

        Raises:
            ControlPlaneError: If the body is missing or does not match the model.
        """
        if not isinstance(body, dict):
            raise ControlPlaneError(
                f"Vault {operation} returned an unexpected response body "
                f"({type(body).__name__})",
                context=self._error_context(operation),
            )
        try:
            return model.model_validate(body)  # type: ignore[attr-defined,no-any-return]
        except ValidationError as e:
            raise ControlPlaneError(
                f"Vault {operation} returned a malformed body: "
                f"{e.error_count()} validation error(s)",
                context=self._error_context(operation),
            ) from e

    # -------------------------------------------------------------------------
    # Control-plane operations
    # -------------------------------------------------------------------------

    def probe(self) -> None:
        """Issue one liveness probe (``HEAD /v1/sys/health``).

        Any HTTP response, including error statuses such as 501 (not
        initialized) or 503 (sealed), means the API is reachable.

        Raises:
            ConnectivityError: If the server could not be reached.
        """
        try:
            self._call(
                "probe",
                lambda: self._client.sys.read_health_status(method="HEAD"),
            )
        except ControlPlaneError as e:
            logger.debug(
                "Health probe answered with an error status",
                extra={
                    "status_code": e.status_code,
                    "correlation_id": str(self._correlation_id),
                },
            )

    def read_seal_status(self) -> ModelSealStatus:
        """Fetch the current seal status (``GET /v1/sys/seal-status``).

        Raises:
            ConnectivityError: If the server could not be reached.
            ControlPlaneError: On error responses or malformed bodies.
        """
        body = self._call("read_seal_status", self._client.sys.read_seal_status)
        status = self._parse("read_seal_status", ModelSealStatus, body)
        logger.debug(
            "Read seal status",
            extra={
                "initialized": status.initialized,
                "sealed": status.sealed,
                "threshold": status.t,
                "shares": status.n,
                "progress": status.progress,
                "correlation_id": str(self._correlation_id),
            },
        )
        return status

    def is_active(self) -> bool:
        """Whether this node is the active node (``GET /v1/sys/leader``).

        Storage backends without HA have a single node that is always active.

        Raises:
            ConnectivityError: If the server could not be reached.
            ControlPlaneError: On error responses (e.g. 503 while sealed).
        """
        body = self._call("read_leader_status", self._client.sys.read_leader_status)
        if not isinstance(body, dict):
            raise ControlPlaneError(
                "Vault read_leader_status returned an unexpected response body "
                f"({type(body).__name__})",
                context=self._error_context("read_leader_status"),
            )
        active = not body.get("ha_enabled", False) or bool(body.get("is_self"))
        logger.debug(
            "Read leader status",
            extra={"active": active, "correlation_id": str(self._correlation_id)},
        )
        return active

    def initialize(self, request: ModelInitRequest) -> ModelInitResult:
        """Initialize the cluster (``/v1/sys/init``).

        Raises:
            ConnectivityError: If the server could not be reached.
            ControlPlaneError: On error responses or malformed bodies.
        """
        body = self._call(
            "initialize",
            lambda: self._client.sys.initialize(
                secret_shares=request.secret_shares,
                secret_threshold=request.secret_threshold,
            ),
        )
        result = self._parse("initialize", ModelInitResult, body)
        # Track the new material before anything can log an error mentioning it.
        self._secrets.extend(result.keys)
        self._secrets.extend(result.keys_base64)
        self._secrets.append(result.root_token)
        logger.info(
            "Vault initialized",
            extra={
                "secret_shares": request.secret_shares,
                "secret_threshold": request.secret_threshold,
                "key_count": len(result.keys),
                "correlation_id": str(self._correlation_id),
            },
        )
        return result

    def submit_unseal_key(self, request: ModelUnsealRequest) -> ModelSealStatus:
        """Submit one unseal key share (``/v1/sys/unseal``).

        Returns:
            The seal status reported by the server after the submission.

        Raises:
            ConnectivityError: If the server could not be reached.
            ControlPlaneError: On error responses (e.g. an invalid key).
        """
        self._secrets.append(request.key)
        body = self._call(
            "submit_unseal_key",
            lambda: self._client.sys.submit_unseal_key(
                key=request.key.get_secret_value(),
                reset=bool(request.reset),
                migrate=bool(request.migrate),
            ),
        )
        status = self._parse("submit_unseal_key", ModelSealStatus, body)
        logger.info(
            "Unseal key submitted",
            extra={
                "sealed": status.sealed,
                "progress": status.progress,
                "threshold": status.t,
                "correlation_id": str(self._correlation_id),
            },
        )
        return status

    def force_restore_snapshot(self, snapshot: ModelSnapshotStream) -> None:
        """Stream a snapshot to ``/v1/sys/storage/raft/snapshot-force``.

        The stream is passed to requests as the request body, so it is sent
        in chunks rather than read into memory. The restore outcome is not
        interpreted beyond "request completed".

        Raises:
            ConnectivityError: If the server could not be reached.
            ControlPlaneError: If Vault rejected the snapshot.
        """
        logger.info(
            "Submitting snapshot for forced restore",
            extra={
                "snapshot": snapshot.reference,
                "size_bytes": snapshot.size,
                "correlation_id": str(self._correlation_id),
            },
        )
        self._call(
            "force_restore_snapshot",
            lambda: self._client.sys.force_restore_raft_snapshot(snapshot.stream),
        )

    def take_snapshot(
        self, destination: BinaryIO, chunk_size: int = SNAPSHOT_CHUNK_SIZE
    ) -> int:
        """Stream a raft snapshot (``GET /v1/sys/storage/raft/snapshot``).

        Args:
            destination: Writable binary file object
            chunk_size: Bytes per write

        Returns:
            Number of bytes written.

        Raises:
            ConnectivityError: If the server could not be reached.
            ControlPlaneError: On error responses or an empty snapshot.
        """
        response = self._call("take_snapshot", self._client.sys.take_raft_snapshot)
        if not isinstance(response, requests.Response):
            raise ControlPlaneError(
                "Vault take_snapshot returned an unexpected response body "
                f"({type(response).__name__})",
                context=self._error_context("take_snapshot"),
            )
        written = 0
        try:
            for chunk in response.iter_content(chunk_size=chunk_size):
                if chunk:
                    destination.write(chunk)
                    written += len(chunk)
        except requests.exceptions.RequestException as e:
            raise ConnectivityError(
                f"Snapshot download from {self._config.base_url} was interrupted: "
                f"{type(e).__name__}",
                context=self._error_context("take_snapshot"),
                bytes_written=written,
            ) from e
        finally:
            response.close()
        if written == 0:
            raise ControlPlaneError(
                "Vault returned an empty snapshot",
                context=self._error_context("take_snapshot"),
            )
        logger.info(
            "Snapshot downloaded",
            extra={
                "size_bytes": written,
                "correlation_id": str(self._correlation_id),
            },
        )
        return written


__all__: list[str] = ["SNAPSHOT_CHUNK_SIZE", "VaultLifecycleHandler"]

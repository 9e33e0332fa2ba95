# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Local filesystem snapshot source (``file://`` URLs)."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from vault_bootstrap.enums import EnumInfraTransportType
from vault_bootstrap.errors import ModelInfraErrorContext, SourceResolutionError
from vault_bootstrap.models import ModelSnapshotStream

logger = logging.getLogger(__name__)

_LOCAL_HOSTS: frozenset[str] = frozenset({"", "localhost"})


def _error_context(operation: str, url: str) -> ModelInfraErrorContext:
    return ModelInfraErrorContext(
        transport_type=EnumInfraTransportType.FILESYSTEM,
        operation=operation,
        target_name=url,
    )


def file_url_to_path(url: str) -> Path:
    """Convert a ``file://`` URL into a local path.

    Accepts ``file:///abs/path`` and ``file://localhost/abs/path``.

    Raises:
        SourceResolutionError: If the URL is not a local ``file://`` URL.

    Example:
        >>> file_url_to_path("file:///var/backups/vault.snap")
        PosixPath('/var/backups/vault.snap')
    """
    parts = urlsplit(url)
    if parts.scheme.lower() != "file":
        raise SourceResolutionError(
            f"Expected a file:// URL, got '{url}'",
            context=_error_context("resolve_path", url),
            scheme=parts.scheme,
        )
    if parts.netloc.lower() not in _LOCAL_HOSTS:
        raise SourceResolutionError(
            f"Could not get a local path from file URL '{url}' "
            f"(host '{parts.netloc}' is not local)",
            context=_error_context("resolve_path", url),
        )
    if not parts.path:
        raise SourceResolutionError(
            f"File URL '{url}' has no path",
            context=_error_context("resolve_path", url),
        )
    return Path(url2pathname(parts.path))


class LocalFileSnapshotSource:
    """Open snapshots from the local filesystem.

    The file is opened in binary mode and handed to the restorer as-is, so it
    is streamed to Vault rather than read into memory. Its size comes from
    ``fstat``.
    """

    schemes: frozenset[str] = frozenset({"file"})

    @contextmanager
    def open(self, url: str) -> Iterator[ModelSnapshotStream]:
        """Open the snapshot file referenced by ``url``.

        Raises:
            SourceResolutionError: If the path is missing, not a regular file,
                or unreadable.
        """
        path = file_url_to_path(url)
        try:
            handle = path.open("rb")
        except OSError as e:
            raise SourceResolutionError(
                f"Could not open snapshot file '{path}': {e.strerror or type(e).__name__}",
                context=_error_context("open_snapshot", url),
                path=str(path),
            ) from e

        with handle:
            file_stat = os.fstat(handle.fileno())
            if not stat.S_ISREG(file_stat.st_mode):
                raise SourceResolutionError(
                    f"Snapshot path '{path}' is not a regular file",
                    context=_error_context("open_snapshot", url),
                    path=str(path),
                )
            logger.debug(
                "Opened local snapshot",
                extra={"path": str(path), "size_bytes": file_stat.st_size},
            )
            yield ModelSnapshotStream(stream=handle, size=file_stat.st_size, reference=url)


__all__: list[str] = ["LocalFileSnapshotSource", "file_url_to_path"]

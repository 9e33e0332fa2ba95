# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Snapshot Source Registry.

Maps URL schemes to ProtocolSnapshotSource implementations. Unknown schemes
fail fast with SourceResolutionError instead of degrading silently.

Usage:
    >>> registry = SnapshotSourceRegistry.with_defaults()
    >>> with registry.open("file:///var/backups/vault.snap") as snapshot:
    ...     restorer.restore(snapshot)
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from urllib.parse import urlsplit

from vault_bootstrap.enums import EnumInfraTransportType
from vault_bootstrap.errors import ModelInfraErrorContext, SourceResolutionError
from vault_bootstrap.models import ModelSnapshotStream
from vault_bootstrap.protocols import ProtocolSnapshotSource
from vault_bootstrap.sources.source_local_file import LocalFileSnapshotSource

logger = logging.getLogger(__name__)


class SnapshotSourceRegistry:
    """Scheme-indexed registry of snapshot sources."""

    def __init__(self) -> None:
        self._sources: dict[str, ProtocolSnapshotSource] = {}

    @classmethod
    def with_defaults(cls) -> SnapshotSourceRegistry:
        """Registry with the built-in ``file://`` source."""
        registry = cls()
        registry.register(LocalFileSnapshotSource())
        return registry

    def register(self, source: ProtocolSnapshotSource) -> None:
        """Register ``source`` for each of its schemes.

        Raises:
            ValueError: If a scheme is already registered.
        """
        for scheme in source.schemes:
            key = scheme.lower()
            if key in self._sources:
                raise ValueError(f"Snapshot source already registered for '{key}'")
            self._sources[key] = source

    @property
    def schemes(self) -> frozenset[str]:
        return frozenset(self._sources)

    def resolve(self, url: str) -> ProtocolSnapshotSource:
        """Return the source responsible for ``url``.

        Raises:
            SourceResolutionError: If the URL has no scheme or an unsupported one.
        """
        scheme = urlsplit(url).scheme.lower()
        context = ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.FILESYSTEM,
            operation="resolve_snapshot_source",
            target_name=url,
        )
        if not scheme:
            raise SourceResolutionError(
                f"Snapshot URL '{url}' has no scheme "
                f"(supported: {', '.join(sorted(self._sources))})",
                context=context,
            )
        source = self._sources.get(scheme)
        if source is None:
            raise SourceResolutionError(
                f"{scheme} scheme not supported "
                f"(supported: {', '.join(sorted(self._sources))})",
                context=context,
                scheme=scheme,
            )
        return source

    def open(self, url: str) -> AbstractContextManager[ModelSnapshotStream]:
        """Resolve and open ``url`` in one step."""
        source = self.resolve(url)
        logger.debug(
            "Resolved snapshot source",
            extra={"url": url, "source": type(source).__name__},
        )
        return source.open(url)


__all__: list[str] = ["SnapshotSourceRegistry"]

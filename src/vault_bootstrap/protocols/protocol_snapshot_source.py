# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol for Snapshot Sources.

A snapshot source resolves a snapshot reference (a URL) to a readable byte
stream. There is one implementation per URL scheme; the restorer only ever
sees the resulting ModelSnapshotStream, so new sources (object storage,
HTTP) plug in through SnapshotSourceRegistry without touching it.

Example:
    >>> class HttpSnapshotSource:
    ...     schemes = frozenset({"http", "https"})
    ...
    ...     @contextmanager
    ...     def open(self, url: str) -> Iterator[ModelSnapshotStream]:
    ...         with requests.get(url, stream=True) as response:
    ...             response.raise_for_status()
    ...             yield ModelSnapshotStream(response.raw, None, url)
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from vault_bootstrap.models import ModelSnapshotStream


@runtime_checkable
class ProtocolSnapshotSource(Protocol):
    """Resolve snapshot URLs of specific schemes to byte streams.

    Attributes:
        schemes: Lower-case URL schemes this source handles
    """

    schemes: frozenset[str]

    def open(self, url: str) -> AbstractContextManager[ModelSnapshotStream]:
        """Open the snapshot at ``url``.

        The returned context manager yields the stream and closes it on exit.

        Raises:
            SourceResolutionError: If the snapshot cannot be opened.
        """
        ...


__all__: list[str] = ["ProtocolSnapshotSource"]

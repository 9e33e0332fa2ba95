# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Opened snapshot byte stream handed to the snapshot restorer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass(frozen=True)
class ModelSnapshotStream:
    """A snapshot resolved to a readable byte stream.

    The stream is owned by the source that opened it; the source closes it
    when its context manager exits.

    Attributes:
        stream: Binary file-like object positioned at the start of the snapshot
        size: Size in bytes when known, None for unsized streams
        reference: The snapshot reference the stream was resolved from
    """

    stream: BinaryIO
    size: Optional[int]
    reference: str


__all__: list[str] = ["ModelSnapshotStream"]

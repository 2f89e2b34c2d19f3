"""In-memory snapshot storage adapter.

Keeps the last encoded snapshot buffer in memory. Used for ephemeral
deployments and tests. It runs the same codec as the file adapter, so
encoding failures surface identically, but nothing survives the process.
"""

from __future__ import annotations

from typing import Mapping

from tablestore.adapters.outbound.snapshot_codec import decode_snapshot, encode_snapshot
from tablestore.domain.entities import Table


class InMemorySnapshotStore:
    """In-memory implementation of SnapshotStorePort."""

    def __init__(self, data: bytes | None = None) -> None:
        """Initialize storage, optionally seeded with a snapshot buffer."""
        self._data = data
        self.saves = 0

    @property
    def data(self) -> bytes | None:
        """The last saved snapshot buffer."""
        return self._data

    def load(self) -> dict[str, Table] | None:
        if self._data is None:
            return None
        return decode_snapshot(self._data)

    def save(self, tables: Mapping[str, Table]) -> int:
        self._data = encode_snapshot(tables)
        self.saves += 1
        return len(self._data)

    def clear(self) -> None:
        """Forget the saved snapshot."""
        self._data = None
        self.saves = 0

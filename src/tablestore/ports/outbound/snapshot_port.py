"""Outbound port for snapshot persistence.

A snapshot is the full serialized state of the store. It is loaded
once at startup and rewritten in full after every mutation.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from tablestore.domain.entities import Table


@runtime_checkable
class SnapshotStorePort(Protocol):
    """Protocol for snapshot storage.

    This is the contract that outbound adapters implement
    for durable storage of the table registry.
    """

    def load(self) -> dict[str, Table] | None:
        """Load the last saved state.

        Returns:
            Table name -> Table, or None when there is no prior state.

        Raises:
            SnapshotCorruptError: If the snapshot is unreadable and the
                adapter is configured to fail.
        """
        ...

    def save(self, tables: Mapping[str, Table]) -> int:
        """Replace the saved state with ``tables``.

        Returns:
            Number of bytes written.

        Raises:
            SnapshotSerializationError: If the state cannot be encoded.
            SnapshotWriteError: If the encoded state cannot be stored.
        """
        ...

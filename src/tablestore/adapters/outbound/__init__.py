"""Outbound adapters - implementations for external dependencies.

Outbound adapters implement snapshot storage for persisting the
table registry.
"""

from tablestore.adapters.outbound.file_snapshot import CorruptPolicy, FileSnapshotStore
from tablestore.adapters.outbound.memory_snapshot import InMemorySnapshotStore
from tablestore.adapters.outbound.snapshot_codec import (
    FORMAT_VERSION,
    decode_snapshot,
    encode_snapshot,
)

__all__ = [
    "FileSnapshotStore",
    "InMemorySnapshotStore",
    "CorruptPolicy",
    "encode_snapshot",
    "decode_snapshot",
    "FORMAT_VERSION",
]

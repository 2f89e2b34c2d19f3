"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
record store depends on, such as persistent storage.
"""

from tablestore.ports.outbound.snapshot_port import SnapshotStorePort

__all__ = ["SnapshotStorePort"]

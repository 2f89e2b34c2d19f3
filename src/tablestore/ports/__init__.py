"""Ports layer - interfaces for adapters.

Ports define contracts that adapters implement:
- Inbound ports: interfaces for external callers (API, CLI)
- Outbound ports: interfaces for external dependencies (snapshot storage)
"""

from tablestore.ports.inbound import RecordStorePort
from tablestore.ports.outbound import SnapshotStorePort

__all__ = [
    "RecordStorePort",
    "SnapshotStorePort",
]

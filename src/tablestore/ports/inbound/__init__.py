"""Inbound ports - interfaces for external callers.

Inbound ports define the operations that can be performed
on the record store from the outside world.
"""

from tablestore.ports.inbound.record_store_port import RecordStorePort

__all__ = ["RecordStorePort"]

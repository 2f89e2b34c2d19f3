"""Application layer for the table store.

Exports:
    - RecordStore: The store engine (implements RecordStorePort)
"""

from tablestore.application.record_store import RecordStore

__all__ = ["RecordStore"]

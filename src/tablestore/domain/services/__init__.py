"""Domain services: schema validation and store locking."""

from tablestore.domain.services.row_validator import validate_row
from tablestore.domain.services.rw_lock import ReaderWriterLock, WaitObserver

__all__ = [
    "validate_row",
    "ReaderWriterLock",
    "WaitObserver",
]

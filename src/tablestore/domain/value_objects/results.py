"""Plain result values returned by store read operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RowsResult:
    """Rows of a table together with their count."""

    table: str
    rows: list[dict[str, Any]]
    count: int


@dataclass(frozen=True, slots=True)
class StoreStats:
    """Aggregate store status."""

    table_count: int
    uptime_seconds: float

    @property
    def uptime_ms(self) -> int:
        return int(self.uptime_seconds * 1000)

"""File-based snapshot storage adapter.

Implements SnapshotStorePort with a single snapshot file holding the
whole table registry.

Write path:
    1. Encode the full state into one in-memory buffer.
    2. Write the buffer to a sibling temp file (optionally fsync).
    3. os.replace() the temp file over the snapshot path.

Because the replace is atomic, the snapshot file on disk is always a
complete serialization of some past state, never a partial one.

Corrupt snapshots:
    A snapshot that exists but cannot be read or parsed is handled by
    the ``on_corrupt`` policy:
      - "quarantine": rename it to ``<name>.corrupt-<UTC stamp>``, start empty
      - "empty": leave it in place (the next save overwrites it), start empty
      - "fail": raise SnapshotCorruptError and abort startup
"""

from __future__ import annotations

import contextlib
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Mapping, get_args

from tablestore.adapters.outbound.snapshot_codec import decode_snapshot, encode_snapshot
from tablestore.domain.entities import Table
from tablestore.domain.errors import SnapshotCorruptError, SnapshotWriteError
from tablestore.infrastructure.logging import get_logger

CorruptPolicy = Literal["quarantine", "empty", "fail"]

logger = get_logger(__name__)


class FileSnapshotStore:
    """Single-file implementation of SnapshotStorePort.

    Attributes:
        path: Path of the snapshot file.
    """

    def __init__(
        self,
        path: str | Path,
        fsync: bool = True,
        on_corrupt: CorruptPolicy = "quarantine",
    ) -> None:
        """Initialize the snapshot store.

        Args:
            path: Snapshot file path. Parent directories are created on save.
            fsync: fsync the temp file before it replaces the snapshot.
            on_corrupt: Policy for an unreadable snapshot at load time.

        Raises:
            ValueError: If on_corrupt is not a known policy.
        """
        if on_corrupt not in get_args(CorruptPolicy):
            raise ValueError(f"Unknown corrupt snapshot policy: {on_corrupt!r}")

        self._path = Path(path)
        self._fsync = fsync
        self._on_corrupt = on_corrupt
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        """Snapshot file path."""
        return self._path

    @property
    def on_corrupt(self) -> CorruptPolicy:
        return self._on_corrupt

    def _temp_path(self) -> Path:
        return self._path.with_name(f".{self._path.name}.tmp")

    def load(self) -> dict[str, Table] | None:
        """Load the snapshot.

        Returns:
            The saved tables, or None when there is no snapshot or the
            snapshot was unreadable and the policy is not "fail".

        Raises:
            SnapshotCorruptError: If unreadable and the policy is "fail".
        """
        with self._lock:
            if not self._path.exists():
                logger.info("snapshot_absent", path=str(self._path))
                return None

            try:
                data = self._path.read_bytes()
                tables = decode_snapshot(data)
            except (OSError, ValueError) as e:
                return self._handle_corrupt(e)

        logger.info(
            "snapshot_loaded",
            path=str(self._path),
            tables=len(tables),
            bytes=len(data),
        )
        return tables

    def _handle_corrupt(self, error: Exception) -> None:
        reason = str(error).splitlines()[0] if str(error) else type(error).__name__

        if self._on_corrupt == "fail":
            logger.error("snapshot_corrupt", path=str(self._path), reason=reason)
            raise SnapshotCorruptError(str(self._path), reason) from error

        if self._on_corrupt == "empty":
            logger.warning(
                "snapshot_corrupt_starting_empty",
                path=str(self._path),
                reason=reason,
            )
            return None

        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            os.replace(self._path, target)
        except OSError as e:
            # The bad file stays in place and the next save overwrites it
            logger.error(
                "snapshot_quarantine_failed",
                path=str(self._path),
                reason=reason,
                error=str(e),
            )
            return None

        logger.error(
            "snapshot_quarantined",
            path=str(self._path),
            quarantined_to=str(target),
            reason=reason,
        )
        return None

    def save(self, tables: Mapping[str, Table]) -> int:
        """Rewrite the snapshot with the full state.

        Returns:
            Number of bytes written.

        Raises:
            SnapshotSerializationError: If the state cannot be encoded.
            SnapshotWriteError: If writing or replacing the file fails.
        """
        data = encode_snapshot(tables)

        with self._lock:
            temp_path = self._temp_path()
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with open(temp_path, "wb") as f:
                    f.write(data)
                    f.flush()
                    if self._fsync:
                        os.fsync(f.fileno())
                os.replace(temp_path, self._path)
            except OSError as e:
                with contextlib.suppress(OSError):
                    temp_path.unlink(missing_ok=True)
                raise SnapshotWriteError(str(e)) from e

        logger.debug("snapshot_saved", path=str(self._path), tables=len(tables), bytes=len(data))
        return len(data)

    def quarantined_files(self) -> list[Path]:
        """Snapshot files previously set aside as corrupt, oldest first."""
        return sorted(self._path.parent.glob(f"{self._path.name}.corrupt-*"))

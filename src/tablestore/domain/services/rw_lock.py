"""Reader-writer lock guarding the whole table registry.

Readers share the lock and run concurrently; a writer holds it
exclusively. Writers that are waiting block newly arriving readers, so
a steady stream of reads cannot starve a write.

Poisoning:
    If an unexpected exception (anything that is not a TableStoreError)
    escapes a write critical section, the protected state may be half
    mutated. The lock is then marked poisoned and every later
    acquisition, read or write, raises LockUnusableError until
    clear_poison() is called. Expected domain failures raised inside
    the critical section release the lock normally.

Thread Safety:
    All state is guarded by a single Condition. The lock is not
    reentrant: a thread must not acquire it again while holding it.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from tablestore.domain.errors import LockUnusableError, TableStoreError

WaitObserver = Callable[[str, float], None]
"""Called with ("read" | "write", seconds waited) after each acquisition."""


class ReaderWriterLock:
    """Shared/exclusive lock with writer preference and poisoning."""

    def __init__(self, on_wait: WaitObserver | None = None) -> None:
        """Initialize the lock.

        Args:
            on_wait: Optional observer for lock wait times (metrics).
        """
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
        self._poisoned = False
        self._on_wait = on_wait

    @property
    def is_poisoned(self) -> bool:
        with self._cond:
            return self._poisoned

    @property
    def active_readers(self) -> int:
        with self._cond:
            return self._readers

    @property
    def write_held(self) -> bool:
        with self._cond:
            return self._writer

    def acquire_read(self) -> None:
        """Acquire the lock in shared mode.

        Raises:
            LockUnusableError: If the lock is poisoned.
        """
        start = time.perf_counter()
        with self._cond:
            while True:
                if self._poisoned:
                    raise LockUnusableError()
                if not self._writer and self._waiting_writers == 0:
                    break
                self._cond.wait()
            self._readers += 1
        self._observe("read", start)

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        """Acquire the lock in exclusive mode.

        Raises:
            LockUnusableError: If the lock is poisoned.
        """
        start = time.perf_counter()
        with self._cond:
            if self._poisoned:
                raise LockUnusableError()
            self._waiting_writers += 1
            try:
                while self._writer or self._readers > 0:
                    self._cond.wait()
                    if self._poisoned:
                        raise LockUnusableError()
            finally:
                self._waiting_writers -= 1
                if self._poisoned:
                    self._cond.notify_all()
            self._writer = True
        self._observe("write", start)

    def release_write(self, poison: bool = False) -> None:
        """Release exclusive mode.

        Args:
            poison: Mark the lock unusable for every later acquisition.
        """
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write without a matching acquire_write")
            self._writer = False
            if poison:
                self._poisoned = True
            self._cond.notify_all()

    def clear_poison(self) -> None:
        """Make a poisoned lock usable again."""
        with self._cond:
            self._poisoned = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the lock in shared mode for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the lock in exclusive mode for the duration of the block.

        Unexpected exceptions poison the lock before propagating.
        """
        self.acquire_write()
        try:
            yield
        except TableStoreError:
            self.release_write()
            raise
        except BaseException:
            self.release_write(poison=True)
            raise
        else:
            self.release_write()

    def _observe(self, mode: str, start: float) -> None:
        if self._on_wait is not None:
            self._on_wait(mode, time.perf_counter() - start)

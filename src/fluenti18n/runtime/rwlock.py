"""Readers-writer lock guarding per-locale translation caches.

Lookups on the request path only read a loaded locale table, so any number
of them may run together. Loading, expiring and reloading a locale replace
the table and need exclusive access. Waiting writers block new readers so a
reload is not starved by steady lookup traffic.

Rules:
    - Read locks are reentrant per thread.
    - A thread holding the read lock cannot take the write lock, and a
      writer cannot take either lock again. Both raise RuntimeError instead
      of deadlocking.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ["RWLock"]


class RWLock:
    """Shared/exclusive lock with writer preference.

    Example:
        >>> lock = RWLock()
        >>> with lock.read():
        ...     pass  # look up a translation
        >>> with lock.write():
        ...     pass  # swap in a freshly loaded locale table
    """

    __slots__ = ("_cond", "_readers", "_waiting_writers", "_writer")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        # thread id -> reentrant read depth
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._waiting_writers = 0

    @staticmethod
    def _deadline(timeout: float | None) -> float | None:
        if timeout is None:
            return None
        if timeout < 0:
            msg = f"Timeout must be non-negative, got {timeout}"
            raise ValueError(msg)
        return time.monotonic() + timeout

    def _wait(self, deadline: float | None, what: str) -> None:
        if deadline is None:
            self._cond.wait()
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            msg = f"Timed out waiting for {what} lock"
            raise TimeoutError(msg)
        self._cond.wait(timeout=remaining)

    @contextmanager
    def read(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock shared for the duration of the block.

        Raises:
            RuntimeError: If the calling thread holds the write lock
            TimeoutError: If not acquired within timeout seconds
            ValueError: If timeout is negative
        """
        me = threading.get_ident()
        deadline = self._deadline(timeout)
        with self._cond:
            if me in self._readers:
                self._readers[me] += 1
            else:
                if self._writer == me:
                    msg = "Cannot take the read lock while holding the write lock"
                    raise RuntimeError(msg)
                while self._writer is not None or self._waiting_writers:
                    self._wait(deadline, "read")
                self._readers[me] = 1
        try:
            yield
        finally:
            with self._cond:
                self._readers[me] -= 1
                if not self._readers[me]:
                    del self._readers[me]
                    if not self._readers:
                        self._cond.notify_all()

    @contextmanager
    def write(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock exclusively for the duration of the block.

        Raises:
            RuntimeError: If the calling thread already holds either lock
            TimeoutError: If not acquired within timeout seconds
            ValueError: If timeout is negative
        """
        me = threading.get_ident()
        deadline = self._deadline(timeout)
        with self._cond:
            if me in self._readers:
                msg = "Cannot upgrade a read lock to the write lock"
                raise RuntimeError(msg)
            if self._writer == me:
                msg = "Write lock is not reentrant"
                raise RuntimeError(msg)
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers:
                    self._wait(deadline, "write")
                self._writer = me
            finally:
                self._waiting_writers -= 1
                # Readers blocked on waiting writers must re-check after a timeout too.
                self._cond.notify_all()
        try:
            yield
        finally:
            with self._cond:
                self._writer = None
                self._cond.notify_all()

    @property
    def reader_count(self) -> int:
        """Threads currently holding the read lock."""
        with self._cond:
            return len(self._readers)

    @property
    def writer_active(self) -> bool:
        """True while some thread holds the write lock."""
        with self._cond:
            return self._writer is not None

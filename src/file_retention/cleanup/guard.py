"""Synchronization between registry producers and the sweep."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class WriterGuard:
    """
    Locks and flags shared by FileTracker and FileCleaner.

    - append lock: serializes producer appends and the sweep's rewrite
    - sweep lock: at most one sweep at a time
    - sweeping flag: set for the whole sweep, queried without blocking
    """

    def __init__(self):
        self._append_lock = threading.Lock()
        self._sweep_lock = threading.Lock()
        self._sweeping = threading.Event()

    @property
    def sweeping(self) -> bool:
        """Check if a sweep currently holds exclusive ownership."""
        return self._sweeping.is_set()

    @contextmanager
    def appending(self) -> Iterator[None]:
        """Hold the append lock for one open-write-close cycle."""
        with self._append_lock:
            yield

    @contextmanager
    def exclusive(self) -> Iterator[bool]:
        """
        Take sweep ownership without waiting.

        Yields:
            True if ownership was acquired, False if another sweep holds it.
        """
        if not self._sweep_lock.acquire(blocking=False):
            yield False
            return

        self._sweeping.set()
        try:
            yield True
        finally:
            self._sweeping.clear()
            self._sweep_lock.release()

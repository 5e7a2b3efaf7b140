"""File tracking for retention cleanup."""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set

from file_retention.cleanup.guard import WriterGuard
from file_retention.cleanup.registry import RegistryStore
from file_retention.logging.retention_logger import TRACE

logger = logging.getLogger(__name__)


class FileTracker:
    """
    Record files created by the agent so a later sweep can remove them.

    Features:
    - Append-only registry shared by any number of producer threads
    - Non-blocking probe of sweep activity (entries racing a sweep are dropped)
    - Directory watching for files created by external tools
    - Never raises into the caller's own work
    """

    def __init__(
        self,
        registry: RegistryStore,
        guard: Optional[WriterGuard] = None,
        backoff_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize file tracker.

        Args:
            registry: Registry store to append to.
            guard: Writer guard shared with the sweep engine.
            backoff_seconds: Delay applied when an append races an active sweep.
            sleep: Sleep function, replaceable in tests.
        """
        self._registry = registry
        self._guard = guard or WriterGuard()
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep
        self._watch_lock = threading.Lock()
        self._watched_directories: Dict[Path, _DirectoryWatch] = {}

    @property
    def registry(self) -> RegistryStore:
        """Get the underlying registry store."""
        return self._registry

    @property
    def guard(self) -> WriterGuard:
        """Get the writer guard shared with the sweep."""
        return self._guard

    def add(self, path: os.PathLike | str) -> bool:
        """
        Track a file for retention cleanup.

        The file does not need to exist yet. Failures are logged at TRACE
        level and otherwise ignored. Never waits for a running sweep, but an
        append that passed the sweep check may wait briefly while a sweep
        rewrites the registry.

        Args:
            path: Path of the created file.

        Returns:
            True if the entry was appended to the registry.
        """
        try:
            entry = os.path.abspath(os.fsdecode(path))

            if "\n" in entry or "\r" in entry:
                logger.log(TRACE, f"Refusing to track path with line terminator: {entry!r}")
                return False

            self._registry.ensure_exists()

            if self._guard.sweeping:
                logger.log(TRACE, f"Sweep in progress, dropping {entry}")
                self._sleep(self._backoff_seconds)
                return False

            with self._guard.appending():
                self._registry.append(entry)

        except (OSError, TypeError, ValueError) as e:
            logger.log(TRACE, f"Could not track {path!r}: {e}")
            return False

        logger.log(TRACE, f"Tracking {entry}")
        return True

    def track_multiple(self, paths: Iterable[os.PathLike | str]) -> int:
        """
        Track multiple files.

        Args:
            paths: Paths to track.

        Returns:
            Number of entries appended.
        """
        return sum(1 for p in paths if self.add(p))

    def start_watching(self, directory: Path | str) -> None:
        """
        Start watching a directory for new files.

        Files that appear in the directory before stop_watching() is called
        are tracked at that point.

        Args:
            directory: Directory to watch.
        """
        directory = Path(directory).resolve()

        if not directory.is_dir():
            logger.warning(f"Cannot watch non-directory: {directory}")
            return

        with self._watch_lock:
            if directory in self._watched_directories:
                return

            try:
                initial_contents = set(directory.iterdir())
            except OSError as e:
                logger.warning(f"Cannot watch {directory}: {e}")
                return

            self._watched_directories[directory] = _DirectoryWatch(
                directory=directory,
                initial_contents=initial_contents,
            )
            logger.debug(f"Started watching {directory}")

    def stop_watching(self, directory: Path | str) -> List[Path]:
        """
        Stop watching a directory and track any new files found.

        Args:
            directory: Directory to stop watching.

        Returns:
            Newly detected files that were tracked.
        """
        directory = Path(directory).resolve()

        with self._watch_lock:
            watch = self._watched_directories.pop(directory, None)
        if watch is None:
            return []

        new_files: List[Path] = []

        try:
            new_paths = set(directory.iterdir()) - watch.initial_contents
        except OSError as e:
            logger.warning(f"Cannot list watched directory {directory}: {e}")
            return []

        for path in sorted(new_paths):
            if path.is_file() and self.add(path):
                new_files.append(path)

        logger.debug(f"Stopped watching {directory}, tracked {len(new_files)} new file(s)")
        return new_files

    def stop_all_watching(self) -> List[Path]:
        """Stop watching all directories, returning every newly tracked file."""
        all_new: List[Path] = []

        for directory in self.watched_directories:
            all_new.extend(self.stop_watching(directory))

        return all_new

    @property
    def watched_directories(self) -> List[Path]:
        """Get directories currently being watched."""
        with self._watch_lock:
            return list(self._watched_directories)


@dataclass
class _DirectoryWatch:
    """Internal class for directory watching state."""

    directory: Path
    initial_contents: Set[Path] = field(default_factory=set)

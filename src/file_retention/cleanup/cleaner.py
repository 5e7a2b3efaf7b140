"""Periodic sweep deleting tracked files past the retention threshold."""

from __future__ import annotations

import logging
import os
import stat
import time
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Set

from file_retention.cleanup.outcomes import (
    DeleteStatus,
    PathProbe,
    PathStatus,
    SweepOutcome,
)
from file_retention.logging.retention_logger import TRACE

if TYPE_CHECKING:
    from file_retention.cleanup.tracker import FileTracker
    from file_retention.logging.retention_logger import RetentionLogger
    from file_retention.policy import AgePolicy

logger = logging.getLogger(__name__)


def creation_time(st: os.stat_result) -> float:
    """
    Get a file's creation timestamp from its stat result.

    Uses the earlier of birth time (where the platform reports one) and
    modification time. Linux does not expose birth time through os.stat,
    so there this is the modification time.
    """
    birth = getattr(st, "st_birthtime", None)
    if birth is None:
        return st.st_mtime
    return min(birth, st.st_mtime)


def probe_path(entry: str) -> PathProbe:
    """
    Resolve a tracked path's metadata without raising.

    Args:
        entry: Registry line.

    Returns:
        PathProbe describing the outcome.
    """
    if not entry.strip():
        return PathProbe(entry, PathStatus.INVALID, error="empty entry")

    try:
        st = os.stat(entry)
    except (FileNotFoundError, NotADirectoryError):
        return PathProbe(entry, PathStatus.NOT_FOUND)
    except PermissionError as e:
        return PathProbe(entry, PathStatus.ACCESS_DENIED, error=str(e))
    except (OSError, ValueError) as e:
        return PathProbe(entry, PathStatus.INVALID, error=str(e))

    if not stat.S_ISREG(st.st_mode):
        return PathProbe(entry, PathStatus.INVALID, error="not a regular file")

    return PathProbe(entry, PathStatus.FOUND, created_at=creation_time(st))


def delete_file(entry: str) -> DeleteStatus:
    """Delete one file, reporting the outcome instead of raising."""
    try:
        os.unlink(entry)
    except FileNotFoundError:
        return DeleteStatus.NOT_FOUND
    except PermissionError:
        return DeleteStatus.ACCESS_DENIED
    except OSError:
        return DeleteStatus.FAILED

    return DeleteStatus.DELETED


class FileCleaner:
    """
    Sweep engine for tracked files.

    Features:
    - Elapsed-age evaluation against a live AgePolicy
    - Registry compaction with atomic replace
    - Dry-run mode for testing
    - Only one sweep at a time; producers are never blocked by it
    """

    def __init__(
        self,
        tracker: FileTracker,
        policy: AgePolicy,
        drop_missing: bool = False,
        dry_run: bool = False,
        clock: Callable[[], float] = time.time,
        retention_logger: Optional[RetentionLogger] = None,
    ):
        """
        Initialize file cleaner.

        Args:
            tracker: FileTracker whose registry and guard are swept.
            policy: Age policy read at the start of each sweep.
            drop_missing: If True, stop tracking paths whose file is gone.
            dry_run: If True, don't actually delete files.
            clock: Wall-clock source in epoch seconds, replaceable in tests.
            retention_logger: Optional logger recording sweep outcomes.
        """
        self._tracker = tracker
        self._policy = policy
        self._drop_missing = drop_missing
        self._dry_run = dry_run
        self._clock = clock
        self._retention_logger = retention_logger

    def flush(self) -> SweepOutcome:
        """
        Delete tracked files older than the threshold and compact the registry.

        Never raises; I/O failures abort the pass and are logged.

        Returns:
            SweepOutcome describing the pass.
        """
        start = time.monotonic()
        outcome = SweepOutcome(started_at=datetime.now())

        threshold = self._policy.threshold_hours()
        outcome.threshold_hours = threshold

        if threshold is None:
            outcome.skipped = "sweeping disabled"
            return self._finish(outcome, start)

        registry = self._tracker.registry
        if not registry.exists():
            outcome.skipped = "no registry"
            return self._finish(outcome, start)

        guard = self._tracker.guard
        with guard.exclusive() as acquired:
            if not acquired:
                logger.debug("Another sweep is running, skipping")
                outcome.skipped = "sweep already running"
            else:
                self._sweep(outcome, threshold * 3600.0)

        return self._finish(outcome, start)

    def _sweep(self, outcome: SweepOutcome, max_age_seconds: float) -> None:
        registry = self._tracker.registry
        logger.log(TRACE, f"Flushing registry {registry.path}...")

        try:
            self._scan(outcome, max_age_seconds)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading registry {registry.path}: {e}")
            outcome.aborted = f"scan failed: {e}"
            return

        if not outcome.resolved:
            return

        try:
            with self._tracker.guard.appending():
                registry.remove_entries(outcome.resolved)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error rewriting registry {registry.path}: {e}")
            outcome.aborted = f"rewrite failed: {e}"

    def _scan(self, outcome: SweepOutcome, max_age_seconds: float) -> None:
        resolved: Set[str] = set()
        now = self._clock()

        for entry in self._tracker.registry.iter_entries():
            outcome.scanned += 1

            if entry in resolved:
                continue

            probe = probe_path(entry)

            if probe.unresolvable:
                logger.log(TRACE, f"Dropping unresolvable entry {entry!r}: {probe.error}")
                outcome.dropped.append(entry)
                resolved.add(entry)
                continue

            if probe.status is PathStatus.NOT_FOUND:
                if self._drop_missing:
                    logger.log(TRACE, f"Dropping missing file {entry}")
                    outcome.dropped.append(entry)
                    resolved.add(entry)
                else:
                    outcome.kept.append(entry)
                continue

            age = now - probe.created_at
            logger.log(TRACE, f"Delete evaluation for {entry}: age {age / 3600.0:.2f}h")

            if age <= max_age_seconds:
                outcome.kept.append(entry)
                continue

            status = self._delete(entry)

            if status in (DeleteStatus.DELETED, DeleteStatus.NOT_FOUND):
                outcome.deleted.append(entry)
                resolved.add(entry)
            elif status is DeleteStatus.DRY_RUN:
                outcome.kept.append(entry)
            else:
                logger.debug(f"Could not delete {entry} ({status.value}), keeping it tracked")
                outcome.failed.append(entry)

    def _delete(self, entry: str) -> DeleteStatus:
        if self._dry_run:
            logger.info(f"[DRY RUN] Would delete: {entry}")
            return DeleteStatus.DRY_RUN

        logger.log(TRACE, f"Deleting: {entry}")
        return delete_file(entry)

    def _finish(self, outcome: SweepOutcome, start: float) -> SweepOutcome:
        outcome.duration_seconds = time.monotonic() - start

        if self._retention_logger is not None:
            self._retention_logger.record_sweep(outcome)

        return outcome

    @property
    def tracker(self) -> FileTracker:
        """Get the tracker whose registry is swept."""
        return self._tracker

    @property
    def policy(self) -> AgePolicy:
        """Get the age policy consulted by each sweep."""
        return self._policy

    @property
    def dry_run(self) -> bool:
        """Check if in dry-run mode."""
        return self._dry_run

    @dry_run.setter
    def dry_run(self, value: bool) -> None:
        """Set dry-run mode."""
        self._dry_run = value

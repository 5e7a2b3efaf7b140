"""Outcome values for path probes, deletions and sweep passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class PathStatus(Enum):
    """Result of resolving a tracked path's metadata."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    INVALID = "invalid"


class DeleteStatus(Enum):
    """Result of deleting a tracked file."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    FAILED = "failed"
    DRY_RUN = "dry_run"


@dataclass
class PathProbe:
    """Metadata lookup result for one tracked path."""

    path: str
    status: PathStatus
    created_at: Optional[float] = None
    error: Optional[str] = None

    @property
    def unresolvable(self) -> bool:
        """Check if the path can never be validated and should be dropped."""
        return self.status in (PathStatus.ACCESS_DENIED, PathStatus.INVALID)


@dataclass
class SweepOutcome:
    """Paths resolved and bookkeeping for one sweep pass."""

    started_at: datetime
    threshold_hours: Optional[int] = None
    scanned: int = 0
    deleted: List[str] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: Optional[str] = None
    aborted: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def resolved(self) -> List[str]:
        """Paths removed from tracking: deleted plus dropped."""
        return self.deleted + self.dropped

    @property
    def completed(self) -> bool:
        """Check if the pass ran to completion."""
        return self.skipped is None and self.aborted is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {
            "started_at": self.started_at.isoformat(),
            "threshold_hours": self.threshold_hours,
            "scanned": self.scanned,
            "deleted": self.deleted,
            "dropped": self.dropped,
            "kept": len(self.kept),
            "failed": self.failed,
            "skipped": self.skipped,
            "aborted": self.aborted,
            "duration_seconds": self.duration_seconds,
        }

    def __str__(self) -> str:
        if self.skipped:
            return f"SweepOutcome(skipped: {self.skipped})"
        if self.aborted:
            return f"SweepOutcome(aborted: {self.aborted})"
        return (
            f"SweepOutcome(scanned={self.scanned}, deleted={len(self.deleted)}, "
            f"dropped={len(self.dropped)}, failed={len(self.failed)}, "
            f"{self.duration_seconds:.2f}s)"
        )

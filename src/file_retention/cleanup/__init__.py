"""Cleanup module for tracked file retention."""

from file_retention.cleanup.guard import WriterGuard
from file_retention.cleanup.registry import RegistryStore
from file_retention.cleanup.outcomes import (
    DeleteStatus,
    PathProbe,
    PathStatus,
    SweepOutcome,
)
from file_retention.cleanup.tracker import FileTracker
from file_retention.cleanup.cleaner import FileCleaner

__all__ = [
    "WriterGuard",
    "RegistryStore",
    "DeleteStatus",
    "PathProbe",
    "PathStatus",
    "SweepOutcome",
    "FileTracker",
    "FileCleaner",
]

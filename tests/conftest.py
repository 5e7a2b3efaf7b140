"""Shared fixtures for file-retention tests."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from file_retention.cleanup.cleaner import FileCleaner
from file_retention.cleanup.registry import RegistryStore
from file_retention.cleanup.tracker import FileTracker
from file_retention.policy import AgePolicy

HOUR = 3600.0


@pytest.fixture
def registry(tmp_path: Path) -> RegistryStore:
    """Registry store in a fresh temporary directory."""
    return RegistryStore(tmp_path / "files_created.txt")


@pytest.fixture
def tracker(registry: RegistryStore) -> FileTracker:
    """FileTracker with a short backoff."""
    return FileTracker(registry, backoff_seconds=0.01)


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory creating a file whose timestamps lie age_hours in the past.

    Usage:
        path = make_file("report.docx", age_hours=10)
    """
    docs = tmp_path / "docs"
    docs.mkdir()

    def _make(name: str, age_hours: float = 0.0) -> Path:
        path = docs / name
        path.write_text(f"content of {name}\n", encoding="utf-8")
        stamp = time.time() - age_hours * HOUR
        os.utime(path, (stamp, stamp))
        return path

    return _make


@pytest.fixture
def make_cleaner(tracker: FileTracker) -> Callable[..., FileCleaner]:
    """Factory creating a FileCleaner over the tracker fixture."""

    def _make(threshold_hours: Optional[int], **kwargs) -> FileCleaner:
        return FileCleaner(tracker, AgePolicy.fixed(threshold_hours), **kwargs)

    return _make


def write_registry(registry: RegistryStore, entries: List[str]) -> None:
    """Write raw registry lines, bypassing the tracker."""
    registry.path.write_text("".join(f"{e}\n" for e in entries), encoding="utf-8")

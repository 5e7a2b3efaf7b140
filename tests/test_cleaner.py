"""Tests for the FileCleaner sweep."""

import logging
import os

import pytest

from file_retention.cleanup import cleaner as cleaner_module
from file_retention.cleanup.cleaner import FileCleaner, creation_time, probe_path
from file_retention.cleanup.outcomes import DeleteStatus, PathStatus
from file_retention.policy import AgePolicy

from conftest import HOUR, write_registry


# =============================================================================
# Age evaluation
# =============================================================================


def test_old_file_deleted_and_young_file_kept(tracker, registry, make_file, make_cleaner):
    """Registry {P1 10h, P2 1h} with a 5h threshold drops only P1."""
    p1 = make_file("p1.docx", age_hours=10)
    p2 = make_file("p2.docx", age_hours=1)
    tracker.add(p1)
    tracker.add(p2)

    outcome = make_cleaner(5).flush()

    assert not p1.exists()
    assert p2.exists()
    assert registry.read_entries() == [str(p2)]
    assert outcome.deleted == [str(p1)]
    assert outcome.kept == [str(p2)]
    assert outcome.completed


def test_threshold_boundary_is_inclusive(tracker, registry, make_file):
    """A file exactly at the threshold stays; one second more and it goes."""
    path = make_file("edge.txt")
    tracker.add(path)
    created = creation_time(os.stat(path))

    at_limit = FileCleaner(tracker, AgePolicy.fixed(5), clock=lambda: created + 5 * HOUR)
    at_limit.flush()
    assert path.exists()
    assert registry.read_entries() == [str(path)]

    past_limit = FileCleaner(tracker, AgePolicy.fixed(5), clock=lambda: created + 5 * HOUR + 1)
    past_limit.flush()
    assert not path.exists()
    assert registry.read_entries() == []


def test_age_uses_elapsed_time_not_hour_of_day(tracker, make_file):
    """A file created minutes ago is young regardless of the clock hour."""
    path = make_file("fresh.txt", age_hours=0.1)
    tracker.add(path)
    created = creation_time(os.stat(path))

    # 23:00-style timestamps would exceed a 2h threshold under an hour-of-day rule
    cleaner = FileCleaner(tracker, AgePolicy.fixed(2), clock=lambda: created + 60)
    cleaner.flush()

    assert path.exists()


def test_zero_threshold_deletes_any_aged_file(tracker, make_file, make_cleaner):
    path = make_file("zero.txt", age_hours=0.01)
    tracker.add(path)

    make_cleaner(0).flush()

    assert not path.exists()


def test_duplicates_removed_together(tracker, registry, make_file, make_cleaner):
    old = make_file("old.txt", age_hours=3)
    young = make_file("young.txt")
    for p in (old, young, old, old):
        tracker.add(p)

    outcome = make_cleaner(1).flush()

    assert registry.read_entries() == [str(young)]
    assert outcome.deleted == [str(old)]
    assert outcome.scanned == 4


# =============================================================================
# Skips
# =============================================================================


def test_disabled_policy_touches_nothing(tracker, registry, make_file, make_cleaner):
    """The disable sentinel performs zero deletions and leaves the registry as is."""
    path = make_file("ancient.txt", age_hours=1000)
    tracker.add(path)
    before = registry.path.read_bytes()

    for threshold in (None, -1):
        outcome = make_cleaner(threshold).flush()
        assert outcome.skipped == "sweeping disabled"

    assert path.exists()
    assert registry.path.read_bytes() == before


def test_missing_registry_is_skipped(registry, make_cleaner):
    outcome = make_cleaner(1).flush()

    assert outcome.skipped == "no registry"
    assert not registry.exists()


def test_concurrent_flush_is_skipped(tracker, registry, make_file, make_cleaner):
    path = make_file("old.txt", age_hours=10)
    tracker.add(path)

    with tracker.guard.exclusive():
        outcome = make_cleaner(1).flush()

    assert outcome.skipped == "sweep already running"
    assert path.exists()
    assert registry.read_entries() == [str(path)]


def test_flush_is_idempotent(tracker, registry, make_file, make_cleaner):
    """A second flush with nothing new leaves the registry byte-identical."""
    tracker.add(make_file("old.txt", age_hours=10))
    tracker.add(make_file("young.txt", age_hours=1))
    cleaner = make_cleaner(5)

    cleaner.flush()
    after_first = registry.path.read_bytes()
    inode = registry.path.stat().st_ino

    outcome = cleaner.flush()

    assert registry.path.read_bytes() == after_first
    assert registry.path.stat().st_ino == inode
    assert outcome.resolved == []


def test_sweep_flag_cleared_after_flush(tracker, make_file, make_cleaner):
    tracker.add(make_file("old.txt", age_hours=10))

    make_cleaner(1).flush()

    assert not tracker.guard.sweeping


# =============================================================================
# Missing and unresolvable entries
# =============================================================================


def test_externally_deleted_file_kept_by_default(tracker, registry, make_file, make_cleaner):
    path = make_file("gone.txt", age_hours=10)
    tracker.add(path)
    path.unlink()

    outcome = make_cleaner(1).flush()

    assert outcome.completed
    assert outcome.kept == [str(path)]
    assert registry.read_entries() == [str(path)]


def test_externally_deleted_file_dropped_with_drop_missing(tracker, registry, make_file, make_cleaner):
    path = make_file("gone.txt", age_hours=10)
    tracker.add(path)
    path.unlink()

    outcome = make_cleaner(1, drop_missing=True).flush()

    assert outcome.completed
    assert outcome.dropped == [str(path)]
    assert registry.read_entries() == []


def test_unresolvable_entries_dropped_without_deletion(registry, tracker, tmp_path, make_file, make_cleaner):
    """Malformed lines and non-files are dropped; nothing on disk is removed."""
    directory = tmp_path / "a-directory"
    directory.mkdir()
    keep = make_file("young.txt")
    write_registry(registry, ["", "/bad\0path", str(directory), str(keep)])

    outcome = make_cleaner(1).flush()

    assert sorted(outcome.dropped) == sorted(["", "/bad\0path", str(directory)])
    assert directory.is_dir()
    assert registry.read_entries() == [str(keep)]


def test_undecodable_entry_does_not_abort_passes(registry, tmp_path, make_file, make_cleaner):
    """A registry line that is not valid UTF-8 is handled like any other path."""
    old = make_file("old.txt", age_hours=10)
    raw_missing = os.fsencode(tmp_path) + b"/caf\xe9.txt"
    registry.path.write_bytes(os.fsencode(old) + b"\n" + raw_missing + b"\n")
    cleaner = make_cleaner(1)

    first = cleaner.flush()
    second = cleaner.flush()

    assert first.completed
    assert second.completed
    assert first.deleted == [str(old)]
    assert not old.exists()
    assert first.kept == [os.fsdecode(raw_missing)]
    assert registry.path.read_bytes() == raw_missing + b"\n"


def test_undecodable_aged_file_is_deleted(registry, tmp_path, make_cleaner):
    raw = os.fsencode(tmp_path) + b"/r\xe9sum\xe9.txt"
    with open(raw, "wb") as f:
        f.write(b"x")
    stamp = os.stat(raw).st_mtime - 10 * HOUR
    os.utime(raw, (stamp, stamp))
    registry.path.write_bytes(raw + b"\n")

    outcome = make_cleaner(1).flush()

    assert outcome.completed
    assert not os.path.exists(raw)
    assert registry.path.read_bytes() == b""


def test_probe_path_statuses(tmp_path, make_file):
    assert probe_path("").status is PathStatus.INVALID
    assert probe_path("/bad\0path").status is PathStatus.INVALID
    assert probe_path(str(tmp_path)).status is PathStatus.INVALID
    assert probe_path(str(tmp_path / "missing")).status is PathStatus.NOT_FOUND

    found = probe_path(str(make_file("x.txt", age_hours=2)))
    assert found.status is PathStatus.FOUND
    assert found.created_at is not None
    assert not found.unresolvable


def test_probe_file_as_directory_component_is_not_found(make_file):
    path = make_file("plain.txt")
    assert probe_path(str(path / "child")).status is PathStatus.NOT_FOUND


# =============================================================================
# Failures
# =============================================================================


def test_failed_deletion_stays_tracked(tracker, registry, make_file, make_cleaner, monkeypatch):
    """A locked or protected file is kept for the next pass."""
    path = make_file("locked.txt", age_hours=10)
    tracker.add(path)
    monkeypatch.setattr(cleaner_module, "delete_file", lambda entry: DeleteStatus.ACCESS_DENIED)

    outcome = make_cleaner(1).flush()

    assert outcome.failed == [str(path)]
    assert outcome.completed
    assert path.exists()
    assert registry.read_entries() == [str(path)]

    monkeypatch.undo()
    make_cleaner(1).flush()
    assert not path.exists()
    assert registry.read_entries() == []


def test_file_vanishing_before_delete_is_resolved(tracker, registry, make_file, make_cleaner, monkeypatch):
    path = make_file("racy.txt", age_hours=10)
    tracker.add(path)
    monkeypatch.setattr(cleaner_module, "delete_file", lambda entry: DeleteStatus.NOT_FOUND)

    outcome = make_cleaner(1).flush()

    assert outcome.deleted == [str(path)]
    assert registry.read_entries() == []


def test_scan_failure_aborts_pass(tracker, registry, make_file, make_cleaner, monkeypatch, caplog):
    """An I/O error reading the registry aborts without raising or rewriting."""
    tracker.add(make_file("old.txt", age_hours=10))
    before = registry.path.read_bytes()

    def _broken():
        raise OSError("I/O error")
        yield  # pragma: no cover

    monkeypatch.setattr(registry, "iter_entries", _broken)

    outcome = make_cleaner(1).flush()

    assert outcome.aborted is not None
    assert "scan failed" in outcome.aborted
    assert registry.path.read_bytes() == before
    assert not tracker.guard.sweeping
    assert "Error reading registry" in caplog.text


def test_rewrite_failure_aborts_pass(tracker, registry, make_file, make_cleaner, monkeypatch):
    """A failing rewrite leaves the registry as it was before the rewrite."""
    path = make_file("old.txt", age_hours=10)
    tracker.add(path)
    before = registry.path.read_bytes()

    def _fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("file_retention.cleanup.registry.os.replace", _fail)

    outcome = make_cleaner(1).flush()

    assert outcome.aborted is not None
    assert "rewrite failed" in outcome.aborted
    assert registry.path.read_bytes() == before

    # The next pass resolves the entry once the disk recovers
    monkeypatch.undo()
    make_cleaner(1, drop_missing=True).flush()
    assert registry.read_entries() == []


# =============================================================================
# Options
# =============================================================================


def test_dry_run_keeps_everything(tracker, registry, make_file, make_cleaner):
    path = make_file("old.txt", age_hours=10)
    tracker.add(path)

    cleaner = make_cleaner(1, dry_run=True)
    assert cleaner.dry_run
    outcome = cleaner.flush()

    assert path.exists()
    assert registry.read_entries() == [str(path)]
    assert outcome.kept == [str(path)]

    cleaner.dry_run = False
    cleaner.flush()
    assert not path.exists()


def test_policy_read_on_every_flush(tracker, registry, make_file):
    """Changing the threshold between sweeps takes effect without a restart."""
    path = make_file("medium.txt", age_hours=3)
    tracker.add(path)
    setting = {"hours": None}
    cleaner = FileCleaner(tracker, AgePolicy(lambda: setting["hours"]))

    cleaner.flush()
    assert path.exists()

    setting["hours"] = 5
    cleaner.flush()
    assert path.exists()

    setting["hours"] = 2
    outcome = cleaner.flush()
    assert not path.exists()
    assert outcome.threshold_hours == 2


@pytest.mark.parametrize("status", [DeleteStatus.FAILED, DeleteStatus.ACCESS_DENIED])
def test_delete_failures_logged(tracker, make_file, make_cleaner, monkeypatch, caplog, status):
    tracker.add(make_file("old.txt", age_hours=10))
    monkeypatch.setattr(cleaner_module, "delete_file", lambda entry: status)

    with caplog.at_level(logging.DEBUG, logger="file_retention"):
        make_cleaner(1).flush()

    assert f"({status.value})" in caplog.text

"""Plain-text registry of tracked paths."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Set

logger = logging.getLogger(__name__)


class RegistryStore:
    """
    One path per line in a single UTF-8 text file.

    The store performs raw I/O only. Callers provide synchronization
    through WriterGuard and let OSError propagate to where it is absorbed.
    """

    ENCODING = "utf-8"
    # Undecodable bytes round-trip unchanged, matching os.fsdecode on POSIX
    ERRORS = "surrogateescape"

    def __init__(self, path: Path | str):
        """
        Initialize registry store.

        Args:
            path: Location of the registry artifact.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Get the registry artifact path."""
        return self._path

    def exists(self) -> bool:
        """Check if the registry artifact exists."""
        return self._path.is_file()

    def ensure_exists(self) -> None:
        """Create the registry artifact empty if it is absent."""
        if not self._path.exists():
            with open(self._path, "a", encoding=self.ENCODING, errors=self.ERRORS):
                pass

    def append(self, entry: str) -> None:
        """
        Append one entry as a complete line.

        The entry and its terminator go out in a single write.

        Raises:
            OSError: On any I/O failure.
        """
        with open(self._path, "a", encoding=self.ENCODING, errors=self.ERRORS) as f:
            f.write(entry + "\n")
            f.flush()

    def iter_entries(self) -> Iterator[str]:
        """
        Yield entries in file order.

        Raises:
            OSError: If the registry cannot be read.
        """
        with open(self._path, "r", encoding=self.ENCODING, errors=self.ERRORS) as f:
            for line in f:
                yield line.rstrip("\r\n")

    def read_entries(self) -> List[str]:
        """Read all entries into a list."""
        return list(self.iter_entries())

    def remove_entries(self, resolved: Iterable[str]) -> int:
        """
        Rewrite the registry without the given entries.

        Every line equal to a resolved entry is removed, duplicates
        included; the remainder keeps its relative order. The new
        contents are written to a sibling file and moved into place,
        so a failure leaves the previous registry intact.

        Args:
            resolved: Entries to drop.

        Returns:
            Number of lines removed.

        Raises:
            OSError: On any I/O failure.
        """
        drop: Set[str] = set(resolved)
        if not drop:
            return 0

        entries = self.read_entries()
        remaining = [entry for entry in entries if entry not in drop]
        removed = len(entries) - len(remaining)

        if removed == 0:
            return 0

        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            with open(tmp, "w", encoding=self.ENCODING, errors=self.ERRORS) as f:
                f.writelines(entry + "\n" for entry in remaining)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

        logger.debug(f"Rewrote registry {self._path}: removed {removed}, kept {len(remaining)}")
        return removed

    def __len__(self) -> int:
        if not self.exists():
            return 0
        return sum(1 for _ in self.iter_entries())

    def __repr__(self) -> str:
        return f"RegistryStore({self._path})"

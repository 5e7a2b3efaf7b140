"""Age policy consulted by the sweep engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

import yaml
from pydantic import ValidationError

from file_retention.config.loader import ConfigLoader
from file_retention.config.models import DISABLED

if TYPE_CHECKING:
    from file_retention.config.models import RetentionConfig

logger = logging.getLogger(__name__)


class AgePolicy:
    """
    Retention threshold in hours, or a disable sentinel.

    The value is read from its source every time threshold_hours() is
    called, so a sweep always sees the current setting.
    """

    def __init__(self, source: Callable[[], Optional[int]]):
        """
        Initialize age policy.

        Args:
            source: Callable returning the threshold in hours, None or -1 to disable.
        """
        self._source = source

    @classmethod
    def fixed(cls, hours: Optional[int]) -> AgePolicy:
        """Policy with a constant threshold."""
        return cls(lambda: hours)

    @classmethod
    def from_config(cls, config: RetentionConfig) -> AgePolicy:
        """Policy reading the threshold live from a config instance."""
        return cls(lambda: config.retention_threshold_hours)

    @classmethod
    def from_file(cls, path: Path | str) -> AgePolicy:
        """Policy re-loading a YAML config file on every read."""
        path = Path(path)

        def _read() -> Optional[int]:
            try:
                return ConfigLoader.load(path).retention_threshold_hours
            except (OSError, yaml.YAMLError, ValidationError, ValueError) as e:
                logger.warning(f"Cannot read retention policy from {path}, sweeping disabled: {e}")
                return None

        return cls(_read)

    def threshold_hours(self) -> Optional[int]:
        """
        Get the current threshold.

        Returns:
            Threshold in hours, or None when sweeping is disabled.
        """
        value = self._source()

        if value is None or value == DISABLED:
            return None

        if value < 0:
            logger.warning(f"Invalid retention threshold {value}, sweeping disabled")
            return None

        return int(value)

    def threshold_seconds(self) -> Optional[float]:
        """Get the current threshold in seconds, or None when disabled."""
        hours = self.threshold_hours()
        return None if hours is None else hours * 3600.0

    @property
    def disabled(self) -> bool:
        """Check whether sweeping is currently disabled."""
        return self.threshold_hours() is None

"""Logging setup and sweep history for the retention tracker."""

from __future__ import annotations

import json
import logging
import sys
from collections import deque
from pathlib import Path
from typing import TYPE_CHECKING, Deque, List, Optional

if TYPE_CHECKING:
    from file_retention.cleanup.outcomes import SweepOutcome
    from file_retention.config.models import RetentionConfig

# Below DEBUG; used for failures the tracker absorbs on purpose.
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def resolve_level(level: str | int) -> int:
    """Map a level name (including TRACE) to its numeric value."""
    if isinstance(level, int):
        return level

    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


class ColoredFormatter(logging.Formatter):
    """Formatter with color support for console output."""

    COLORS = {
        "RESET": "\033[0m",
        "GREY": "\033[90m",
        "BLUE": "\033[94m",
        "GREEN": "\033[92m",
        "YELLOW": "\033[93m",
        "RED": "\033[91m",
        "MAGENTA": "\033[95m",
    }

    LEVEL_COLORS = {
        TRACE: "GREY",
        logging.DEBUG: "BLUE",
        logging.INFO: "GREEN",
        logging.WARNING: "YELLOW",
        logging.ERROR: "RED",
        logging.CRITICAL: "MAGENTA",
    }

    def __init__(self, use_colors: bool = True):
        super().__init__("[%(asctime)s] %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S")
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)

        if not self.use_colors:
            return text

        color = self.LEVEL_COLORS.get(record.levelno, "RESET")
        return f"{self.COLORS[color]}{text}{self.COLORS['RESET']}"


class RetentionLogger:
    """
    Logger for retention tracker activity.

    Provides:
    - Console output with colors
    - Optional log file
    - Bounded history of sweep outcomes
    - JSON export for debugging
    """

    def __init__(
        self,
        name: str = "file_retention",
        level: str | int = "INFO",
        log_to_console: bool = True,
        log_to_file: Optional[Path] = None,
        use_colors: bool = True,
        history_size: int = 50,
    ):
        """
        Initialize retention logger.

        Args:
            name: Logger name. The default covers every module of the package.
            level: Logging level (TRACE, DEBUG, INFO, WARNING, ERROR).
            log_to_console: Whether to log to console.
            log_to_file: Optional path to log file.
            use_colors: Whether to use colors in console output.
            history_size: Number of sweep outcomes to keep.
        """
        self._logger = logging.getLogger(name)
        self._logger.setLevel(resolve_level(level))
        self._outcomes: Deque[SweepOutcome] = deque(maxlen=history_size)

        # Prevent duplicate handlers
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        if log_to_console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))
            self._logger.addHandler(console_handler)

        if log_to_file:
            file_handler = logging.FileHandler(log_to_file, encoding="utf-8")
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
            )
            self._logger.addHandler(file_handler)

    @classmethod
    def from_config(cls, config: RetentionConfig, log_to_console: bool = True) -> RetentionLogger:
        """Create a logger from a RetentionConfig."""
        return cls(
            level=config.log_level,
            log_to_console=log_to_console,
            log_to_file=config.log_file,
            history_size=config.history_size,
        )

    @property
    def logger(self) -> logging.Logger:
        """Get the underlying Python logger."""
        return self._logger

    def record_sweep(self, outcome: SweepOutcome) -> None:
        """
        Store a sweep outcome and log its summary.

        Args:
            outcome: Outcome of a finished, skipped or aborted pass.
        """
        self._outcomes.append(outcome)

        if outcome.aborted:
            level = logging.ERROR
        elif outcome.resolved or outcome.failed:
            level = logging.INFO
        else:
            level = logging.DEBUG

        self._logger.log(level, str(outcome))

    def get_outcomes(self, completed_only: bool = False) -> List[SweepOutcome]:
        """
        Get recorded sweep outcomes, oldest first.

        Args:
            completed_only: Exclude skipped and aborted passes.
        """
        outcomes = list(self._outcomes)

        if completed_only:
            outcomes = [o for o in outcomes if o.completed]

        return outcomes

    def export_to_json(self, filepath: Path | str) -> None:
        """
        Export recorded sweep outcomes to a JSON file.

        Args:
            filepath: Path to output JSON file.
        """
        data = [outcome.to_dict() for outcome in self._outcomes]

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

    def clear(self) -> None:
        """Clear sweep history."""
        self._outcomes.clear()

    @property
    def outcome_count(self) -> int:
        """Get number of recorded sweep outcomes."""
        return len(self._outcomes)

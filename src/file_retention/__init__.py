"""
file-retention: track files created by an automation agent and sweep old ones.

Producers call FileTracker.add() after creating a file; a scheduler calls
FileCleaner.flush() to delete tracked files past the retention threshold.
"""

from file_retention.config.models import DISABLED, RetentionConfig
from file_retention.config.loader import ConfigLoader
from file_retention.policy import AgePolicy
from file_retention.cleanup.guard import WriterGuard
from file_retention.cleanup.registry import RegistryStore
from file_retention.cleanup.outcomes import DeleteStatus, PathStatus, SweepOutcome
from file_retention.cleanup.tracker import FileTracker
from file_retention.cleanup.cleaner import FileCleaner
from file_retention.logging.retention_logger import TRACE, RetentionLogger
from file_retention.factory import RetentionComponents, create_components, load_components

__version__ = "0.1.0"

__all__ = [
    # Config
    "DISABLED",
    "RetentionConfig",
    "ConfigLoader",
    "AgePolicy",
    # Registry
    "WriterGuard",
    "RegistryStore",
    "FileTracker",
    "FileCleaner",
    # Outcomes
    "DeleteStatus",
    "PathStatus",
    "SweepOutcome",
    # Logging
    "TRACE",
    "RetentionLogger",
    # Wiring
    "RetentionComponents",
    "create_components",
    "load_components",
]

"""Build a tracker and sweep engine from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from file_retention.cleanup.cleaner import FileCleaner
from file_retention.cleanup.guard import WriterGuard
from file_retention.cleanup.registry import RegistryStore
from file_retention.cleanup.tracker import FileTracker
from file_retention.config.loader import ConfigLoader
from file_retention.config.models import RetentionConfig
from file_retention.logging.retention_logger import RetentionLogger
from file_retention.policy import AgePolicy

logger = logging.getLogger(__name__)


@dataclass
class RetentionComponents:
    """
    One registry with its producer and sweep sides.

    Create once at agent startup; hand `tracker` to content producers
    and `cleaner` to whatever schedules sweeps.
    """

    config: RetentionConfig
    tracker: FileTracker
    cleaner: FileCleaner
    retention_logger: Optional[RetentionLogger] = None

    @property
    def registry(self) -> RegistryStore:
        return self.tracker.registry


def create_components(
    config: Optional[RetentionConfig] = None,
    configure_logging: bool = True,
    policy: Optional[AgePolicy] = None,
) -> RetentionComponents:
    """
    Wire a FileTracker and FileCleaner sharing one registry and guard.

    Args:
        config: Configuration to use. Defaults to RetentionConfig().
        configure_logging: Whether to install console/file handlers.
        policy: Age policy override. Defaults to reading config live.

    Returns:
        RetentionComponents for the configured registry.
    """
    if config is None:
        config = RetentionConfig()

    retention_logger = RetentionLogger.from_config(config) if configure_logging else None

    registry_path = Path(config.registry_path)
    try:
        registry_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # Appends will fail and be absorbed until the directory exists
        logger.warning(f"Cannot create registry directory {registry_path.parent}: {e}")

    guard = WriterGuard()
    tracker = FileTracker(
        RegistryStore(registry_path),
        guard=guard,
        backoff_seconds=config.backoff_seconds,
    )
    cleaner = FileCleaner(
        tracker,
        policy or AgePolicy.from_config(config),
        drop_missing=config.drop_missing,
        dry_run=config.dry_run,
        retention_logger=retention_logger,
    )

    logger.debug(f"Retention tracker ready, registry at {registry_path}")
    return RetentionComponents(
        config=config,
        tracker=tracker,
        cleaner=cleaner,
        retention_logger=retention_logger,
    )


def load_components(
    config_path: Optional[str | Path] = None,
    root_dir: Optional[Path] = None,
    configure_logging: bool = True,
) -> RetentionComponents:
    """
    Load configuration from YAML and wire the components.

    The age policy re-reads the config file on every sweep when an
    explicit file is found, so retention can change without a restart.
    """
    if root_dir is None:
        root_dir = Path.cwd()

    config = ConfigLoader.load(config_path, root_dir)

    policy = None
    source = Path(config_path) if config_path is not None else ConfigLoader.find_config_file(root_dir)
    if source is not None:
        if not source.is_absolute():
            source = root_dir / source
        policy = AgePolicy.from_file(source)

    return create_components(config, configure_logging=configure_logging, policy=policy)

"""
Pytest plugin for suites that exercise file-producing handlers.

Provides fixtures wiring a FileTracker and FileCleaner to a per-test
registry under tmp_path.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from file_retention.cleanup.cleaner import FileCleaner
from file_retention.cleanup.tracker import FileTracker
from file_retention.config.models import RetentionConfig
from file_retention.factory import RetentionComponents, create_components

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser


# =============================================================================
# Pytest Hooks - Configuration and Options
# =============================================================================


def pytest_addoption(parser: Parser) -> None:
    """Register pytest ini options."""
    parser.addini(
        "retention_backoff_seconds",
        help="Producer backoff used by the file_tracker fixture (seconds)",
        default="0.01",
    )


def pytest_configure(config: Config) -> None:
    """Register markers."""
    config.addinivalue_line(
        "markers",
        "retention_threshold(hours): Retention threshold for the file_cleaner fixture",
    )


# =============================================================================
# Function-scoped Fixtures
# =============================================================================


@pytest.fixture
def retention_config(tmp_path: Path, request: pytest.FixtureRequest) -> RetentionConfig:
    """
    Retention configuration with a registry under tmp_path.

    Threshold comes from @pytest.mark.retention_threshold(hours), else disabled.
    """
    marker = request.node.get_closest_marker("retention_threshold")
    threshold = marker.args[0] if marker else None

    backoff = float(request.config.getini("retention_backoff_seconds"))

    return RetentionConfig(
        registry_path=tmp_path / "retention" / "files_created.txt",
        retention_threshold_hours=threshold,
        backoff_seconds=backoff,
    )


@pytest.fixture
def retention_components(retention_config: RetentionConfig) -> RetentionComponents:
    """Tracker and cleaner sharing the test's registry."""
    return create_components(retention_config, configure_logging=False)


@pytest.fixture
def file_tracker(retention_components: RetentionComponents) -> FileTracker:
    """FileTracker bound to the test's registry."""
    return retention_components.tracker


@pytest.fixture
def file_cleaner(retention_components: RetentionComponents) -> FileCleaner:
    """FileCleaner sweeping the file_tracker registry."""
    return retention_components.cleaner

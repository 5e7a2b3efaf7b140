"""Logging module for file-retention."""

from file_retention.logging.retention_logger import (
    TRACE,
    ColoredFormatter,
    RetentionLogger,
    resolve_level,
)

__all__ = ["TRACE", "ColoredFormatter", "RetentionLogger", "resolve_level"]

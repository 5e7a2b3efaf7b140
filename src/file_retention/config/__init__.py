"""Configuration module for file-retention."""

from file_retention.config.models import DISABLED, RetentionConfig
from file_retention.config.loader import ConfigLoader

__all__ = ["DISABLED", "RetentionConfig", "ConfigLoader"]

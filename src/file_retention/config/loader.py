"""YAML configuration loader for the retention tracker."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from file_retention.config.models import RetentionConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load retention configurations from YAML files."""

    DEFAULT_CONFIG_NAMES = [
        "file_retention.yaml",
        "file_retention.yml",
        ".file_retention.yaml",
        ".file_retention.yml",
    ]

    @classmethod
    def load(
        cls,
        config_path: Optional[str | Path] = None,
        root_dir: Optional[Path] = None,
    ) -> RetentionConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Explicit path to config file. If None, searches for default files.
            root_dir: Directory holding the default config file. Defaults to current directory.

        Returns:
            RetentionConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If explicit config_path is given but doesn't exist.
            pydantic.ValidationError: If the file contents are invalid.
        """
        if root_dir is None:
            root_dir = Path.cwd()

        if config_path is not None:
            path = Path(config_path)
            if not path.is_absolute():
                path = root_dir / path
            if not path.exists():
                raise FileNotFoundError(f"Configuration file not found: {path}")
            return cls._load_from_file(path)

        found_path = cls.find_config_file(root_dir)
        if found_path:
            return cls._load_from_file(found_path)

        logger.info("No retention configuration file found, using defaults")
        return RetentionConfig()

    @classmethod
    def find_config_file(cls, directory: Path) -> Optional[Path]:
        """Return the first default-named config file in directory, if any."""
        for name in cls.DEFAULT_CONFIG_NAMES:
            candidate = directory.resolve() / name
            if candidate.is_file():
                logger.debug(f"Found retention config file: {candidate}")
                return candidate
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> RetentionConfig:
        logger.debug(f"Loading retention configuration from: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}

        config = RetentionConfig.model_validate(data)

        # Relative registry paths are anchored at the config file's directory
        if not config.registry_path.is_absolute():
            config.registry_path = path.parent / config.registry_path

        return config

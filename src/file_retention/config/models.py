"""Pydantic models for retention tracker configuration."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Threshold value meaning "never sweep".
DISABLED = -1


class RetentionConfig(BaseModel):
    """Root configuration model for the retention tracker."""

    registry_path: Path = Field(
        Path("instance") / "files_created.txt",
        description="Plain-text artifact listing tracked paths, one per line",
    )
    retention_threshold_hours: Optional[int] = Field(
        None, description="Maximum file age in hours; null or -1 disables sweeping"
    )
    backoff_seconds: float = Field(
        5.0, description="Delay applied to a producer that races an active sweep"
    )
    drop_missing: bool = Field(
        False, description="Stop tracking paths whose file no longer exists"
    )
    dry_run: bool = Field(False, description="Log deletions instead of performing them")
    log_level: str = Field("INFO", description="Logging level (TRACE, DEBUG, INFO, ...)")
    log_file: Optional[Path] = Field(None, description="Optional log file path")
    history_size: int = Field(50, description="Number of sweep outcomes kept in memory")

    model_config = {"validate_assignment": True}

    @field_validator("retention_threshold_hours")
    @classmethod
    def validate_threshold(cls, v: Optional[int]) -> Optional[int]:
        """Normalize the disable sentinel and reject other negative values."""
        if v is None or v == DISABLED:
            return None
        if v < 0:
            raise ValueError(f"Retention threshold must be >= 0 or {DISABLED}, got {v}")
        return v

    @field_validator("backoff_seconds")
    @classmethod
    def validate_backoff(cls, v: float) -> float:
        """Validate backoff is not negative."""
        if v < 0:
            raise ValueError("Backoff must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("history_size")
    @classmethod
    def validate_history_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("History size must be positive")
        return v

    @property
    def sweeping_enabled(self) -> bool:
        """Check whether a retention threshold is configured."""
        return self.retention_threshold_hours is not None

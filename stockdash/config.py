"""
Dashboard settings.

Settings hold the caller-side knobs: the allowed window range, the
snapshot refresh cadence, and the simulated round-trip latencies. They
can be overridden from a YAML file.
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union
import yaml
from stockdash.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """
    Caller-side dashboard configuration.

    Attributes:
        default_minutes: Window used when the caller does not choose one
        min_minutes: Smallest window the dashboard offers
        max_minutes: Largest window the dashboard offers
        minutes_step: Window granularity
        refresh_seconds: Snapshot polling interval
        stocks_latency: Simulated delay for the snapshot fetch (seconds)
        history_latency: Simulated delay for a history fetch (seconds)
        correlation_latency: Simulated delay for the matrix fetch (seconds)
        catalog_path: Optional YAML catalog replacing the built-in symbols

    Representation Invariants:
        - 0 <= min_minutes <= default_minutes <= max_minutes
        - minutes_step > 0
        - refresh_seconds > 0
        - all latencies >= 0
    """
    default_minutes: int = 30
    min_minutes: int = 5
    max_minutes: int = 60
    minutes_step: int = 5
    refresh_seconds: float = 10.0
    stocks_latency: float = 0.5
    history_latency: float = 0.7
    correlation_latency: float = 1.2
    catalog_path: Optional[str] = None

    def __post_init__(self):
        """Validate representation invariants."""
        if not 0 <= self.min_minutes <= self.default_minutes <= self.max_minutes:
            raise ValueError("require 0 <= min_minutes <= default_minutes <= max_minutes")
        if self.minutes_step <= 0:
            raise ValueError("minutes_step must be positive")
        if self.refresh_seconds <= 0:
            raise ValueError("refresh_seconds must be positive")
        for name in ("stocks_latency", "history_latency", "correlation_latency"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

    def validate_minutes(self, minutes: int) -> int:
        """
        Check a window against the dashboard's range and step.

        Raises:
            ValueError: If minutes is out of range or not on the step grid
        """
        if not self.min_minutes <= minutes <= self.max_minutes:
            raise ValueError(
                f"minutes must be between {self.min_minutes} and {self.max_minutes}, got {minutes}"
            )
        if minutes % self.minutes_step != 0:
            raise ValueError(f"minutes must be a multiple of {self.minutes_step}, got {minutes}")
        return minutes

    def without_latency(self) -> "Settings":
        """Return a copy with every simulated delay set to zero."""
        return replace(self, stocks_latency=0.0, history_latency=0.0, correlation_latency=0.0)


def load_settings(path: Union[str, Path]) -> Settings:
    """
    Load settings from a YAML file, overlaying the defaults.

    Args:
        path: Path to the YAML file

    Returns:
        Settings

    Raises:
        ConfigError: If the file is missing, unparsable, has unknown keys,
            or holds invalid values
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")

    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse settings file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown settings in {path}: {', '.join(unknown)}")

    try:
        settings = Settings(**raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings

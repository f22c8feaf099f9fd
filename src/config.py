"""Runtime configuration for wcal.

Defaults come from constants.py, then WCAL_* environment variables, then
command-line flags. Nothing is written back to disk.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

from constants import (
    DEFAULT_DEVICE,
    DEFAULT_SNAPSHOT_FORMAT,
    DEFAULT_SNAPSHOT_RESOLUTION,
    DEFAULT_TIMEOUT,
    FFMPEG,
    V4L2_CTL,
)


class ConfigError(Exception):
    """Raised when a configuration value is invalid."""


def default_snapshot_dir() -> Path:
    """Snapshot directory: $XDG_PICTURES_DIR/wcal, falling back to ~/Pictures/wcal."""
    pictures = os.environ.get("XDG_PICTURES_DIR", str(Path.home() / "Pictures"))
    return Path(pictures).expanduser() / "wcal"


def parse_resolution(value: str) -> tuple[int, int]:
    """Parse a "WIDTHxHEIGHT" string.

    Raises:
        ConfigError: If the format is wrong or a dimension is zero.
    """
    match = re.fullmatch(r"\s*(\d+)\s*[xX]\s*(\d+)\s*", value)
    if not match:
        raise ConfigError(f"Invalid resolution '{value}' (expected WIDTHxHEIGHT, e.g. 640x480)")
    width, height = int(match.group(1)), int(match.group(2))
    if width == 0 or height == 0:
        raise ConfigError(f"Invalid resolution '{value}': dimensions must be positive")
    return width, height


def parse_timeout(value: Any) -> float:
    """Parse a positive timeout in seconds."""
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout '{value}' (expected seconds)") from None
    if timeout <= 0:
        raise ConfigError(f"Invalid timeout '{value}': must be greater than zero")
    return timeout


@dataclass
class CalibratorConfig:
    """Settings for one calibration session."""

    device: str = DEFAULT_DEVICE
    v4l2_ctl: str = V4L2_CTL
    ffmpeg: str = FFMPEG
    timeout: float = DEFAULT_TIMEOUT
    snapshot_resolution: str = DEFAULT_SNAPSHOT_RESOLUTION
    snapshot_format: str = DEFAULT_SNAPSHOT_FORMAT
    snapshot_dir: Path = field(default_factory=default_snapshot_dir)

    # Environment variable -> field name
    ENV_OVERRIDES = {
        "WCAL_DEVICE": "device",
        "WCAL_V4L2_CTL": "v4l2_ctl",
        "WCAL_FFMPEG": "ffmpeg",
        "WCAL_TIMEOUT": "timeout",
        "WCAL_SNAPSHOT_RESOLUTION": "snapshot_resolution",
        "WCAL_SNAPSHOT_FORMAT": "snapshot_format",
    }

    def validate(self) -> None:
        """Check field values, raising ConfigError on the first problem."""
        if not self.device:
            raise ConfigError("Device path must not be empty")
        self.timeout = parse_timeout(self.timeout)
        parse_resolution(self.snapshot_resolution)
        if not self.snapshot_format.strip():
            raise ConfigError("Snapshot pixel format must not be empty")

    def with_overrides(self, **overrides: Any) -> CalibratorConfig:
        """Return a copy with the given non-None fields replaced."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        config = replace(self, **updates)
        config.validate()
        return config

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CalibratorConfig:
        """Build a config from defaults plus WCAL_* environment variables."""
        env = os.environ if environ is None else environ
        overrides = {
            attr: env[var]
            for var, attr in cls.ENV_OVERRIDES.items()
            if env.get(var)
        }
        return cls().with_overrides(**overrides)

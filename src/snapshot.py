"""Still frame capture through ffmpeg."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from config import parse_resolution

if TYPE_CHECKING:
    from command_execution import CommandExecutor
    from config import CalibratorConfig

log = logging.getLogger(__name__)


def default_snapshot_path(config: CalibratorConfig, now: datetime | None = None) -> Path:
    """Timestamped output path inside the configured snapshot directory."""
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return config.snapshot_dir / f"snapshot-{stamp}.jpg"


def capture_argv(config: CalibratorConfig, output_path: Path) -> list[str]:
    """Build the ffmpeg command that grabs exactly one frame from the device."""
    width, height = parse_resolution(config.snapshot_resolution)
    return [
        config.ffmpeg,
        "-hide_banner",
        "-loglevel", "error",
        "-y",
        "-f", "v4l2",
        "-input_format", config.snapshot_format,
        "-video_size", f"{width}x{height}",
        "-i", config.device,
        "-frames:v", "1",
        str(output_path),
    ]


async def capture_frame(
    executor: CommandExecutor,
    config: CalibratorConfig,
    output_path: Path | None = None,
) -> Path:
    """Capture one frame to output_path (or a timestamped default).

    Raises:
        ExecutionError: If ffmpeg fails or times out.
    """
    path = output_path if output_path is not None else default_snapshot_path(config)
    path.parent.mkdir(parents=True, exist_ok=True)
    await executor.execute(capture_argv(config, path), timeout=config.timeout)
    log.info(f"Captured snapshot from {config.device} to {path}")
    return path

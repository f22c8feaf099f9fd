"""System detection utilities: external tools and video device nodes."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config import CalibratorConfig


def find_tool(name: str) -> Path | None:
    """Resolve an external program to an absolute path.

    Args:
        name: Program name (looked up in PATH) or explicit path

    Returns:
        Resolved path, or None if not found or not executable.
    """
    resolved = shutil.which(name)
    return Path(resolved) if resolved else None


def list_video_devices(dev_dir: Path = Path("/dev")) -> list[Path]:
    """List V4L2 device nodes (/dev/video*), sorted by index."""

    def index(path: Path) -> int:
        suffix = path.name[len("video"):]
        return int(suffix) if suffix.isdigit() else -1

    devices = [p for p in dev_dir.glob("video*") if index(p) >= 0]
    return sorted(devices, key=index)


def check_tools(config: CalibratorConfig, snapshot: bool = False) -> list[str]:
    """Return the names of required external programs that are missing.

    Args:
        config: Session configuration naming the programs
        snapshot: Also require the frame capture program
    """
    required = [config.v4l2_ctl]
    if snapshot:
        required.append(config.ffmpeg)
    return [tool for tool in required if find_tool(tool) is None]

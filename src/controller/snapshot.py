"""Snapshot event handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from command_execution import ExecutionError
from snapshot import capture_frame

if TYPE_CHECKING:
    from command_execution import CommandExecutor
    from config import CalibratorConfig

ERROR_TITLE = "Webcam Calibrator Error"


class SnapshotEventsMixin:
    """Mixin for capturing a preview frame."""

    config: CalibratorConfig
    executor: CommandExecutor
    run_worker: Callable
    notify: Callable
    _set_status: Callable

    def action_snapshot(self) -> None:
        """Capture one frame from the device."""
        self._set_status("Capturing snapshot...")
        self.run_worker(self._snapshot(), group="snapshot", exclusive=True)

    async def _snapshot(self) -> None:
        try:
            path = await capture_frame(self.executor, self.config)
        except (ExecutionError, OSError) as e:
            self.notify(f"Failed to capture snapshot: {e}", title=ERROR_TITLE, severity="error")
            self._set_status("Snapshot failed")
            return
        self._set_status(f"Saved snapshot: {path}")
        self.notify(str(path), title="Snapshot saved")

"""Device tab composition: the full control table as reported by v4l2-ctl."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import DataTable, Static

CONTROL_TABLE_COLUMNS = ("Control", "Min", "Max", "Step", "Value", "Position")


def compose_device_tab(device: str) -> ComposeResult:
    """Compose the device tab.

    Args:
        device: Device path shown above the table
    """
    with Vertical(id="device-tab-content"):
        yield Static(f"Device: {device}", id="device-path")
        table: DataTable = DataTable(id="control-table", zebra_stripes=True, cursor_type="row")
        table.add_columns(*CONTROL_TABLE_COLUMNS)
        yield table

"""Tab composition functions for the TUI."""

from ui.tabs.controls import compose_controls_tab
from ui.tabs.device import CONTROL_TABLE_COLUMNS, compose_device_tab

__all__ = [
    "CONTROL_TABLE_COLUMNS",
    "compose_controls_tab",
    "compose_device_tab",
]

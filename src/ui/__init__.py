"""UI module containing widgets, styles, and tab compositions."""

from ui.widgets import (
    UNAVAILABLE,
    ControlSlider,
    SliderRow,
    SwitchRow,
)
from ui.tabs import (
    compose_controls_tab,
    compose_device_tab,
)
from ui.helpers import format_position, populate_control_table
from ui import ids

__all__ = [
    # Widgets
    "UNAVAILABLE",
    "ControlSlider",
    "SliderRow",
    "SwitchRow",
    # Tab composers
    "compose_controls_tab",
    "compose_device_tab",
    # Helpers
    "format_position",
    "populate_control_table",
]

"""Custom Textual widgets for wcal."""

from ui.widgets.control import (
    UNAVAILABLE,
    ControlSlider,
    SliderRow,
    SwitchRow,
)

__all__ = [
    "UNAVAILABLE",
    "ControlSlider",
    "SliderRow",
    "SwitchRow",
]

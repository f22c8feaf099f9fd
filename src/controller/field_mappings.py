"""Mapping registry for UI widget ↔ device control synchronization."""

from __future__ import annotations

from dataclasses import dataclass

from constants import BRIGHTNESS, WHITE_BALANCE_AUTOMATIC, WHITE_BALANCE_TEMPERATURE, ZOOM_ABSOLUTE
import ui.ids as ids


@dataclass(frozen=True)
class SliderMapping:
    """Maps a ControlSlider widget to a numeric control."""

    widget_id: str
    control: str
    section: str  # Heading the slider is grouped under
    label: str


@dataclass(frozen=True)
class SwitchMapping:
    """Maps a Switch widget to a boolean control."""

    widget_id: str
    control: str
    section: str
    label: str


# Sections are rendered in the order they first appear here
SLIDER_MAPPINGS: list[SliderMapping] = [
    SliderMapping(ids.BRIGHTNESS_SLIDER, BRIGHTNESS, "Brightness", "Level"),
    SliderMapping(ids.WB_TEMPERATURE_SLIDER, WHITE_BALANCE_TEMPERATURE, "White Balance", "Temperature"),
    SliderMapping(ids.ZOOM_SLIDER, ZOOM_ABSOLUTE, "Zoom", "Zoom"),
]

SWITCH_MAPPINGS: list[SwitchMapping] = [
    SwitchMapping(ids.WB_AUTO_SWITCH, WHITE_BALANCE_AUTOMATIC, "White Balance", "Auto"),
]


def slider_for_control(control: str) -> SliderMapping | None:
    """Find the slider mapping bound to a control name."""
    for mapping in SLIDER_MAPPINGS:
        if mapping.control == control:
            return mapping
    return None


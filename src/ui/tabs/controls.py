"""Controls tab composition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.widgets import Label

from ui.widgets import SliderRow, SwitchRow

if TYPE_CHECKING:
    from controller.field_mappings import SliderMapping, SwitchMapping


def compose_controls_tab(
    sliders: Sequence[SliderMapping],
    switches: Sequence[SwitchMapping],
) -> ComposeResult:
    """Compose one section per control group, switches above sliders.

    Sections appear in the order they are first named by the mappings.

    Args:
        sliders: Slider widgets to create
        switches: Switch widgets to create

    Yields:
        Textual widgets for the controls tab
    """
    sections: list[str] = []
    for mapping in [*sliders, *switches]:
        if mapping.section not in sections:
            sections.append(mapping.section)

    with VerticalScroll(id="controls-tab-content"):
        for section in sections:
            with Container(classes="control-section"):
                yield Label(section, classes="section-label")
                for switch in switches:
                    if switch.section == section:
                        yield SwitchRow(switch.label, switch.widget_id)
                for slider in sliders:
                    if slider.section == section:
                        yield SliderRow(slider.label, slider.control, slider.widget_id)

"""Camera control widgets: ControlSlider, SliderRow, SwitchRow."""

from __future__ import annotations

from textual import events
from textual.app import ComposeResult, RenderResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Label, Static, Switch

from model import clamp
from ui.ids import value_label

UNAVAILABLE = "unavailable"


class ControlSlider(Widget, can_focus=True):
    """A horizontal slider over a normalized [0, 1] position.

    A gesture (mouse drag or a run of arrow keys) posts AdjustStarted, then
    AdjustChanged for every intermediate position, and AdjustCommitted once
    when the gesture ends: mouse release, enter, or focus leaving the slider.
    """

    BINDINGS = [
        Binding("left", "nudge(-1)", "Decrease", show=False),
        Binding("right", "nudge(1)", "Increase", show=False),
        Binding("home", "jump(0.0)", "Minimum", show=False),
        Binding("end", "jump(1.0)", "Maximum", show=False),
        Binding("enter", "commit", "Apply", show=False),
    ]

    position: reactive[float] = reactive(0.0)

    class AdjustStarted(Message):
        def __init__(self, slider: ControlSlider) -> None:
            self.slider = slider
            super().__init__()

        @property
        def control(self) -> ControlSlider:
            return self.slider

    class AdjustChanged(Message):
        def __init__(self, slider: ControlSlider, position: float) -> None:
            self.slider = slider
            self.position = position
            super().__init__()

        @property
        def control(self) -> ControlSlider:
            return self.slider

    class AdjustCommitted(Message):
        def __init__(self, slider: ControlSlider, position: float) -> None:
            self.slider = slider
            self.position = position
            super().__init__()

        @property
        def control(self) -> ControlSlider:
            return self.slider

    def __init__(self, control_name: str, keyboard_step: float = 0.05, id: str | None = None) -> None:
        super().__init__(id=id)
        self.control_name = control_name
        self.keyboard_step = keyboard_step
        self._adjusting = False
        self._dragging = False

    @property
    def adjusting(self) -> bool:
        return self._adjusting

    def render(self) -> RenderResult:
        width = max(3, self.content_size.width)
        knob = round(self.position * (width - 1))
        return "━" * knob + "●" + "─" * (width - knob - 1)

    def set_position(self, position: float) -> None:
        """Show a position from the device without starting a gesture."""
        if not self._adjusting:
            self.position = float(clamp(position, 0.0, 1.0))

    # =========================================================================
    # Gesture
    # =========================================================================

    def _begin(self) -> None:
        if not self._adjusting:
            self._adjusting = True
            self.post_message(self.AdjustStarted(self))

    def _move_to(self, position: float) -> None:
        self._begin()
        self.position = float(clamp(position, 0.0, 1.0))
        self.post_message(self.AdjustChanged(self, self.position))

    def _commit(self) -> None:
        if self._adjusting:
            self._adjusting = False
            self.post_message(self.AdjustCommitted(self, self.position))

    def _position_at(self, x: int) -> float:
        width = max(2, self.content_size.width)
        return x / (width - 1)

    # =========================================================================
    # Keyboard
    # =========================================================================

    def action_nudge(self, direction: int) -> None:
        self._move_to(self.position + direction * self.keyboard_step)

    def action_jump(self, position: float) -> None:
        self._move_to(position)

    def action_commit(self) -> None:
        self._commit()

    def on_blur(self, event: events.Blur) -> None:
        self._commit()

    # =========================================================================
    # Mouse
    # =========================================================================

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if self.disabled:
            return
        self._dragging = True
        self.capture_mouse()
        self._move_to(self._position_at(event.x))

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self._dragging:
            self._move_to(self._position_at(event.x))

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self._dragging:
            self._dragging = False
            self.release_mouse()
            self._commit()


class SliderRow(Horizontal):
    """A labelled slider with its raw value readout."""

    def __init__(self, label: str, control_name: str, slider_id: str) -> None:
        super().__init__(classes="control-row")
        self._label = label
        self._control_name = control_name
        self._slider_id = slider_id

    def compose(self) -> ComposeResult:
        yield Label(self._label, classes="control-label")
        yield ControlSlider(self._control_name, id=self._slider_id)
        yield Static(UNAVAILABLE, id=value_label(self._slider_id), classes="control-value")


class SwitchRow(Horizontal):
    """A labelled on/off switch for a boolean control."""

    def __init__(self, label: str, switch_id: str) -> None:
        super().__init__(classes="control-row")
        self._label = label
        self._switch_id = switch_id

    def compose(self) -> ComposeResult:
        yield Label(self._label, classes="control-label")
        yield Switch(value=False, disabled=True, id=self._switch_id)

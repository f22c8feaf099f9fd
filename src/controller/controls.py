"""Control event handlers: sliders, switches, reload."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from textual.css.query import NoMatches
from textual.widgets import Static, Switch

from command_execution import ExecutionError
from controller.field_mappings import SLIDER_MAPPINGS, SWITCH_MAPPINGS, slider_for_control
from controller.sync import FAILED, INTERLOCK_CHANGED, RELOADED, WRITTEN, SyncEvent
from ui import UNAVAILABLE, ControlSlider, populate_control_table
from ui.ids import css, value_label

if TYPE_CHECKING:
    from controller.sync import ControlSynchronizer

log = logging.getLogger(__name__)

ERROR_TITLE = "Webcam Calibrator Error"


class ControlEventsMixin:
    """Mixin wiring control widgets to the ControlSynchronizer."""

    sync: ControlSynchronizer
    query_one: Callable
    run_worker: Callable
    notify: Callable
    _set_status: Callable

    # =========================================================================
    # Synchronizer → UI
    # =========================================================================

    def on_sync_event(self, event: SyncEvent) -> None:
        """Listener registered with the synchronizer."""
        if event.kind == RELOADED:
            self._sync_ui_from_table()
        elif event.kind == INTERLOCK_CHANGED:
            self._sync_slider_sensitivity()
        elif event.kind == WRITTEN:
            self._show_written_value(event.control, event.value)
        elif event.kind == FAILED:
            log.debug(f"Synchronizer reported failure: {event.error}")

    def _sync_ui_from_table(self) -> None:
        """Move every widget to the values in the freshly loaded table."""
        table = self.sync.table
        for mapping in SLIDER_MAPPINGS:
            try:
                slider = self.query_one(css(mapping.widget_id), ControlSlider)
                readout = self.query_one(css(value_label(mapping.widget_id)), Static)
            except NoMatches:
                log.debug(f"{mapping.widget_id} not found")
                continue
            descriptor = table.get(mapping.control)
            if descriptor is None:
                slider.set_position(0.0)
                readout.update(UNAVAILABLE)
            else:
                slider.set_position(descriptor.position())
                readout.update(str(descriptor.value))

        for mapping in SWITCH_MAPPINGS:
            try:
                switch = self.query_one(css(mapping.widget_id), Switch)
            except NoMatches:
                log.debug(f"{mapping.widget_id} not found")
                continue
            auto = self.sync.is_auto(mapping.control)
            # Writable once the device answered, listed or not; bools often
            # lack a range and never enter the table
            switch.disabled = False
            if auto is not None:
                # Reflect device state without echoing a write back to it
                with switch.prevent(Switch.Changed):
                    switch.value = auto

        self._sync_slider_sensitivity()
        populate_control_table(self, table)

    def _show_written_value(self, control: str, value: int) -> None:
        mapping = slider_for_control(control)
        if mapping is None:
            return
        try:
            self.query_one(css(value_label(mapping.widget_id)), Static).update(str(value))
        except NoMatches:
            log.debug(f"value label for {mapping.widget_id} not found")

    def _sync_slider_sensitivity(self) -> None:
        """Enable sliders the user may edit; disable unavailable or interlocked ones."""
        for mapping in SLIDER_MAPPINGS:
            try:
                slider = self.query_one(css(mapping.widget_id), ControlSlider)
            except NoMatches:
                continue
            slider.disabled = not self.sync.is_enabled(mapping.control)

    # =========================================================================
    # UI → Synchronizer
    # =========================================================================

    def on_slider_adjust_started(self, event: ControlSlider.AdjustStarted) -> None:
        self.sync.begin_adjust(event.slider.control_name)

    def on_slider_adjust_changed(self, event: ControlSlider.AdjustChanged) -> None:
        """Preview the value under the slider; nothing is written."""
        value = self.sync.update_adjust(event.slider.control_name, event.position)
        if value is None:
            return
        try:
            self.query_one(css(value_label(event.slider.id)), Static).update(str(value))
        except NoMatches:
            log.debug(f"value label for {event.slider.id} not found")

    def on_slider_adjust_committed(self, event: ControlSlider.AdjustCommitted) -> None:
        self.run_worker(self._commit_adjust(event.slider.control_name), group="control-writes")

    def on_control_switch_changed(self, event: Switch.Changed) -> None:
        for mapping in SWITCH_MAPPINGS:
            if event.switch.id == mapping.widget_id:
                self.run_worker(self._set_boolean(mapping.control, event.value), group="control-writes")
                return

    def action_reload(self) -> None:
        """Re-read all controls from the device."""
        self.run_worker(self._reload(), group="reload")

    # =========================================================================
    # Workers
    # =========================================================================

    async def _commit_adjust(self, control: str) -> None:
        try:
            value = await self.sync.commit_adjust(control)
        except ExecutionError as e:
            self.notify(f"Failed to set {control}: {e}", title=ERROR_TITLE, severity="error")
            return
        if value is not None:
            self._set_status(f"{control} = {value}")

    async def _set_boolean(self, control: str, value: bool) -> None:
        try:
            await self.sync.set_boolean(control, value)
        except ExecutionError as e:
            self.notify(f"Failed to set {control}: {e}", title=ERROR_TITLE, severity="error")
            return
        self._set_status(f"{control} = {1 if value else 0}")

    async def _reload(self) -> None:
        try:
            table = await self.sync.reload()
        except ExecutionError as e:
            self.notify(f"Failed to load controls: {e}", title=ERROR_TITLE, severity="error")
            return
        self._set_status(f"Loaded {len(table)} controls from {self.sync.device}")

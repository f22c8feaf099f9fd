"""Tests for UI event handling - verifies slider gestures and switch changes reach the device.

These tests catch wiring problems where event decorators don't register properly.
"""

import pytest

from textual.widgets import DataTable, Switch

from app import WebcamCalibratorTUI
from conftest import FakeExecutor
import ui.ids as ids
from ui import ControlSlider
from ui.ids import css


async def settle(app, pilot):
    """Let pending messages and workers finish."""
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestMount:
    """Test the initial control load."""

    @pytest.mark.asyncio
    async def test_widgets_follow_device(self, config, fake_executor):
        """Sliders show device positions and the table lists every control."""
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)

            zoom = app.query_one(css(ids.ZOOM_SLIDER), ControlSlider)
            assert zoom.position == pytest.approx(0.5)
            assert zoom.disabled is False

            table = app.query_one(css(ids.CONTROL_TABLE), DataTable)
            assert table.row_count == 4

    @pytest.mark.asyncio
    async def test_auto_white_balance_locks_temperature(self, config, fake_executor):
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)

            switch = app.query_one(css(ids.WB_AUTO_SWITCH), Switch)
            assert switch.value is True
            assert switch.disabled is False
            assert app.query_one(css(ids.WB_TEMPERATURE_SLIDER), ControlSlider).disabled is True

    @pytest.mark.asyncio
    async def test_loading_does_not_write(self, config, fake_executor):
        """Reflecting device state into the switch does not echo a write."""
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert fake_executor.writes == []

    @pytest.mark.asyncio
    async def test_failed_load_leaves_controls_disabled(self, config):
        executor = FakeExecutor()
        executor.fail_listing = True
        app = WebcamCalibratorTUI(config, executor=executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert app.query_one(css(ids.ZOOM_SLIDER), ControlSlider).disabled is True
            assert app.query_one(css(ids.WB_AUTO_SWITCH), Switch).disabled is True

    @pytest.mark.asyncio
    async def test_missing_control_disables_slider(self, config):
        executor = FakeExecutor("brightness 0x1 (int) : min=0 max=255 step=1 value=128\n")
        app = WebcamCalibratorTUI(config, executor=executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert app.query_one(css(ids.BRIGHTNESS_SLIDER), ControlSlider).disabled is False
            assert app.query_one(css(ids.ZOOM_SLIDER), ControlSlider).disabled is True


class TestSliderEvents:
    """Test slider gesture handling."""

    @pytest.mark.asyncio
    async def test_arrow_keys_write_once_on_enter(self, config, fake_executor):
        """Nudging only previews; enter commits a single write."""
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)

            zoom = app.query_one(css(ids.ZOOM_SLIDER), ControlSlider)
            zoom.focus()
            await pilot.pause()
            await pilot.press("right", "right", "right")
            await settle(app, pilot)
            assert fake_executor.writes == []
            assert app.sync.is_adjusting("zoom_absolute")

            await pilot.press("enter")
            await settle(app, pilot)
            assert fake_executor.writes == ["zoom_absolute=65"]

    @pytest.mark.asyncio
    async def test_interlocked_slider_ignores_gesture(self, config, fake_executor):
        """Temperature gestures are dropped while auto white balance is on."""
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)

            slider = app.query_one(css(ids.WB_TEMPERATURE_SLIDER), ControlSlider)
            slider.action_nudge(1)
            slider.action_commit()
            await settle(app, pilot)
            assert fake_executor.writes == []

    @pytest.mark.asyncio
    async def test_write_failure_notifies(self, config, fake_executor):
        """A failing write is reported without crashing the app."""
        fake_executor.failing_controls.add("zoom_absolute")
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)

            zoom = app.query_one(css(ids.ZOOM_SLIDER), ControlSlider)
            zoom.action_jump(1.0)
            zoom.action_commit()
            await settle(app, pilot)
            assert fake_executor.writes == ["zoom_absolute=100"]
            assert app.is_running


class TestSwitchEvents:
    """Test the auto white balance switch."""

    @pytest.mark.asyncio
    async def test_switch_off_unlocks_temperature(self, config, fake_executor):
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)

            app.query_one(css(ids.WB_AUTO_SWITCH), Switch).toggle()
            await settle(app, pilot)

            assert fake_executor.writes == ["white_balance_automatic=0"]
            assert app.query_one(css(ids.WB_TEMPERATURE_SLIDER), ControlSlider).disabled is False


class TestButtons:
    """Test footer buttons and bindings."""

    @pytest.mark.asyncio
    async def test_reload_binding(self, config, fake_executor):
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.action_reload()
            await settle(app, pilot)
            assert app.sync.table.version == 2

    @pytest.mark.asyncio
    async def test_snapshot_action(self, config, fake_executor):
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.action_snapshot()
            await settle(app, pilot)
            assert fake_executor.calls[-1][0] == "ffmpeg"
            assert config.snapshot_dir.is_dir()

    @pytest.mark.asyncio
    async def test_snapshot_failure_notifies(self, config, fake_executor):
        fake_executor.fail_capture = True
        app = WebcamCalibratorTUI(config, executor=fake_executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.action_snapshot()
            await settle(app, pilot)
            assert app.is_running


class TestRangelessBoolSwitch:
    """Test the switch against bools printed without min/max/step."""

    LISTING = (
        "white_balance_automatic 0x0098090c (bool)   : default=1 value=0\n"
        "white_balance_temperature 0x0098091a (int)    : min=2800 max=6500 step=1 default=4600 value=4600\n"
    )

    @pytest.mark.asyncio
    async def test_switch_reflects_device_and_drives_interlock(self, config):
        """The switch is live after a load and toggling it locks temperature."""
        executor = FakeExecutor(self.LISTING)
        app = WebcamCalibratorTUI(config, executor=executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)

            switch = app.query_one(css(ids.WB_AUTO_SWITCH), Switch)
            temperature = app.query_one(css(ids.WB_TEMPERATURE_SLIDER), ControlSlider)
            assert switch.disabled is False
            assert switch.value is False
            assert temperature.disabled is False

            switch.toggle()
            await settle(app, pilot)

            assert executor.writes == ["white_balance_automatic=1"]
            assert temperature.disabled is True

    @pytest.mark.asyncio
    async def test_switch_live_without_auto_control_listed(self, config):
        executor = FakeExecutor("zoom_absolute 0x009a090d (int) : min=0 max=100 step=1 value=50\n")
        app = WebcamCalibratorTUI(config, executor=executor)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert app.query_one(css(ids.WB_AUTO_SWITCH), Switch).disabled is False

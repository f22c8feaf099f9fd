"""Shared fixtures for wcal tests."""

import asyncio

import pytest

from command_execution import ExecutionError
from config import CalibratorConfig
from controller.sync import ControlSynchronizer

SAMPLE_LISTING = """\

User Controls

                     brightness 0x00980900 (int)    : min=-64 max=64 step=1 default=0 value=0
                       contrast 0x00980901 (int)    : min=0 max=95 step=1 default=0 value=0
        white_balance_automatic 0x0098090c (bool)   : default=1 value=1
           power_line_frequency 0x00980918 (menu)   : min=0 max=2 default=1 value=1 (50 Hz)
      white_balance_temperature 0x0098091a (int)    : min=2800 max=6500 step=1 default=4600 value=4600 flags=inactive

Camera Controls

                  zoom_absolute 0x009a090d (int)    : min=0 max=100 step=1 default=0 value=50
"""

SAMPLE_MENU_LISTING = """\

User Controls

                     brightness 0x00980900 (int)    : min=-64 max=64 step=1 default=0 value=0
           power_line_frequency 0x00980918 (menu)   : min=0 max=2 default=1 value=1 (50 Hz)
				0: Disabled
				1: 50 Hz
				2: 60 Hz
                  exposure_auto 0x009a0901 (menu)   : min=0 max=3 step=1 default=3 value=3 (Aperture Priority Mode)
				1: Manual Mode
				3: Aperture Priority Mode
                  zoom_absolute 0x009a090d (int)    : min=0 max=100 step=1 default=0 value=50
"""


class FakeExecutor:
    """CommandExecutor double that records argv and replays canned output.

    ``listing`` is returned for -l/-L. Writes to controls named in
    ``failing_controls`` raise ExecutionError. Setting ``listing_gate`` or
    ``write_gate`` to an asyncio.Event holds those commands until it is set.
    """

    def __init__(self, listing: str = SAMPLE_LISTING) -> None:
        self.listing = listing
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []
        self.fail_listing = False
        self.failing_controls: set[str] = set()
        self.fail_capture = False
        self.listing_gate: asyncio.Event | None = None
        self.write_gate: asyncio.Event | None = None

    async def execute(self, argv, timeout=None):
        argv = list(argv)
        self.calls.append(argv)
        self.timeouts.append(timeout)

        if "-l" in argv or "-L" in argv:
            listing = self.listing
            if self.listing_gate is not None:
                await self.listing_gate.wait()
            if self.fail_listing:
                raise ExecutionError(argv, 1, f"Cannot open device {argv[2]}, exiting.")
            return listing

        if "-c" in argv:
            name = argv[argv.index("-c") + 1].split("=", 1)[0]
            if self.write_gate is not None:
                await self.write_gate.wait()
            if name in self.failing_controls:
                raise ExecutionError(argv, 255, "VIDIOC_S_EXT_CTRLS: failed: Invalid argument")
            return ""

        if self.fail_capture:
            raise ExecutionError(argv, 1, f"{argv[-1]}: Device or resource busy")
        return ""

    @property
    def writes(self) -> list[str]:
        """The NAME=VALUE argument of every set command, in call order."""
        return [argv[argv.index("-c") + 1] for argv in self.calls if "-c" in argv]


@pytest.fixture
def fake_executor():
    """FakeExecutor serving the sample listing."""
    return FakeExecutor()


@pytest.fixture
def sync(fake_executor):
    """ControlSynchronizer for /dev/video0 backed by the fake executor."""
    return ControlSynchronizer("/dev/video0", fake_executor)


@pytest.fixture
def config(tmp_path):
    """Default config with snapshots going to a temporary directory."""
    return CalibratorConfig(snapshot_dir=tmp_path / "snapshots")

"""Controller layer: mediates between UI widgets and the camera controls.

This package contains:
- sync: ControlSynchronizer, the control table and every device read/write
- field_mappings: which widget drives which control
- Event handler mixins for the TUI
"""

from controller.sync import (
    DEFAULT_INTERLOCKS,
    ControlSynchronizer,
    Interlock,
    SyncEvent,
)
from controller.field_mappings import SLIDER_MAPPINGS, SWITCH_MAPPINGS, SliderMapping, SwitchMapping
from controller.controls import ControlEventsMixin
from controller.snapshot import SnapshotEventsMixin

__all__ = [
    # Sync
    "ControlSynchronizer",
    "DEFAULT_INTERLOCKS",
    "Interlock",
    "SyncEvent",
    # Mappings
    "SLIDER_MAPPINGS",
    "SWITCH_MAPPINGS",
    "SliderMapping",
    "SwitchMapping",
    # Event mixins
    "ControlEventsMixin",
    "SnapshotEventsMixin",
]

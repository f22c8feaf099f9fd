"""Widget ID constants for the TUI.

Using constants prevents typos and makes refactoring easier.
"""


def css(widget_id: str) -> str:
    """Return a CSS selector for a widget ID.

    Usage:
        from ui.ids import css, STATUS_BAR
        self.query_one(css(STATUS_BAR), Static)
    """
    return f"#{widget_id}"


def value_label(widget_id: str) -> str:
    """ID of the value readout that sits next to a slider."""
    return f"{widget_id}-value"


# Container IDs
HEADER_CONTAINER = "header-container"
HEADER_TITLE = "header-title"
MAIN_TABS = "main-tabs"
CONTROLS_TAB = "controls-tab"
DEVICE_TAB = "device-tab"
FOOTER_BUTTONS = "footer-buttons"
STATUS_BAR = "status-bar"

# Controls tab IDs
CONTROLS_TAB_CONTENT = "controls-tab-content"
BRIGHTNESS_SLIDER = "brightness-slider"
WB_AUTO_SWITCH = "wb-auto-switch"
WB_TEMPERATURE_SLIDER = "wb-temperature-slider"
ZOOM_SLIDER = "zoom-slider"

# Device tab IDs
DEVICE_TAB_CONTENT = "device-tab-content"
DEVICE_PATH = "device-path"
CONTROL_TABLE = "control-table"

# Footer buttons
RELOAD_BTN = "reload-btn"
SNAPSHOT_BTN = "snapshot-btn"
QUIT_BTN = "quit-btn"

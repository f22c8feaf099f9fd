"""Main TUI application for wcal."""

import logging
import os
from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widgets import (
    Button,
    Label,
    Static,
    Switch,
    TabbedContent,
    TabPane,
)

from command_execution import CommandExecutor, SubprocessExecutor
from config import CalibratorConfig
from controller import (
    SLIDER_MAPPINGS,
    SWITCH_MAPPINGS,
    ControlEventsMixin,
    ControlSynchronizer,
    SnapshotEventsMixin,
)
from ui import ControlSlider, compose_controls_tab, compose_device_tab
from ui.ids import css
import ui.ids as ids


def _get_log_path() -> Path:
    """Get the log file path using XDG Base Directory spec."""
    xdg_state = os.environ.get("XDG_STATE_HOME", str(Path.home() / ".local" / "state"))
    log_dir = Path(xdg_state) / "wcal"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "wcal.log"


def setup_logging() -> None:
    """Send all logging to the state directory; the terminal belongs to the TUI."""
    logging.basicConfig(
        filename=str(_get_log_path()),
        level=logging.DEBUG,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


log = logging.getLogger(__name__)

APP_CSS = (Path(__file__).parent / "ui" / "styles.css").read_text()


class WebcamCalibratorTUI(
    ControlEventsMixin,
    SnapshotEventsMixin,
    App,
):
    """TUI for calibrating a V4L2 webcam."""

    TITLE = "Webcam Calibrator"
    ENABLE_COMMAND_PALETTE = False
    CSS = APP_CSS

    BINDINGS = [
        Binding("r", "reload", "Reload", show=True),
        Binding("s", "snapshot", "Snapshot", show=True),
        Binding("q", "quit", "Quit", show=True),
        Binding("escape", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        config: CalibratorConfig | None = None,
        executor: CommandExecutor | None = None,
        version: str = "0.0",
    ) -> None:
        super().__init__()
        self.config = config if config is not None else CalibratorConfig()
        self.executor = executor if executor is not None else SubprocessExecutor(self.config.timeout)
        self.version = version
        self.sync = ControlSynchronizer(
            self.config.device,
            self.executor,
            tool=self.config.v4l2_ctl,
            timeout=self.config.timeout,
        )
        self._unsubscribe = self.sync.subscribe(self.on_sync_event)

    def compose(self) -> ComposeResult:
        log.info(f"compose() called for {self.config.device}")

        yield Horizontal(
            Label(f"wcal {self.version} - {self.config.device}", id="header-title"),
            id="header-container",
        )

        with TabbedContent(id="main-tabs"):
            with TabPane("Controls", id="controls-tab"):
                yield from compose_controls_tab(SLIDER_MAPPINGS, SWITCH_MAPPINGS)

            with TabPane("Device", id="device-tab"):
                yield from compose_device_tab(self.config.device)

        yield Horizontal(
            Static("", id="status-bar"),
            Button("Reload [r]", id="reload-btn", variant="primary"),
            Button("Snapshot [s]", id="snapshot-btn", variant="default"),
            Button("Quit [q]", id="quit-btn", variant="error"),
            id="footer-buttons",
        )

    # =========================================================================
    # Status
    # =========================================================================

    def _set_status(self, message: str) -> None:
        """Set status bar message."""
        try:
            status = self.query_one(css(ids.STATUS_BAR), Static)
            status.update(message)
        except NoMatches:
            pass

    # =========================================================================
    # Mixin Handler Forwarding
    # =========================================================================
    # Textual's @on decorator only registers handlers defined on the class itself,
    # not on mixins. These forwarding handlers ensure events are routed to mixins.

    @on(ControlSlider.AdjustStarted)
    def _on_adjust_started(self, event: ControlSlider.AdjustStarted) -> None:
        """Forward to mixin handler."""
        self.on_slider_adjust_started(event)

    @on(ControlSlider.AdjustChanged)
    def _on_adjust_changed(self, event: ControlSlider.AdjustChanged) -> None:
        """Forward to mixin handler."""
        self.on_slider_adjust_changed(event)

    @on(ControlSlider.AdjustCommitted)
    def _on_adjust_committed(self, event: ControlSlider.AdjustCommitted) -> None:
        """Forward to mixin handler."""
        self.on_slider_adjust_committed(event)

    @on(Switch.Changed)
    def _on_switch_changed(self, event: Switch.Changed) -> None:
        """Forward to mixin handler."""
        self.on_control_switch_changed(event)

    @on(Button.Pressed, css(ids.RELOAD_BTN))
    def _on_reload_btn(self, event: Button.Pressed) -> None:
        self.action_reload()

    @on(Button.Pressed, css(ids.SNAPSHOT_BTN))
    def _on_snapshot_btn(self, event: Button.Pressed) -> None:
        self.action_snapshot()

    @on(Button.Pressed, css(ids.QUIT_BTN))
    def _on_quit_btn(self, event: Button.Pressed) -> None:
        self.exit()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def on_mount(self) -> None:
        """Load the device controls once the widgets exist."""
        self._sync_slider_sensitivity()
        self.action_reload()

    def on_unmount(self) -> None:
        self._unsubscribe()

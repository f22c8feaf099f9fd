"""UI helper functions for wcal."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from textual.css.query import NoMatches
from textual.widgets import DataTable

from ui.ids import css
import ui.ids as ids

if TYPE_CHECKING:
    from textual.app import App

    from model import ControlTable

log = logging.getLogger(__name__)


def format_position(position: float) -> str:
    return f"{position * 100:.0f}%"


def populate_control_table(app: App, table: ControlTable) -> None:
    """Refill the device tab's DataTable from a control table."""
    try:
        widget = app.query_one(css(ids.CONTROL_TABLE), DataTable)
    except NoMatches:
        log.debug("control-table not found")
        return

    widget.clear()
    for name in sorted(table):
        descriptor = table[name]
        widget.add_row(
            name,
            str(descriptor.min),
            str(descriptor.max),
            str(descriptor.step),
            str(descriptor.value),
            format_position(descriptor.position()),
            key=name,
        )

"""v4l2-ctl command lines and parsing of its control listings."""

from __future__ import annotations

import logging
import re

from model import ControlDescriptor

log = logging.getLogger(__name__)

# A control line looks like:
#   brightness 0x00980900 (int)    : min=-64 max=64 step=1 default=0 value=0
# Only the leading name and the min/max/step/value tokens matter; anything
# between or after them (type, default=, flags=) is ignored.
CONTROL_LINE = re.compile(
    r"^(?P<name>\w+)\s"
    r".*?\bmin=(?P<min>\S+)"
    r".*?\bmax=(?P<max>\S+)"
    r".*?\bstep=(?P<step>\S+)"
    r".*?\bvalue=(?P<value>\S+)"
)

# A bool control, printed without a range:
#   white_balance_automatic 0x0098090c (bool)   : default=1 value=1
BOOL_LINE = re.compile(r"^(?P<name>\w+)\s+0x[0-9a-fA-F]+\s+\(bool\).*?\bvalue=(?P<value>\S+)")

# Header of a control in a -L listing and the menu entries printed under it
MENU_HEADER = re.compile(r"^(?P<name>\w+)\s+0x[0-9a-fA-F]+\s+\((?P<type>[a-z_ ]+)\)")
MENU_ITEM = re.compile(r"^(?P<index>-?\d+):\s+(?P<label>.+)$")

# V4L2 control values are 64-bit at most
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def list_controls_argv(tool: str, device: str, menus: bool = False) -> list[str]:
    """Build the control listing command (-L also prints menu entries)."""
    return [tool, "-d", device, "-L" if menus else "-l"]


def set_control_argv(tool: str, device: str, name: str, value: int) -> list[str]:
    """Build the set-control command."""
    return [tool, "-d", device, "-c", f"{name}={value}"]


def _parse_int(token: str) -> int:
    """Parse a signed decimal integer token, rejecting out-of-range values."""
    if not re.fullmatch(r"[-+]?\d+", token):
        raise ValueError(f"not an integer: {token!r}")
    number = int(token)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(f"integer out of range: {token}")
    return number


def parse_control_line(line: str) -> ControlDescriptor | None:
    """Parse one listing line, or return None if it is not a numeric control."""
    match = CONTROL_LINE.match(line.strip())
    if match is None:
        return None
    try:
        return ControlDescriptor(
            name=match["name"],
            min=_parse_int(match["min"]),
            max=_parse_int(match["max"]),
            step=_parse_int(match["step"]),
            value=_parse_int(match["value"]),
        )
    except ValueError as e:
        log.debug(f"Skipping control line {line.strip()!r}: {e}")
        return None


def parse_controls(text: str) -> dict[str, ControlDescriptor]:
    """Parse a v4l2-ctl control listing into a name -> descriptor table.

    Lines that are not numeric controls (headers, menu entries, bool or
    string controls without a range) are skipped. A name that appears twice
    keeps its last occurrence.
    """
    controls: dict[str, ControlDescriptor] = {}
    for line in text.splitlines():
        descriptor = parse_control_line(line)
        if descriptor is not None:
            controls[descriptor.name] = descriptor
    return controls


def parse_boolean_controls(text: str) -> dict[str, bool]:
    """Read the on/off state of every (bool) control in a listing.

    v4l2-ctl usually prints bools without min/max/step, so parse_controls()
    skips them; their state still drives interlocks.
    """
    states: dict[str, bool] = {}
    for line in text.splitlines():
        match = BOOL_LINE.match(line.strip())
        if match is None:
            continue
        try:
            states[match["name"]] = _parse_int(match["value"]) != 0
        except ValueError as e:
            log.debug(f"Skipping bool line {line.strip()!r}: {e}")
    return states


def parse_menu_items(text: str) -> dict[str, dict[int, str]]:
    """Extract menu entries from a ``v4l2-ctl -L`` listing.

    Returns:
        Mapping of menu control name to {index: label}.
    """
    menus: dict[str, dict[int, str]] = {}
    current: str | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        header = MENU_HEADER.match(line)
        if header:
            current = header["name"] if "menu" in header["type"] else None
            if current is not None:
                menus.setdefault(current, {})
            continue
        item = MENU_ITEM.match(line)
        if item and current is not None:
            menus[current][int(item["index"])] = item["label"].strip()
        else:
            current = None
    return menus

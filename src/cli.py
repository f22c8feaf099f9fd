"""Command-line interface for wcal."""

import argparse
import asyncio
import sys
from dataclasses import dataclass, field
from pathlib import Path

from app import WebcamCalibratorTUI, setup_logging
from command_execution import CommandExecutor, ExecutionError, SubprocessExecutor
from config import CalibratorConfig, ConfigError, parse_timeout
from constants import WCAL_VERSION
from controller.sync import ControlSynchronizer
from detection import check_tools, list_video_devices
from model import ControlTable
from snapshot import capture_frame
from ui.helpers import format_position
from v4l2 import list_controls_argv, parse_controls, parse_menu_items

# Marks "--snapshot" given without a path
DEFAULT_SNAPSHOT = "-"


@dataclass
class ParsedArgs:
    """Parsed command-line arguments."""

    config: CalibratorConfig
    list_controls: bool = False
    list_devices: bool = False
    assignments: list[tuple[str, int]] = field(default_factory=list)
    snapshot: Path | None = None
    take_snapshot: bool = False


def print_error_box(title: str, *lines: str) -> None:
    """Print a formatted error box to stderr.

    Args:
        title: The error title (will be prefixed with "Error: ")
        *lines: Additional lines to print in the box
    """
    print("=" * 60, file=sys.stderr)
    print(f"Error: {title}", file=sys.stderr)
    print("", file=sys.stderr)
    for line in lines:
        print(line, file=sys.stderr)
    print("=" * 60, file=sys.stderr)


def parse_assignment(text: str) -> tuple[str, int]:
    """Parse a NAME=VALUE control assignment.

    Raises:
        ConfigError: If the text is malformed or the value is not an integer.
    """
    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ConfigError(f"Invalid control assignment '{text}' (expected NAME=VALUE)")
    try:
        return name, int(raw.strip())
    except ValueError:
        raise ConfigError(f"Invalid value for {name}: '{raw}' is not an integer") from None


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for wcal CLI."""
    parser = argparse.ArgumentParser(
        prog="wcal",
        description="Webcam Calibrator - adjust V4L2 camera controls from the terminal.",
        epilog="Without an action flag, the interactive control panel is started.",
    )
    parser.add_argument("--version", action="version", version=f"wcal {WCAL_VERSION}")

    device = parser.add_argument_group("device options")
    device.add_argument("-d", "--device", metavar="PATH", help="video device (default: /dev/video0)")
    device.add_argument("--timeout", metavar="SECONDS", help="timeout per external command")
    device.add_argument("--v4l2-ctl", metavar="PATH", dest="v4l2_ctl", help="v4l2-ctl program")
    device.add_argument("--ffmpeg", metavar="PATH", help="ffmpeg program used for snapshots")

    actions = parser.add_argument_group("actions")
    actions.add_argument("-l", "--list", action="store_true", dest="list_controls", help="print the device controls")
    actions.add_argument("--list-devices", action="store_true", help="print detected video devices")
    actions.add_argument(
        "-c", "--set", metavar="NAME=VALUE", action="append", default=[], dest="assignments",
        help="set a control to a raw value (repeatable)",
    )
    actions.add_argument(
        "--snapshot", metavar="PATH", nargs="?", const=DEFAULT_SNAPSHOT,
        help="capture one frame (default: timestamped file in the snapshot directory)",
    )
    return parser


def parse_args(argv: list[str] | None = None, environ: dict[str, str] | None = None) -> ParsedArgs:
    """Parse command line arguments into a ParsedArgs.

    Raises:
        ConfigError: If an option value is invalid.
    """
    args = create_parser().parse_args(sys.argv[1:] if argv is None else argv)

    config = CalibratorConfig.from_env(environ).with_overrides(
        device=args.device,
        timeout=parse_timeout(args.timeout) if args.timeout is not None else None,
        v4l2_ctl=args.v4l2_ctl,
        ffmpeg=args.ffmpeg,
    )

    snapshot = None
    if args.snapshot is not None and args.snapshot != DEFAULT_SNAPSHOT:
        snapshot = Path(args.snapshot).expanduser()

    return ParsedArgs(
        config=config,
        list_controls=args.list_controls,
        list_devices=args.list_devices,
        assignments=[parse_assignment(a) for a in args.assignments],
        snapshot=snapshot,
        take_snapshot=args.snapshot is not None,
    )


def format_control_table(table: ControlTable, menus: dict[str, dict[int, str]] | None = None) -> str:
    """Render a control table as aligned text, one control per line."""
    if not table:
        return "No adjustable controls reported."
    menus = menus or {}
    width = max(len(name) for name in table)
    lines = []
    for name in sorted(table):
        d = table[name]
        lines.append(
            f"{name:<{width}}  min={d.min:<6} max={d.max:<6} step={d.step:<4} "
            f"value={d.value:<6} ({format_position(d.position())})"
        )
        for index, label in sorted(menus.get(name, {}).items()):
            lines.append(f"{'':<{width}}    {index}: {label}")
    return "\n".join(lines)


async def list_controls(config: CalibratorConfig, executor: CommandExecutor) -> str:
    """Read the control listing (with menu entries) and format it."""
    output = await executor.execute(list_controls_argv(config.v4l2_ctl, config.device, menus=True))
    table = ControlTable(parse_controls(output))
    return format_control_table(table, parse_menu_items(output))


async def apply_assignments(
    config: CalibratorConfig,
    executor: CommandExecutor,
    assignments: list[tuple[str, int]],
) -> list[str]:
    """Write raw control values; returns a report line per control.

    Raises:
        ConfigError: If a control is not exposed by the device.
    """
    sync = ControlSynchronizer(config.device, executor, tool=config.v4l2_ctl, timeout=config.timeout)
    await sync.reload()
    report = []
    for name, value in assignments:
        written = await sync.set_value(name, value)
        if written is None:
            raise ConfigError(f"{config.device} has no adjustable control named '{name}'")
        note = "" if written == value else f" (clamped from {value})"
        report.append(f"{name} = {written}{note}")
    return report


async def run_actions(args: ParsedArgs, executor: CommandExecutor) -> None:
    """Run the non-interactive actions in a fixed order: set, list, snapshot."""
    if args.assignments:
        for line in await apply_assignments(args.config, executor, args.assignments):
            print(line)
    if args.list_controls:
        print(await list_controls(args.config, executor))
    if args.take_snapshot:
        path = await capture_frame(executor, args.config, args.snapshot)
        print(f"Saved snapshot: {path}")


def has_actions(args: ParsedArgs) -> bool:
    return bool(args.assignments or args.list_controls or args.take_snapshot)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    setup_logging()
    try:
        args = parse_args(argv)
    except ConfigError as e:
        print_error_box(str(e))
        sys.exit(1)

    if args.list_devices:
        devices = list_video_devices()
        for device in devices:
            print(device)
        if not devices:
            print("No video devices found.")
        sys.exit(0)

    missing = check_tools(args.config, snapshot=args.take_snapshot)
    if missing:
        print_error_box(
            f"Required program not found: {', '.join(missing)}",
            "v4l2-ctl is part of v4l-utils; snapshots also need ffmpeg.",
        )
        sys.exit(1)

    if has_actions(args):
        executor = SubprocessExecutor(args.config.timeout)
        try:
            asyncio.run(run_actions(args, executor))
        except (ExecutionError, ConfigError) as e:
            print_error_box(str(e))
            sys.exit(1)
        except OSError as e:
            print_error_box(f"Could not write snapshot: {e}")
            sys.exit(1)
        sys.exit(0)

    app = WebcamCalibratorTUI(args.config, version=WCAL_VERSION)
    app.run()


if __name__ == "__main__":
    main()

"""Shared constants for wcal."""

WCAL_VERSION = "0.2.0"

# External programs
V4L2_CTL = "v4l2-ctl"
FFMPEG = "ffmpeg"

DEFAULT_DEVICE = "/dev/video0"
DEFAULT_TIMEOUT = 5.0  # seconds per external command

# Snapshot defaults
DEFAULT_SNAPSHOT_RESOLUTION = "640x480"
DEFAULT_SNAPSHOT_FORMAT = "mjpeg"

# Control names as reported by v4l2-ctl
BRIGHTNESS = "brightness"
WHITE_BALANCE_AUTOMATIC = "white_balance_automatic"
WHITE_BALANCE_TEMPERATURE = "white_balance_temperature"
ZOOM_ABSOLUTE = "zoom_absolute"

# Exit code reported when a program cannot be started (matches the shell)
EXIT_NOT_FOUND = 127

"""Camera control model: descriptors and the versioned control table."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class ControlDescriptor:
    """A numeric control exposed by the device.

    ``step`` is informational; writes are not snapped to it.
    """

    name: str
    min: int
    max: int
    step: int
    value: int

    @property
    def span(self) -> int:
        return self.max - self.min

    def position(self) -> float:
        """Current value as a fraction of the range (0.0 for a degenerate range)."""
        if self.span == 0:
            return 0.0
        return (self.value - self.min) / self.span

    def value_at(self, position: float) -> int:
        """Raw device value for a normalized position, clamped into [min, max].

        Infinite positions land on the range ends; NaN maps to min.
        """
        position = 0.0 if math.isnan(position) else clamp(position, 0.0, 1.0)
        # Half-up rounding, same as the slider arithmetic in the desktop panel
        raw = math.floor(position * self.span + 0.5) + self.min
        return clamp(raw, self.min, self.max)

    def __str__(self) -> str:
        return f"{self.name} [{self.min}..{self.max}] step={self.step} value={self.value}"


def clamp(value: int, low: int, high: int) -> int:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


class ControlTable(Mapping[str, ControlDescriptor]):
    """Immutable mapping of control name to descriptor.

    Each reload produces a new table with a higher version; tables are never
    edited in place.
    """

    def __init__(self, controls: Mapping[str, ControlDescriptor] | None = None, version: int = 0) -> None:
        self._controls = dict(controls or {})
        self.version = version

    def __getitem__(self, name: str) -> ControlDescriptor:
        return self._controls[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._controls)

    def __len__(self) -> int:
        return len(self._controls)

    def __repr__(self) -> str:
        return f"ControlTable(version={self.version}, controls={sorted(self._controls)})"

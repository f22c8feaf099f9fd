"""ControlSynchronizer: device control table ↔ UI position synchronization."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable

from command_execution import ExecutionError
from constants import V4L2_CTL, WHITE_BALANCE_AUTOMATIC, WHITE_BALANCE_TEMPERATURE
from model import ControlTable, clamp
from v4l2 import list_controls_argv, parse_boolean_controls, parse_controls, set_control_argv

if TYPE_CHECKING:
    from command_execution import CommandExecutor

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interlock:
    """A boolean auto control that locks a dependent numeric control while on."""

    auto_control: str
    dependent_control: str


DEFAULT_INTERLOCKS = (Interlock(WHITE_BALANCE_AUTOMATIC, WHITE_BALANCE_TEMPERATURE),)


# SyncEvent kinds
RELOADED = "reloaded"
INTERLOCK_CHANGED = "interlock-changed"
ADJUSTING = "adjusting"
WRITTEN = "written"
FAILED = "failed"


@dataclass(frozen=True)
class SyncEvent:
    """Notification sent to subscribers when synchronizer state changes."""

    kind: str
    control: str | None = None
    value: int | None = None
    error: ExecutionError | None = None


Listener = Callable[[SyncEvent], None]


class ControlSynchronizer:
    """Owns the control table and mediates every read and write to the device.

    Reads go through reload(), which replaces the table wholesale. Writes go
    through commit() and set_boolean(); they never touch the cached table, so
    the table only changes when the device is listed again.

    The two-phase adjust contract keeps continuous gestures off the device:

        sync.begin_adjust("zoom_absolute")
        sync.update_adjust("zoom_absolute", 0.4)   # preview only
        sync.update_adjust("zoom_absolute", 0.6)   # preview only
        await sync.commit_adjust("zoom_absolute")  # one write: value for 0.6

    Writes to the same control are serialized. A queued write that is
    superseded by a newer request for that control before it starts is
    dropped, so the device sees the last requested value.
    """

    def __init__(
        self,
        device: str,
        executor: CommandExecutor,
        tool: str = V4L2_CTL,
        timeout: float | None = None,
        interlocks: Iterable[Interlock] = DEFAULT_INTERLOCKS,
    ) -> None:
        self.device = device
        self.executor = executor
        self.tool = tool
        self.timeout = timeout
        self.interlocks = tuple(interlocks)
        self._table = ControlTable()
        self._booleans: dict[str, bool] = {}
        self._listeners: list[Listener] = []

        # Auto control name -> auto mode on; survives reloads that started
        # before the latest toggle
        self._auto_state: dict[str, bool] = {}
        self._interlock_generation = 0

        self._reloads_started = 0
        self._reload_applied = 0

        self._write_locks: dict[str, asyncio.Lock] = {}
        self._write_requests: dict[str, int] = {}

        # Control -> last transient position (None until the first update)
        self._adjusting: dict[str, float | None] = {}

    # =========================================================================
    # Subscription
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, event: SyncEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # =========================================================================
    # Reading
    # =========================================================================

    @property
    def table(self) -> ControlTable:
        return self._table

    async def reload(self) -> ControlTable:
        """List the device controls and replace the table.

        Raises:
            ExecutionError: If the listing fails; the previous table is kept.
        """
        self._reloads_started += 1
        ticket = self._reloads_started
        generation = self._interlock_generation

        argv = list_controls_argv(self.tool, self.device)
        try:
            output = await self.executor.execute(argv, timeout=self.timeout)
        except ExecutionError as e:
            log.warning(f"Failed to load controls from {self.device}: {e}")
            self._publish(SyncEvent(FAILED, error=e))
            raise

        if ticket < self._reload_applied:
            # A reload started later has already landed
            log.debug(f"Discarding stale control listing #{ticket}")
            return self._table

        self._reload_applied = ticket
        self._table = ControlTable(parse_controls(output), version=self._table.version + 1)
        self._booleans = parse_boolean_controls(output)
        log.info(f"Loaded {len(self._table)} controls from {self.device}")

        if generation == self._interlock_generation:
            self._sync_interlocks_from_listing()
        self._publish(SyncEvent(RELOADED))
        return self._table

    def _sync_interlocks_from_listing(self) -> None:
        """Derive auto state for every interlock from the last listing."""
        for interlock in self.interlocks:
            auto = self._booleans.get(interlock.auto_control)
            descriptor = self._table.get(interlock.auto_control)
            if auto is None and descriptor is not None:
                auto = descriptor.value != 0
            if auto is None:
                self._auto_state.pop(interlock.auto_control, None)
            else:
                self._auto_state[interlock.auto_control] = auto

    def derive_position(self, name: str) -> float | None:
        """Normalized [0, 1] position of a control, or None if unavailable."""
        descriptor = self._table.get(name)
        return None if descriptor is None else descriptor.position()

    def derive_value(self, name: str, position: float) -> int | None:
        """Raw value for a normalized position, clamped into the control range."""
        descriptor = self._table.get(name)
        return None if descriptor is None else descriptor.value_at(position)

    def is_available(self, name: str) -> bool:
        return name in self._table

    def is_auto(self, name: str) -> bool | None:
        """Auto mode of an interlock's auto control, or None if unknown."""
        return self._auto_state.get(name)

    def is_enabled(self, name: str) -> bool:
        """Whether the UI may edit a control.

        False when the device does not expose it or when an interlocked auto
        control is on.
        """
        if name not in self._table:
            return False
        return not any(
            self._auto_state.get(interlock.auto_control, False)
            for interlock in self.interlocks
            if interlock.dependent_control == name
        )

    # =========================================================================
    # Writing
    # =========================================================================

    async def commit(self, name: str, position: float) -> int | None:
        """Write the value for a normalized position.

        Returns:
            The value written, or None if the device has no such control or a
            newer request for it superseded this one.

        Raises:
            ExecutionError: If the set command fails.
        """
        value = self.derive_value(name, position)
        if value is None:
            log.debug(f"Commit ignored, control not available: {name}")
            return None
        return value if await self._write(name, value) else None

    async def set_value(self, name: str, value: int) -> int | None:
        """Write a raw value, clamped into the control range.

        Returns:
            The value written, or None if the device has no such control or a
            newer request for it superseded this one.
        """
        descriptor = self._table.get(name)
        if descriptor is None:
            return None
        value = clamp(value, descriptor.min, descriptor.max)
        return value if await self._write(name, value) else None

    async def set_boolean(self, name: str, value: bool) -> None:
        """Write 1/0 to a boolean control, updating any interlock it drives.

        The interlock follows the request immediately; a failed write is
        reported but not rolled back.

        Raises:
            ExecutionError: If the set command fails.
        """
        for interlock in self.interlocks:
            if interlock.auto_control == name:
                self._auto_state[name] = value
                self._interlock_generation += 1
                self._publish(SyncEvent(INTERLOCK_CHANGED, control=interlock.dependent_control))
        await self._write(name, 1 if value else 0)

    async def _write(self, name: str, value: int) -> bool:
        """Serialize writes per control; returns False if superseded."""
        request = self._write_requests.get(name, 0) + 1
        self._write_requests[name] = request
        lock = self._write_locks.setdefault(name, asyncio.Lock())

        async with lock:
            if self._write_requests[name] != request:
                log.debug(f"Skipping superseded write {name}={value}")
                return False
            argv = set_control_argv(self.tool, self.device, name, value)
            try:
                await self.executor.execute(argv, timeout=self.timeout)
            except ExecutionError as e:
                log.warning(f"Failed to set {name}={value}: {e}")
                self._publish(SyncEvent(FAILED, control=name, value=value, error=e))
                raise

        log.debug(f"Set {name}={value}")
        self._publish(SyncEvent(WRITTEN, control=name, value=value))
        return True

    # =========================================================================
    # Two-phase adjustment
    # =========================================================================

    def begin_adjust(self, name: str) -> bool:
        """Start a continuous adjustment. Returns False if the control is not editable."""
        if not self.is_enabled(name):
            return False
        self._adjusting[name] = None
        return True

    def update_adjust(self, name: str, position: float) -> int | None:
        """Record an intermediate position and return the value it would write.

        Never writes to the device.
        """
        if name not in self._adjusting and not self.begin_adjust(name):
            return None
        self._adjusting[name] = position
        value = self.derive_value(name, position)
        self._publish(SyncEvent(ADJUSTING, control=name, value=value))
        return value

    async def commit_adjust(self, name: str) -> int | None:
        """Finish an adjustment with a single write of the last position.

        Returns:
            The value written, or None when there was nothing to commit or a
            newer write to the control superseded it.
        """
        position = self._adjusting.pop(name, None)
        if position is None or not self.is_enabled(name):
            return None
        return await self.commit(name, position)

    def cancel_adjust(self, name: str) -> None:
        """Drop an adjustment without writing."""
        self._adjusting.pop(name, None)

    def is_adjusting(self, name: str) -> bool:
        return name in self._adjusting

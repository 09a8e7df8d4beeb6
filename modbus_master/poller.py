"""Async register polling scheduler.

The poller owns a list of poll groups and a single cooperative polling
task. Each tick it snapshots the groups, decides which are due, reads
them one wire request at a time through the injected read function and
reports results as PollingEvents.

Lifecycle:
    STOPPED -> start(read_fn) -> RUNNING -> stop() -> STOPPING -> STOPPED

``StartedEvent`` is always the first event and ``StoppedEvent`` the last.
``stop()`` only sets a flag; the tick in progress completes before the
loop exits.
"""

import asyncio
import logging
import threading
import time
from enum import Enum, auto
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .application.services import LastReadingStore
from .application.use_cases import PollGroupUseCase
from .const import FLOAT_CHANGE_TOLERANCE, MAX_GAP_SIZE, TICK_INTERVAL
from .domain.entities import PollGroup, RegisterDefinition, RegisterReading
from .domain.exceptions import ConfigurationError
from .domain.interfaces import IEventSink, ReadFunction
from .domain.services import ChangeDetector, ReadOptimizer
from .domain.value_objects import PollingEvent, StartedEvent, StoppedEvent
from .infrastructure.events import QueueEventSink

_LOGGER = logging.getLogger(__name__)


class PollerState(Enum):
    """Polling loop states."""

    STOPPED = auto()
    RUNNING = auto()
    STOPPING = auto()


class ModbusPoller:
    """Polls register groups at independent cadences.

    Configuration calls (add/remove groups and registers, enable/disable)
    are safe from any thread while the loop runs; they take effect on the
    next tick.

    Attributes:
        event_sink: Destination of all PollingEvents

    Example:
        >>> poller = ModbusPoller()
        >>> group = PollGroup("inverter", slave_id=1, interval=2.0)
        >>> group = group.add_register(create_from_template("voltage", 0x0100, "battery_voltage"))
        >>> poller.add_group(group)
        >>> task = asyncio.create_task(poller.start(reader))
        >>> event = await poller.event_sink.queue.get()
        >>> poller.stop()
        >>> await task
    """

    def __init__(
        self,
        event_sink: Optional[IEventSink] = None,
        tick_interval: float = TICK_INTERVAL,
        change_tolerance: float = FLOAT_CHANGE_TOLERANCE,
        max_gap_size: int = MAX_GAP_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize poller.

        Args:
            event_sink: Event destination (default: QueueEventSink)
            tick_interval: Seconds slept between due-checks
            change_tolerance: Absolute tolerance for float change detection
            max_gap_size: Largest address gap bridged by one read
            clock: Monotonic time source in seconds
        """
        self._event_sink = event_sink if event_sink is not None else QueueEventSink()
        self._tick_interval = tick_interval
        self._clock = clock

        self._groups_lock = threading.RLock()
        self._groups: List[PollGroup] = []
        self._last_group_poll: Dict[str, float] = {}
        self._last_register_poll: Dict[Tuple[str, str], float] = {}

        self._state_lock = threading.RLock()
        self._state = PollerState.STOPPED
        self._stop_requested = False

        self._store = LastReadingStore()
        self._poll_group = PollGroupUseCase(
            store=self._store,
            event_sink=self._event_sink,
            change_detector=ChangeDetector(change_tolerance),
            optimizer=ReadOptimizer(max_gap_size),
        )

    # Configuration

    @property
    def event_sink(self) -> IEventSink:
        return self._event_sink

    def add_group(self, group: PollGroup) -> None:
        """Register a poll group.

        Raises:
            ConfigurationError: If a group with the same name exists
        """
        with self._groups_lock:
            if self._find_group(group.name) is not None:
                raise ConfigurationError(f"Duplicate poll group name: {group.name}")
            self._groups.append(group)
        _LOGGER.debug(
            "Added poll group %s (slave %d, %d registers, every %.3fs)",
            group.name,
            group.slave_id,
            len(group.registers),
            group.interval,
        )

    def remove_group(self, name: str) -> bool:
        """Remove a poll group. Returns True if it existed."""
        with self._groups_lock:
            group = self._find_group(name)
            if group is None:
                return False
            self._groups.remove(group)
            self._last_group_poll.pop(name, None)
            for key in [key for key in self._last_register_poll if key[0] == name]:
                del self._last_register_poll[key]
            self._forget_readings(definition.name for definition in group.registers)
        _LOGGER.debug("Removed poll group %s", name)
        return True

    def set_group_enabled(self, name: str, enabled: bool) -> bool:
        """Enable or disable a group. Returns False if it does not exist."""
        with self._groups_lock:
            group = self._find_group(name)
            if group is None:
                return False
            group.enabled = enabled
        return True

    def add_register(self, group_name: str, definition: RegisterDefinition) -> None:
        """Add a definition to an existing group.

        Raises:
            ConfigurationError: If the group does not exist or already has a
                register with the same name
        """
        with self._groups_lock:
            group = self._find_group(group_name)
            if group is None:
                raise ConfigurationError(f"Unknown poll group: {group_name}")
            group.add_register(definition)

    def remove_register(self, group_name: str, register_name: str) -> bool:
        with self._groups_lock:
            group = self._find_group(group_name)
            if group is None:
                return False
            self._last_register_poll.pop((group_name, register_name), None)
            if not group.remove_register(register_name):
                return False
            self._forget_readings([register_name])
            return True

    def groups(self) -> List[PollGroup]:
        """Snapshots of all groups, in insertion order."""
        with self._groups_lock:
            return [group.snapshot() for group in self._groups]

    def get_group(self, name: str) -> Optional[PollGroup]:
        with self._groups_lock:
            group = self._find_group(name)
            return group.snapshot() if group is not None else None

    def _find_group(self, name: str) -> Optional[PollGroup]:
        for group in self._groups:
            if group.name == name:
                return group
        return None

    def _forget_readings(self, names: Iterable[str]) -> None:
        # Names still polled by another group keep their reading
        in_use = {
            definition.name for group in self._groups for definition in group.registers
        }
        self._store.discard(name for name in names if name not in in_use)

    # Read API

    def get_readings(self) -> Dict[str, RegisterReading]:
        """Latest reading per register name."""
        return self._store.snapshot()

    def get_reading(self, name: str) -> Optional[RegisterReading]:
        return self._store.get(name)

    @property
    def state(self) -> PollerState:
        with self._state_lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is not PollerState.STOPPED

    # Lifecycle

    async def start(self, read_fn: ReadFunction) -> None:
        """Run the polling loop until ``stop()`` is called.

        Args:
            read_fn: Async ``read(slave_id, register_type, start, count)``
                returning exactly ``count`` words, e.g. a FrameRegisterReader

        Raises:
            RuntimeError: If the loop is already running
        """
        with self._state_lock:
            if self._state is not PollerState.STOPPED:
                raise RuntimeError("Poller is already running")
            self._state = PollerState.RUNNING
            self._stop_requested = False

        self._publish(StartedEvent())
        _LOGGER.info("Polling started with %d groups", len(self.groups()))
        try:
            while not self._stop_requested:
                await self._tick(read_fn)
                await asyncio.sleep(self._tick_interval)
        finally:
            with self._state_lock:
                self._state = PollerState.STOPPED
                self._stop_requested = False
            self._publish(StoppedEvent())
            _LOGGER.info("Polling stopped")

    def stop(self) -> None:
        """Ask the loop to exit at the start of its next tick."""
        with self._state_lock:
            if self._state is PollerState.RUNNING:
                self._state = PollerState.STOPPING
                self._stop_requested = True

    async def _tick(self, read_fn: ReadFunction) -> None:
        with self._groups_lock:
            snapshot = [group.snapshot() for group in self._groups]

        now = self._clock()
        for group in snapshot:
            if not group.enabled:
                continue
            due = self._due_registers(group, now)
            if due:
                await self._poll_group.execute(group, read_fn, due)

    def _due_registers(self, group: PollGroup, now: float) -> List[RegisterDefinition]:
        """Due definitions of a group, updating last-poll times.

        Registers without an interval override follow the group's cadence;
        overrides are tracked per register.
        """
        with self._groups_lock:
            last = self._last_group_poll.get(group.name)
            group_due = last is None or now - last >= group.interval
            if group_due:
                self._last_group_poll[group.name] = now

            due = []
            for definition in group.registers:
                if definition.poll_interval is None:
                    if group_due:
                        due.append(definition)
                    continue
                key = (group.name, definition.name)
                last_register = self._last_register_poll.get(key)
                if last_register is None or now - last_register >= definition.poll_interval:
                    self._last_register_poll[key] = now
                    due.append(definition)
        return due

    def _publish(self, event: PollingEvent) -> None:
        if not self._event_sink.publish(event):
            _LOGGER.debug("Dropped %s", type(event).__name__)

"""Last-known readings, shared by the polling loop and the read API."""

import threading
from typing import Dict, Iterable, Optional

from ...domain.entities import RegisterReading
from ...domain.value_objects import ModbusValue


class LastReadingStore:
    """Thread-safe table of the latest reading per register name.

    Every reading, erroring or not, replaces the previous one for its name.
    The last successfully decoded value is tracked separately so that a
    failed read does not reset change detection.

    The lock is only held for dictionary operations, never across I/O.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._readings: Dict[str, RegisterReading] = {}
        self._values: Dict[str, ModbusValue] = {}

    def get(self, name: str) -> Optional[RegisterReading]:
        with self._lock:
            return self._readings.get(name)

    def previous_value(self, name: str) -> Optional[ModbusValue]:
        """Last successfully decoded value for ``name``, if any."""
        with self._lock:
            return self._values.get(name)

    def snapshot(self) -> Dict[str, RegisterReading]:
        """Copy of the whole table."""
        with self._lock:
            return dict(self._readings)

    def update(self, readings: Iterable[RegisterReading]) -> None:
        with self._lock:
            for reading in readings:
                self._readings[reading.name] = reading
                if reading.value is not None:
                    self._values[reading.name] = reading.value

    def discard(self, names: Iterable[str]) -> None:
        """Forget readings, e.g. after their group was removed."""
        with self._lock:
            for name in names:
                self._readings.pop(name, None)
                self._values.pop(name, None)

    def clear(self) -> None:
        with self._lock:
            self._readings.clear()
            self._values.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)

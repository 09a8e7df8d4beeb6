"""Change detection for decoded register values."""

from typing import Optional

from ...const import FLOAT_CHANGE_TOLERANCE
from ..value_objects import ModbusValue, ValueKind


class ChangeDetector:
    """Decides whether a new reading differs from the last known value.

    Floats are compared with an absolute tolerance; integers, bit fields and
    strings must match exactly. A register seen for the first time counts as
    changed.

    Example:
        >>> detector = ChangeDetector()
        >>> detector.has_changed(ModbusValue.f64(10.0), ModbusValue.f64(10.00001))
        False
        >>> detector.has_changed(None, ModbusValue.u64(1))
        True
    """

    def __init__(self, tolerance: float = FLOAT_CHANGE_TOLERANCE):
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        self._tolerance = tolerance

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def has_changed(
        self, previous: Optional[ModbusValue], current: Optional[ModbusValue]
    ) -> bool:
        if current is None:
            return False
        if previous is None:
            return True
        if previous.kind is not current.kind:
            return True
        if current.kind is ValueKind.F64:
            return abs(current.value - previous.value) > self._tolerance
        return current.value != previous.value

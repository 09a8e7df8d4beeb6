"""RegisterReading entity: the outcome of polling one register once."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ..value_objects import ModbusValue
from .register_definition import RegisterDefinition


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegisterReading:
    """Result of one poll of one register.

    Either ``value`` is set (successful read) or ``error`` is set (the wire
    read covering this register failed).

    Attributes:
        definition: Register that was read
        raw_values: Raw 16-bit words (empty on error)
        value: Decoded, unscaled value
        scaled_value: ``value * scale + offset`` for numeric values
        timestamp: When the reading was taken (UTC)
        error: Transport error text if the read failed
        changed: True if change detection flagged this reading
    """

    definition: RegisterDefinition
    raw_values: List[int] = field(default_factory=list)
    value: Optional[ModbusValue] = None
    scaled_value: Optional[float] = None
    timestamp: datetime = field(default_factory=_utcnow)
    error: Optional[str] = None
    changed: bool = False

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def failed(cls, definition: RegisterDefinition, error: str) -> "RegisterReading":
        """Create an erroring reading for a register whose read failed."""
        return cls(definition=definition, error=error)

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.name}: error: {self.error}"
        if self.scaled_value is not None:
            return f"{self.name}: {self.scaled_value:.6f} {self.definition.unit}".rstrip()
        return f"{self.name}: {self.value}"

"""ModbusValue value object.

A decoded, unscaled register value. The kind tag records which
conversion produced it so that change detection can compare floats with
a tolerance and everything else exactly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ValueKind(Enum):
    """Kinds of decoded register values."""

    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    BINARY = "binary"
    STRING = "string"


@dataclass(frozen=True)
class ModbusValue:
    """Immutable decoded register value.

    Attributes:
        kind: Which variant this value is
        value: Python payload (int for U64/I64/BINARY, float for F64,
            str for STRING)

    Example:
        >>> ModbusValue.u64(0x00010002) == ModbusValue(ValueKind.U64, 65538)
        True
        >>> str(ModbusValue.binary(5))
        '0000000000000101'
    """

    kind: ValueKind
    value: Union[int, float, str]

    @classmethod
    def u64(cls, value: int) -> "ModbusValue":
        """Unsigned integer value."""
        return cls(ValueKind.U64, value)

    @classmethod
    def i64(cls, value: int) -> "ModbusValue":
        """Signed integer value."""
        return cls(ValueKind.I64, value)

    @classmethod
    def f64(cls, value: float) -> "ModbusValue":
        """Floating point value."""
        return cls(ValueKind.F64, float(value))

    @classmethod
    def binary(cls, value: int) -> "ModbusValue":
        """16-bit field value."""
        return cls(ValueKind.BINARY, value & 0xFFFF)

    @classmethod
    def string(cls, value: str) -> "ModbusValue":
        """Text value."""
        return cls(ValueKind.STRING, value)

    @property
    def is_numeric(self) -> bool:
        """True if the value can take part in scaling."""
        return self.kind in (ValueKind.U64, ValueKind.I64, ValueKind.F64)

    def to_float(self) -> Optional[float]:
        """Numeric value as float, or None for bit fields and strings."""
        if self.is_numeric:
            return float(self.value)
        return None

    def __str__(self) -> str:
        """Display form used by logs and consumers."""
        if self.kind is ValueKind.F64:
            return f"{self.value:.6f}"
        if self.kind is ValueKind.BINARY:
            return f"{self.value:016b}"
        return str(self.value)

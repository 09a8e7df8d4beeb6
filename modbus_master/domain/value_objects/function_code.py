"""Modbus function codes."""

from enum import IntEnum
from typing import Optional


class FunctionCode(IntEnum):
    """Modbus function codes supported by the master.

    ``int(code)`` gives the wire byte and ``FunctionCode.from_byte(byte)``
    maps a wire byte back, returning ``None`` for codes outside the set.
    """

    READ_COILS = 0x01
    READ_DISCRETE_INPUTS = 0x02
    READ_HOLDING_REGISTERS = 0x03
    READ_INPUT_REGISTERS = 0x04
    WRITE_SINGLE_COIL = 0x05
    WRITE_SINGLE_REGISTER = 0x06
    WRITE_MULTIPLE_COILS = 0x0F
    WRITE_MULTIPLE_REGISTERS = 0x10
    MASK_WRITE_REGISTER = 0x16
    READ_WRITE_MULTIPLE_REGISTERS = 0x17
    READ_FIFO_QUEUE = 0x18
    READ_DEVICE_IDENTIFICATION = 0x2B

    @classmethod
    def from_byte(cls, code: int) -> Optional["FunctionCode"]:
        """Map a wire byte to a function code.

        Args:
            code: Function byte with the exception flag cleared

        Returns:
            Matching FunctionCode, or None if the byte is unknown

        Example:
            >>> FunctionCode.from_byte(0x03)
            <FunctionCode.READ_HOLDING_REGISTERS: 3>
            >>> FunctionCode.from_byte(0x42) is None
            True
        """
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "Read Holding Registers"."""
        return _LABELS[self]

    @property
    def is_read(self) -> bool:
        """True for the four table read functions (0x01-0x04)."""
        return self in _READ_FUNCTIONS

    @property
    def is_bit_access(self) -> bool:
        """True if the function addresses single-bit tables (coils/inputs)."""
        return self in _BIT_FUNCTIONS

    @property
    def is_write_single(self) -> bool:
        """True if the response echoes address and value."""
        return self in (FunctionCode.WRITE_SINGLE_COIL, FunctionCode.WRITE_SINGLE_REGISTER)

    @property
    def is_write_multiple(self) -> bool:
        """True if the response echoes address and quantity."""
        return self in (
            FunctionCode.WRITE_MULTIPLE_COILS,
            FunctionCode.WRITE_MULTIPLE_REGISTERS,
        )


_LABELS = {
    FunctionCode.READ_COILS: "Read Coils",
    FunctionCode.READ_DISCRETE_INPUTS: "Read Discrete Inputs",
    FunctionCode.READ_HOLDING_REGISTERS: "Read Holding Registers",
    FunctionCode.READ_INPUT_REGISTERS: "Read Input Registers",
    FunctionCode.WRITE_SINGLE_COIL: "Write Single Coil",
    FunctionCode.WRITE_SINGLE_REGISTER: "Write Single Register",
    FunctionCode.WRITE_MULTIPLE_COILS: "Write Multiple Coils",
    FunctionCode.WRITE_MULTIPLE_REGISTERS: "Write Multiple Registers",
    FunctionCode.MASK_WRITE_REGISTER: "Mask Write Register",
    FunctionCode.READ_WRITE_MULTIPLE_REGISTERS: "Read/Write Multiple Registers",
    FunctionCode.READ_FIFO_QUEUE: "Read FIFO Queue",
    FunctionCode.READ_DEVICE_IDENTIFICATION: "Read Device Identification",
}

_READ_FUNCTIONS = frozenset(
    {
        FunctionCode.READ_COILS,
        FunctionCode.READ_DISCRETE_INPUTS,
        FunctionCode.READ_HOLDING_REGISTERS,
        FunctionCode.READ_INPUT_REGISTERS,
    }
)

_BIT_FUNCTIONS = frozenset(
    {
        FunctionCode.READ_COILS,
        FunctionCode.READ_DISCRETE_INPUTS,
        FunctionCode.WRITE_SINGLE_COIL,
        FunctionCode.WRITE_MULTIPLE_COILS,
    }
)

"""Modbus register tables."""

from enum import Enum

from ...const import MAX_BITS_PER_READ, MAX_REGISTERS_PER_READ
from .function_code import FunctionCode


class RegisterType(Enum):
    """Modbus data table a register lives in.

    The table fixes the read function code, so definitions of different
    types are never merged into one wire read.
    """

    COIL = "coil"
    DISCRETE_INPUT = "discrete_input"
    HOLDING = "holding"
    INPUT = "input"

    @property
    def read_function_code(self) -> FunctionCode:
        """Function code used to read this table.

        Example:
            >>> RegisterType.HOLDING.read_function_code
            <FunctionCode.READ_HOLDING_REGISTERS: 3>
        """
        return _READ_FUNCTIONS[self]

    @property
    def is_bit(self) -> bool:
        """True for single-bit tables (coils and discrete inputs)."""
        return self in (RegisterType.COIL, RegisterType.DISCRETE_INPUT)

    @property
    def max_read_count(self) -> int:
        """Largest quantity one read request may ask for."""
        return MAX_BITS_PER_READ if self.is_bit else MAX_REGISTERS_PER_READ


_READ_FUNCTIONS = {
    RegisterType.COIL: FunctionCode.READ_COILS,
    RegisterType.DISCRETE_INPUT: FunctionCode.READ_DISCRETE_INPUTS,
    RegisterType.HOLDING: FunctionCode.READ_HOLDING_REGISTERS,
    RegisterType.INPUT: FunctionCode.READ_INPUT_REGISTERS,
}

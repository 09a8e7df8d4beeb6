"""Register data types and their conversion rules.

Each data type fixes how many 16-bit registers it occupies and how the
words are turned into a ModbusValue. Multi-register integers are
assembled by shifting and OR-ing words; floats reinterpret the assembled
bit pattern (never a numeric cast).
"""

from enum import Enum
from typing import Optional, Sequence

from ..helpers.transformations import (
    bits_to_float32,
    bits_to_float64,
    combine_registers,
    convert_to_signed,
    registers_to_ascii,
)
from .modbus_value import ModbusValue


class ModbusDataType(Enum):
    """How consecutive registers are interpreted."""

    U16 = "u16"
    I16 = "i16"
    U32BE = "u32be"
    U32LE = "u32le"
    I32BE = "i32be"
    I32LE = "i32le"
    F32BE = "f32be"
    F32LE = "f32le"
    U64BE = "u64be"
    I64BE = "i64be"
    F64BE = "f64be"
    BINARY = "binary"
    ASCII = "ascii"

    def register_count(self) -> int:
        """Number of 16-bit registers this type occupies.

        Example:
            >>> ModbusDataType.F32BE.register_count()
            2
        """
        return _LAYOUTS[self][0]

    def convert(self, registers: Sequence[int]) -> Optional[ModbusValue]:
        """Convert raw register words to a value.

        Args:
            registers: Raw 16-bit words, lowest address first. Extra words
                beyond ``register_count()`` are ignored, except for ASCII
                which decodes every supplied word.

        Returns:
            Decoded value, or None if fewer registers than
            ``register_count()`` were supplied

        Examples:
            >>> ModbusDataType.U32BE.convert([0x0001, 0x0002])
            ModbusValue(kind=<ValueKind.U64: 'u64'>, value=65538)
            >>> ModbusDataType.I16.convert([0xFFFF]).value
            -1
            >>> ModbusDataType.U32BE.convert([0x0001]) is None
            True
        """
        count, kind, little_endian = _LAYOUTS[self]
        if len(registers) < count:
            return None

        if kind == "ascii":
            return ModbusValue.string(registers_to_ascii(registers))

        words = registers[:count]
        if kind == "binary":
            return ModbusValue.binary(words[0])

        bits = combine_registers(words, little_endian=little_endian)
        if kind == "unsigned":
            return ModbusValue.u64(bits)
        if kind == "signed":
            return ModbusValue.i64(convert_to_signed(bits, 16 * count))
        if count == 2:
            return ModbusValue.f64(bits_to_float32(bits))
        return ModbusValue.f64(bits_to_float64(bits))


# data type -> (register count, kind, little-endian word order)
_LAYOUTS = {
    ModbusDataType.U16: (1, "unsigned", False),
    ModbusDataType.I16: (1, "signed", False),
    ModbusDataType.U32BE: (2, "unsigned", False),
    ModbusDataType.U32LE: (2, "unsigned", True),
    ModbusDataType.I32BE: (2, "signed", False),
    ModbusDataType.I32LE: (2, "signed", True),
    ModbusDataType.F32BE: (2, "float", False),
    ModbusDataType.F32LE: (2, "float", True),
    ModbusDataType.U64BE: (4, "unsigned", False),
    ModbusDataType.I64BE: (4, "signed", False),
    ModbusDataType.F64BE: (4, "float", False),
    ModbusDataType.BINARY: (1, "binary", False),
    ModbusDataType.ASCII: (1, "ascii", False),
}

"""Register word transformation helpers.

Utilities for assembling 16-bit register words into wider integers,
two's complement conversion, IEEE-754 bit reinterpretation and packed
ASCII. All functions are pure.
"""

import struct
from typing import List, Sequence


def convert_to_signed(value: int, bits: int) -> int:
    """Interpret an unsigned integer as two's complement.

    Args:
        value: Unsigned value (0 to 2**bits - 1)
        bits: Width in bits (16, 32 or 64)

    Returns:
        Signed integer

    Examples:
        >>> convert_to_signed(0xFFFF, 16)
        -1
        >>> convert_to_signed(0x7FFF, 16)
        32767
        >>> convert_to_signed(0x80000000, 32)
        -2147483648
    """
    sign_bit = 1 << (bits - 1)
    value &= (1 << bits) - 1
    if value & sign_bit:
        return value - (1 << bits)
    return value


def combine_registers(registers: Sequence[int], little_endian: bool = False) -> int:
    """Assemble 16-bit words into one unsigned integer.

    Big-endian word order puts the first register in the most significant
    position. Little-endian word order reverses the words; bytes inside
    each word stay big-endian as they are on the wire.

    Args:
        registers: Register words in address order
        little_endian: True if the lowest address holds the low word

    Returns:
        Unsigned integer of ``16 * len(registers)`` bits

    Examples:
        >>> hex(combine_registers([0x0001, 0x0002]))
        '0x10002'
        >>> hex(combine_registers([0x0001, 0x0002], little_endian=True))
        '0x20001'
    """
    words = reversed(registers) if little_endian else registers
    value = 0
    for word in words:
        value = (value << 16) | (word & 0xFFFF)
    return value


def split_registers(value: int, count: int, little_endian: bool = False) -> List[int]:
    """Split an unsigned integer into ``count`` 16-bit words.

    Inverse of :func:`combine_registers`.

    Examples:
        >>> split_registers(0x00010002, 2)
        [1, 2]
        >>> split_registers(0x00010002, 2, little_endian=True)
        [2, 1]
    """
    words = [(value >> (16 * shift)) & 0xFFFF for shift in reversed(range(count))]
    if little_endian:
        words.reverse()
    return words


def bits_to_float32(bits: int) -> float:
    """Reinterpret a 32-bit pattern as an IEEE-754 single.

    Example:
        >>> bits_to_float32(0x40490FDB)
        3.1415927410125732
    """
    return struct.unpack(">f", (bits & 0xFFFFFFFF).to_bytes(4, "big"))[0]


def bits_to_float64(bits: int) -> float:
    """Reinterpret a 64-bit pattern as an IEEE-754 double."""
    return struct.unpack(">d", (bits & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big"))[0]


def float32_to_bits(value: float) -> int:
    """Return the IEEE-754 single-precision bit pattern of ``value``."""
    return int.from_bytes(struct.pack(">f", value), "big")


def float64_to_bits(value: float) -> int:
    """Return the IEEE-754 double-precision bit pattern of ``value``."""
    return int.from_bytes(struct.pack(">d", value), "big")


def registers_to_ascii(registers: Sequence[int]) -> str:
    """Unpack ASCII text, high byte first in each register.

    Zero bytes are padding and are skipped.

    Examples:
        >>> registers_to_ascii([0x4142, 0x4300])
        'ABC'
    """
    chars = []
    for register in registers:
        for byte in ((register >> 8) & 0xFF, register & 0xFF):
            if byte:
                chars.append(chr(byte))
    return "".join(chars)


def ascii_to_registers(text: str, count: int = 0) -> List[int]:
    """Pack ASCII text into registers, high byte first.

    Args:
        text: ASCII text to pack
        count: Minimum number of registers; shorter text is zero padded

    Returns:
        Register words

    Raises:
        ValueError: If text contains non-ASCII characters

    Examples:
        >>> [hex(r) for r in ascii_to_registers("ABC")]
        ['0x4142', '0x4300']
        >>> ascii_to_registers("A", count=2)
        [16640, 0]
    """
    data = text.encode("ascii")
    if len(data) % 2:
        data += b"\x00"
    registers = [(data[i] << 8) | data[i + 1] for i in range(0, len(data), 2)]
    registers.extend([0] * (count - len(registers)))
    return registers

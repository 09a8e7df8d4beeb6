"""Tests for register transformation helpers."""

import pytest

from modbus_master.domain.helpers import (
    ascii_to_registers,
    bits_to_float32,
    bits_to_float64,
    combine_registers,
    convert_to_signed,
    float32_to_bits,
    float64_to_bits,
    registers_to_ascii,
    split_registers,
)


class TestSignedConversion:
    """Test two's complement helpers."""

    @pytest.mark.parametrize(
        "value,bits,expected",
        [
            (0x0000, 16, 0),
            (0x7FFF, 16, 32767),
            (0x8000, 16, -32768),
            (0xFFFF, 16, -1),
            (0x80000000, 32, -2147483648),
            (0xFFFFFFFF, 32, -1),
            (0xFFFFFFFFFFFFFFFF, 64, -1),
        ],
    )
    def test_convert_to_signed(self, value, bits, expected):
        assert convert_to_signed(value, bits) == expected


class TestCombineRegisters:
    """Test word assembly."""

    def test_big_endian(self):
        assert combine_registers([0x0001, 0x0002]) == 0x00010002

    def test_little_endian(self):
        assert combine_registers([0x0001, 0x0002], little_endian=True) == 0x00020001

    def test_four_words(self):
        assert combine_registers([0x1122, 0x3344, 0x5566, 0x7788]) == 0x1122334455667788

    def test_split_inverts_combine(self):
        assert split_registers(0x1122334455667788, 4) == [0x1122, 0x3344, 0x5566, 0x7788]
        assert split_registers(0x00010002, 2, little_endian=True) == [0x0002, 0x0001]


class TestFloatBits:
    """Test IEEE-754 reinterpretation."""

    def test_float32(self):
        assert bits_to_float32(0x3F800000) == 1.0
        assert float32_to_bits(1.0) == 0x3F800000

    def test_float32_negative(self):
        assert bits_to_float32(0xC0100000) == -2.25

    def test_float64(self):
        assert bits_to_float64(0x3FF8000000000000) == 1.5
        assert float64_to_bits(1.5) == 0x3FF8000000000000


class TestAscii:
    """Test packed ASCII helpers."""

    def test_unpack_high_byte_first(self):
        assert registers_to_ascii([0x4142, 0x4344]) == "ABCD"

    def test_unpack_skips_zero_bytes(self):
        assert registers_to_ascii([0x4100, 0x0042]) == "AB"

    def test_pack_odd_length(self):
        assert ascii_to_registers("ABC") == [0x4142, 0x4300]

    def test_pack_pads_to_count(self):
        assert ascii_to_registers("AB", count=3) == [0x4142, 0, 0]

    def test_pack_rejects_non_ascii(self):
        with pytest.raises(ValueError):
            ascii_to_registers("°C")

"""Pure helper functions for register value transformations."""

from .transformations import (
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

__all__ = [
    "ascii_to_registers",
    "bits_to_float32",
    "bits_to_float64",
    "combine_registers",
    "convert_to_signed",
    "float32_to_bits",
    "float64_to_bits",
    "registers_to_ascii",
    "split_registers",
]

"""Modbus exception codes."""

from enum import IntEnum
from typing import Optional


class ExceptionCode(IntEnum):
    """Modbus exception codes returned in exception responses.

    A device signals an exception by setting bit 0x80 on the echoed
    function byte; the next byte carries one of these codes.
    """

    ILLEGAL_FUNCTION = 0x01
    ILLEGAL_DATA_ADDRESS = 0x02
    ILLEGAL_DATA_VALUE = 0x03
    SLAVE_DEVICE_FAILURE = 0x04
    ACKNOWLEDGE = 0x05
    SLAVE_DEVICE_BUSY = 0x06
    MEMORY_PARITY_ERROR = 0x08
    GATEWAY_PATH_UNAVAILABLE = 0x0A
    GATEWAY_TARGET_NO_RESPONSE = 0x0B

    @classmethod
    def from_byte(cls, code: int) -> Optional["ExceptionCode"]:
        """Map a wire byte to an exception code, or None if unknown."""
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "Illegal Data Address"."""
        return _LABELS[self]


_LABELS = {
    ExceptionCode.ILLEGAL_FUNCTION: "Illegal Function",
    ExceptionCode.ILLEGAL_DATA_ADDRESS: "Illegal Data Address",
    ExceptionCode.ILLEGAL_DATA_VALUE: "Illegal Data Value",
    ExceptionCode.SLAVE_DEVICE_FAILURE: "Slave Device Failure",
    ExceptionCode.ACKNOWLEDGE: "Acknowledge",
    ExceptionCode.SLAVE_DEVICE_BUSY: "Slave Device Busy",
    ExceptionCode.MEMORY_PARITY_ERROR: "Memory Parity Error",
    ExceptionCode.GATEWAY_PATH_UNAVAILABLE: "Gateway Path Unavailable",
    ExceptionCode.GATEWAY_TARGET_NO_RESPONSE: "Gateway Target Failed to Respond",
}


def format_modbus_error(code: int) -> str:
    """Format an exception byte for logging.

    Args:
        code: Raw exception byte from the device

    Returns:
        Readable description including the hex code

    Example:
        >>> format_modbus_error(0x02)
        'Illegal Data Address (0x02)'
        >>> format_modbus_error(0x7F)
        'Unknown exception (0x7F)'
    """
    exception = ExceptionCode.from_byte(code)
    label = exception.label if exception is not None else "Unknown exception"
    return f"{label} (0x{code:02X})"

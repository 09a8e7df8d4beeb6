"""Custom exceptions for the Modbus master engine.

Framing and protocol errors fail a single parse call. Device exception
responses are first-class frames in the codec and only become
``ModbusDeviceError`` once a register reader has to report a failed read.
"""

from typing import Optional

from .value_objects.exception_code import ExceptionCode


class ModbusMasterError(Exception):
    """Base exception for the Modbus master engine."""


class FrameError(ModbusMasterError):
    """Raised when a frame cannot be parsed."""


class FrameTooShortError(FrameError):
    """Raised when fewer bytes are available than the frame layout needs."""

    def __init__(self, length: int, minimum: int, what: str = "Frame") -> None:
        self.length = length
        self.minimum = minimum
        super().__init__(f"{what} too short: {length} bytes (minimum {minimum})")


class CRCMismatchError(FrameError):
    """Raised when the trailing CRC-16 does not match the frame contents."""

    def __init__(self, received: int, calculated: int) -> None:
        self.received = received
        self.calculated = calculated
        super().__init__(
            f"CRC mismatch: received=0x{received:04X}, calculated=0x{calculated:04X}"
        )


class InvalidProtocolIdError(FrameError):
    """Raised when an MBAP header carries a protocol id other than 0."""

    def __init__(self, protocol_id: int) -> None:
        self.protocol_id = protocol_id
        super().__init__(f"Invalid MBAP protocol id: {protocol_id}")


class IncompleteFrameError(FrameError):
    """Raised when a frame declares more bytes than are available.

    Reassembly of partial frames belongs to the transport, so the caller
    may wait for more bytes and parse again.
    """

    def __init__(self, expected: int, available: int) -> None:
        self.expected = expected
        self.available = available
        super().__init__(
            f"Incomplete frame: expected {expected} bytes, got {available}"
        )


class UnknownFunctionCodeError(FrameError):
    """Raised when a frame carries a function code outside the known set."""

    def __init__(self, function_code: int) -> None:
        self.function_code = function_code
        super().__init__(f"Unknown function code: 0x{function_code:02X}")


class ModbusDeviceError(ModbusMasterError):
    """Device answered with a Modbus exception response."""

    def __init__(
        self,
        slave_id: int,
        function: int,
        exception_code: ExceptionCode,
        raw_code: Optional[int] = None,
    ) -> None:
        self.slave_id = slave_id
        self.function = function
        self.exception_code = exception_code
        self.raw_code = int(exception_code) if raw_code is None else raw_code
        super().__init__(
            f"Slave {slave_id} rejected function 0x{function:02X}: "
            f"{exception_code.label} (0x{self.raw_code:02X})"
        )


class TransportError(ModbusMasterError):
    """Raised when the byte transport cannot complete a request."""


class ConfigurationError(ModbusMasterError, ValueError):
    """Raised when register definitions or poll groups are invalid."""

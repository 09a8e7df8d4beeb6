"""Parsed Modbus frames.

A parsed frame is one of three shapes:

    Request:   [Slave ID][Function][Start Addr][Quantity][Data...]
    Response:  [Slave ID][Function][Data...]
    Exception: [Slave ID][Function | 0x80][Exception Code]

Frames are produced only by the codec's parse functions; the envelope
(CRC-16 for RTU, MBAP header for TCP) has already been verified and
stripped by the time one of these objects exists.
"""

from dataclasses import dataclass
from typing import Union

from .exception_code import ExceptionCode
from .function_code import FunctionCode


@dataclass(frozen=True)
class ModbusRequest:
    """Request frame seen on the wire.

    Attributes:
        slave_id: Target device address
        function: Requested operation
        start_address: First register/bit address
        quantity: Number of registers/bits
        data: Write payload (empty for reads)
    """

    slave_id: int
    function: FunctionCode
    start_address: int
    quantity: int
    data: bytes = b""

    @property
    def is_error(self) -> bool:
        """Requests are never exceptions."""
        return False


@dataclass(frozen=True)
class ModbusResponse:
    """Normal (non-exception) response.

    For read functions ``data`` holds the payload after the byte count;
    for write functions it holds the echoed address and value/quantity.
    """

    slave_id: int
    function: FunctionCode
    data: bytes

    @property
    def is_error(self) -> bool:
        """Responses are never exceptions."""
        return False


@dataclass(frozen=True)
class ModbusException:
    """Exception response reported by a device.

    Attributes:
        slave_id: Device that answered
        function: Function byte with the 0x80 flag cleared
        exception_code: Decoded exception reason
        raw_code: Exception byte as received (differs from
            ``exception_code`` only for codes outside the known set)
    """

    slave_id: int
    function: int
    exception_code: ExceptionCode
    raw_code: int

    @property
    def is_error(self) -> bool:
        """Exception frames are always errors."""
        return True

    def __str__(self) -> str:
        """String representation for logging."""
        return (
            f"ModbusException(slave={self.slave_id:#04x}, "
            f"func={self.function:#04x}, {self.exception_code.label})"
        )


ModbusFrame = Union[ModbusRequest, ModbusResponse, ModbusException]


@dataclass(frozen=True)
class MbapHeader:
    """Modbus TCP application header.

    Attributes:
        transaction_id: Request/response pairing id
        protocol_id: Always 0 for Modbus
        length: Byte count of unit id plus PDU
        unit_id: Target unit (slave) id
    """

    transaction_id: int
    protocol_id: int
    length: int
    unit_id: int

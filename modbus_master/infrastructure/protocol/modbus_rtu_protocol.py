"""Modbus RTU framing.

An RTU frame is ``[Slave ID][PDU...][CRC_L][CRC_H]``: the shared PDU
wrapped with the device address and a little-endian CRC-16 over
everything before it.
"""

import logging
import struct
from typing import Optional, Sequence, Tuple, Union

from ...const import RTU_CRC_SIZE, RTU_MIN_EXCEPTION_FRAME_SIZE, RTU_MIN_FRAME_SIZE
from ...domain.exceptions import CRCMismatchError, FrameTooShortError
from ...domain.interfaces import ICRC, IProtocol
from ...domain.value_objects import FunctionCode, ModbusFrame
from .modbus_crc16 import ModbusCRC16
from .pdu import (
    build_request_pdu,
    build_write_multiple_coils_pdu,
    build_write_multiple_registers_pdu,
    build_write_single_coil_pdu,
    build_write_single_register_pdu,
    parse_pdu,
)

_LOGGER = logging.getLogger(__name__)

_DEFAULT_CRC = ModbusCRC16()


def _check_slave_id(slave_id: int) -> None:
    if slave_id < 0 or slave_id > 0xFF:
        raise ValueError(f"Slave ID must be 0-255, got {slave_id}")


def _wrap(slave_id: int, pdu: bytes, crc: Optional[ICRC] = None) -> bytes:
    _check_slave_id(slave_id)
    data = bytes([slave_id]) + pdu
    crc_value = (crc or _DEFAULT_CRC).calculate(data)
    frame = data + struct.pack("<H", crc_value)

    if _LOGGER.isEnabledFor(logging.DEBUG):
        _LOGGER.debug("Built RTU frame: %s", frame.hex())
    return frame


def build_rtu_request(
    slave_id: int,
    function: Union[FunctionCode, int],
    address: int,
    quantity: int,
    crc: Optional[ICRC] = None,
) -> bytes:
    """Build an RTU address/quantity request.

    Args:
        slave_id: Target device (0-255)
        function: Function code
        address: Starting address (0x0000 - 0xFFFF)
        quantity: Register/bit count (1-125 registers or 1-2000 bits for
            reads)
        crc: CRC implementation (default: ModbusCRC16)

    Returns:
        ``[Slave][Func][Addr_H][Addr_L][Qty_H][Qty_L][CRC_L][CRC_H]``

    Raises:
        ValueError: If any argument is out of range

    Example:
        >>> build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 1).hex()
        '01030100000185f6'
    """
    return _wrap(slave_id, build_request_pdu(function, address, quantity), crc)


def build_rtu_write_single_register(
    slave_id: int, address: int, value: int, crc: Optional[ICRC] = None
) -> bytes:
    """Build an RTU Write Single Register (0x06) frame."""
    return _wrap(slave_id, build_write_single_register_pdu(address, value), crc)


def build_rtu_write_single_coil(
    slave_id: int, address: int, value: bool, crc: Optional[ICRC] = None
) -> bytes:
    """Build an RTU Write Single Coil (0x05) frame."""
    return _wrap(slave_id, build_write_single_coil_pdu(address, value), crc)


def build_rtu_write_multiple_registers(
    slave_id: int, address: int, values: Sequence[int], crc: Optional[ICRC] = None
) -> bytes:
    """Build an RTU Write Multiple Registers (0x10) frame.

    Returns:
        ``[Slave][0x10][Addr:2][Qty:2][ByteCount][Data...][CRC_L][CRC_H]``
    """
    return _wrap(slave_id, build_write_multiple_registers_pdu(address, values), crc)


def build_rtu_write_multiple_coils(
    slave_id: int, address: int, values: Sequence[bool], crc: Optional[ICRC] = None
) -> bytes:
    """Build an RTU Write Multiple Coils (0x0F) frame."""
    return _wrap(slave_id, build_write_multiple_coils_pdu(address, values), crc)


def _unwrap(data: bytes, crc: Optional[ICRC]) -> Tuple[int, bytes]:
    """Check length and CRC of an RTU frame, return slave id and PDU."""
    data = bytes(data)
    if len(data) < RTU_MIN_FRAME_SIZE:
        _LOGGER.debug("RTU frame too short: %d bytes", len(data))
        raise FrameTooShortError(len(data), RTU_MIN_FRAME_SIZE, "RTU frame")

    received_crc = struct.unpack("<H", data[-RTU_CRC_SIZE:])[0]
    calculated_crc = (crc or _DEFAULT_CRC).calculate(data[:-RTU_CRC_SIZE])
    if received_crc != calculated_crc:
        _LOGGER.warning(
            "CRC mismatch: received=0x%04X, calculated=0x%04X",
            received_crc,
            calculated_crc,
        )
        raise CRCMismatchError(received_crc, calculated_crc)

    slave_id = data[0]
    if data[1] & 0x80 and len(data) < RTU_MIN_EXCEPTION_FRAME_SIZE:
        raise FrameTooShortError(
            len(data), RTU_MIN_EXCEPTION_FRAME_SIZE, "RTU exception frame"
        )

    if _LOGGER.isEnabledFor(logging.DEBUG):
        _LOGGER.debug("Decoded RTU frame: slave=0x%02X, func=0x%02X", slave_id, data[1])

    return slave_id, data[1:-RTU_CRC_SIZE]


def parse_rtu_frame(data: bytes, crc: Optional[ICRC] = None) -> ModbusFrame:
    """Verify and decode an RTU response frame.

    The CRC is checked before anything else is interpreted; a mismatch
    fails the whole frame.

    Args:
        data: Complete RTU frame including CRC
        crc: CRC implementation (default: ModbusCRC16)

    Returns:
        ModbusResponse or ModbusException

    Raises:
        FrameTooShortError: Fewer than 4 bytes (5 for exception frames)
        CRCMismatchError: Trailing CRC does not match
        IncompleteFrameError: Byte count exceeds the data in the frame
        UnknownFunctionCodeError: Function byte not supported
        FrameError: Payload matches no layout for its function

    Example:
        >>> body = bytes.fromhex("010304000a000b")
        >>> reply = body + struct.pack("<H", ModbusCRC16().calculate(body))
        >>> parse_rtu_frame(reply).data.hex()
        '000a000b'
    """
    slave_id, pdu = _unwrap(data, crc)
    return parse_pdu(slave_id, pdu)


def parse_rtu_request(data: bytes, crc: Optional[ICRC] = None) -> ModbusFrame:
    """Verify and decode an RTU request frame, as a slave would receive it.

    Args:
        data: Complete RTU frame including CRC
        crc: CRC implementation (default: ModbusCRC16)

    Returns:
        ModbusRequest, or ModbusException for a frame with bit 0x80 set

    Raises:
        Same as :func:`parse_rtu_frame`.

    Example:
        >>> request = build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 2)
        >>> frame = parse_rtu_request(request)
        >>> (frame.slave_id, frame.start_address, frame.quantity)
        (1, 256, 2)
    """
    slave_id, pdu = _unwrap(data, crc)
    return parse_pdu(slave_id, pdu, expect_request=True)


class ModbusRTUProtocol(IProtocol):
    """Modbus RTU protocol bound to a CRC implementation.

    Example:
        >>> protocol = ModbusRTUProtocol(ModbusCRC16())
        >>> command = protocol.build_read_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 2)
        >>> # Send command via transport...
        >>> frame = protocol.parse_response(response_bytes)
    """

    def __init__(self, crc: Optional[ICRC] = None):
        """Initialize Modbus RTU protocol.

        Args:
            crc: CRC calculator implementation (default: ModbusCRC16)
        """
        self._crc = crc or _DEFAULT_CRC

    def build_read_request(
        self, slave_id: int, function: FunctionCode, address: int, count: int
    ) -> bytes:
        return build_rtu_request(slave_id, function, address, count, self._crc)

    def build_write_single_register(self, slave_id: int, address: int, value: int) -> bytes:
        return build_rtu_write_single_register(slave_id, address, value, self._crc)

    def build_write_multiple_registers(
        self, slave_id: int, address: int, values: Sequence[int]
    ) -> bytes:
        return build_rtu_write_multiple_registers(slave_id, address, values, self._crc)

    def parse_response(self, data: bytes) -> ModbusFrame:
        return parse_rtu_frame(data, self._crc)

"""Modbus TCP framing.

A TCP frame is the shared PDU prefixed with the 7-byte MBAP header:

    [Transaction ID:2][Protocol ID:2 = 0][Length:2][Unit ID:1][PDU...]

``Length`` counts the unit id plus the PDU. There is no checksum; TCP
already guarantees integrity.
"""

import logging
import struct
from typing import Optional, Sequence, Tuple, Union

from ...const import MBAP_HEADER_SIZE, MBAP_PROTOCOL_ID, TCP_MIN_FRAME_SIZE
from ...domain.exceptions import (
    FrameError,
    FrameTooShortError,
    IncompleteFrameError,
    InvalidProtocolIdError,
)
from ...domain.interfaces import IProtocol
from ...domain.value_objects import FunctionCode, MbapHeader, ModbusFrame
from .pdu import build_request_pdu, build_write_multiple_registers_pdu, parse_pdu

_LOGGER = logging.getLogger(__name__)

# Bytes of the MBAP header that precede the length-counted section
_MBAP_PREFIX_SIZE = 6


def build_tcp_frame(transaction_id: int, unit_id: int, pdu: bytes) -> bytes:
    """Wrap a PDU in an MBAP header.

    Raises:
        ValueError: If transaction id or unit id is out of range
    """
    if transaction_id < 0 or transaction_id > 0xFFFF:
        raise ValueError(f"Transaction ID must be 0-65535, got {transaction_id}")
    if unit_id < 0 or unit_id > 0xFF:
        raise ValueError(f"Unit ID must be 0-255, got {unit_id}")

    header = struct.pack(
        ">HHHB", transaction_id, MBAP_PROTOCOL_ID, len(pdu) + 1, unit_id
    )
    return header + pdu


def build_tcp_request(
    transaction_id: int,
    unit_id: int,
    function: Union[FunctionCode, int],
    address: int,
    quantity: int,
) -> bytes:
    """Build a TCP address/quantity request.

    Example:
        >>> build_tcp_request(1, 1, FunctionCode.READ_HOLDING_REGISTERS, 0, 10).hex()
        '00010000000601030000000a'
    """
    return build_tcp_frame(
        transaction_id, unit_id, build_request_pdu(function, address, quantity)
    )


def build_tcp_write_multiple_registers(
    transaction_id: int, unit_id: int, address: int, values: Sequence[int]
) -> bytes:
    """Build a TCP Write Multiple Registers (0x10) frame."""
    return build_tcp_frame(
        transaction_id, unit_id, build_write_multiple_registers_pdu(address, values)
    )


def _unwrap(data: bytes) -> Tuple[MbapHeader, bytes]:
    """Check the MBAP header, return it with the PDU it frames."""
    data = bytes(data)
    if len(data) < TCP_MIN_FRAME_SIZE:
        _LOGGER.debug("TCP frame too short: %d bytes", len(data))
        raise FrameTooShortError(len(data), TCP_MIN_FRAME_SIZE, "TCP frame")

    transaction_id, protocol_id, length, unit_id = struct.unpack(
        ">HHHB", data[:MBAP_HEADER_SIZE]
    )
    if protocol_id != MBAP_PROTOCOL_ID:
        raise InvalidProtocolIdError(protocol_id)
    if length < 2:
        raise FrameTooShortError(length, 2, "MBAP length")

    expected = _MBAP_PREFIX_SIZE + length
    if len(data) < expected:
        raise IncompleteFrameError(expected, len(data))

    header = MbapHeader(transaction_id, protocol_id, length, unit_id)
    if _LOGGER.isEnabledFor(logging.DEBUG):
        _LOGGER.debug(
            "Decoded MBAP header: trans=0x%04X, unit=0x%02X, length=%d",
            transaction_id,
            unit_id,
            length,
        )
    return header, data[MBAP_HEADER_SIZE:expected]


def parse_tcp_frame(data: bytes) -> Tuple[MbapHeader, ModbusFrame]:
    """Verify the MBAP header and decode the response PDU.

    Bytes after the declared length are ignored; the transport owns stream
    reassembly.

    Args:
        data: Bytes starting at an MBAP header

    Returns:
        Tuple of (header, frame), the frame being a ModbusResponse or
        ModbusException

    Raises:
        FrameTooShortError: Fewer than 8 bytes, or a declared length below 2
        InvalidProtocolIdError: Protocol id other than 0
        IncompleteFrameError: Declared length or byte count exceeds the
            available bytes
        UnknownFunctionCodeError: Function byte not supported
        FrameError: Payload matches no layout for its function
    """
    header, pdu = _unwrap(data)
    return header, parse_pdu(header.unit_id, pdu)


def parse_tcp_request(data: bytes) -> Tuple[MbapHeader, ModbusFrame]:
    """Verify the MBAP header and decode a request PDU.

    Returns:
        Tuple of (header, frame), the frame being a ModbusRequest or
        ModbusException

    Raises:
        Same as :func:`parse_tcp_frame`.
    """
    header, pdu = _unwrap(data)
    return header, parse_pdu(header.unit_id, pdu, expect_request=True)


def _wrap_transaction_id(value: int) -> int:
    """Fold ``value`` into 1-65535; 0 is never handed out."""
    return (value - 1) % 0xFFFF + 1


class ModbusTCPProtocol(IProtocol):
    """Modbus TCP protocol with a rolling transaction id.

    Each request gets the next transaction id in 1-65535, 0xFFFF being
    followed by 1; a response carrying a different id is rejected.
    """

    def __init__(self, first_transaction_id: int = 1):
        self._next_transaction_id = _wrap_transaction_id(first_transaction_id)
        self._last_transaction_id: Optional[int] = None

    @property
    def last_transaction_id(self) -> Optional[int]:
        return self._last_transaction_id

    def _take_transaction_id(self) -> int:
        transaction_id = self._next_transaction_id
        self._next_transaction_id = _wrap_transaction_id(transaction_id + 1)
        self._last_transaction_id = transaction_id
        return transaction_id

    def build_read_request(
        self, slave_id: int, function: FunctionCode, address: int, count: int
    ) -> bytes:
        pdu = build_request_pdu(function, address, count)
        return build_tcp_frame(self._take_transaction_id(), slave_id, pdu)

    def build_write_multiple_registers(
        self, slave_id: int, address: int, values: Sequence[int]
    ) -> bytes:
        pdu = build_write_multiple_registers_pdu(address, values)
        return build_tcp_frame(self._take_transaction_id(), slave_id, pdu)

    def parse_response(self, data: bytes) -> ModbusFrame:
        """Parse a response to the most recent request.

        Raises:
            FrameError: If the transaction id does not match the request
        """
        header, frame = parse_tcp_frame(data)
        if (
            self._last_transaction_id is not None
            and header.transaction_id != self._last_transaction_id
        ):
            _LOGGER.warning(
                "Transaction ID mismatch: expected=0x%04X, received=0x%04X",
                self._last_transaction_id,
                header.transaction_id,
            )
            raise FrameError(
                f"Transaction ID mismatch: expected {self._last_transaction_id}, "
                f"got {header.transaction_id}"
            )
        return frame

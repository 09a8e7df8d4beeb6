"""Protocol Data Unit codec shared by the RTU and TCP envelopes.

A PDU is the function byte followed by its payload. Everything that
depends only on the function code lives here: payload layouts, frame
classification and exception decoding. The envelopes add and verify
their own addressing and integrity fields around it.

PDU layouts:
    Read request:            [Func][Addr:2][Qty:2]
    Read response:           [Func][ByteCount][Data...]
    Write single:            [Func][Addr:2][Value:2]        (echoed back)
    Write multiple request:  [Func][Addr:2][Qty:2][ByteCount][Data...]
    Write multiple response: [Func][Addr:2][Qty:2]
    Exception:               [Func | 0x80][ExceptionCode]
"""

import logging
import struct
from typing import List, Sequence, Union

from ...const import (
    COIL_OFF,
    COIL_ON,
    EXCEPTION_FLAG,
    FUNCTION_CODE_MASK,
    MAX_ADDRESS,
    MAX_BITS_PER_READ,
    MAX_BITS_PER_WRITE,
    MAX_REGISTER_VALUE,
    MAX_REGISTERS_PER_READ,
    MAX_REGISTERS_PER_WRITE,
)
from ...domain.exceptions import (
    FrameError,
    FrameTooShortError,
    IncompleteFrameError,
    UnknownFunctionCodeError,
)
from ...domain.value_objects import (
    ExceptionCode,
    FunctionCode,
    ModbusException,
    ModbusFrame,
    ModbusRequest,
    ModbusResponse,
    format_modbus_error,
)

_LOGGER = logging.getLogger(__name__)

# Responses to these functions carry a byte count prefix
_BYTE_COUNT_FUNCTIONS = frozenset(
    {
        FunctionCode.READ_COILS,
        FunctionCode.READ_DISCRETE_INPUTS,
        FunctionCode.READ_HOLDING_REGISTERS,
        FunctionCode.READ_INPUT_REGISTERS,
        FunctionCode.READ_WRITE_MULTIPLE_REGISTERS,
    }
)

_ADDRESS_QUANTITY_SIZE = 4


def coerce_function_code(function: Union[FunctionCode, int]) -> FunctionCode:
    """Map an int or FunctionCode to a FunctionCode.

    Raises:
        ValueError: If the code is outside the supported set
    """
    code = FunctionCode.from_byte(int(function))
    if code is None:
        raise ValueError(f"Unknown function code: 0x{int(function):02X}")
    return code


def _check_address(address: int) -> None:
    if address < 0 or address > MAX_ADDRESS:
        raise ValueError(f"Register address must be 0-65535, got {address}")


def _check_span(address: int, quantity: int) -> None:
    if address + quantity - 1 > MAX_ADDRESS:
        raise ValueError(
            f"Range 0x{address:04X}+{quantity} runs past address 65535"
        )


def _check_quantity(function: FunctionCode, quantity: int) -> None:
    if function.is_read:
        limit = MAX_BITS_PER_READ if function.is_bit_access else MAX_REGISTERS_PER_READ
        if quantity < 1 or quantity > limit:
            raise ValueError(
                f"Quantity must be 1-{limit} for {function.label}, got {quantity}"
            )
    elif quantity < 0 or quantity > MAX_REGISTER_VALUE:
        raise ValueError(f"Quantity must be 0-65535, got {quantity}")


def build_request_pdu(
    function: Union[FunctionCode, int], address: int, quantity: int
) -> bytes:
    """Build an address/quantity request PDU.

    Args:
        function: Function code (reads are limited to 125 registers or
            2000 bits)
        address: Starting address (0x0000 - 0xFFFF)
        quantity: Number of registers/bits, or the value for write-single

    Returns:
        ``[Func][Addr:2 BE][Qty:2 BE]``

    Raises:
        ValueError: If the function, address or quantity is out of range

    Example:
        >>> build_request_pdu(FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 2).hex()
        '0301000002'
    """
    code = coerce_function_code(function)
    _check_address(address)
    _check_quantity(code, quantity)
    if code.is_read:
        _check_span(address, quantity)
    return struct.pack(">BHH", code, address, quantity)


def build_write_single_register_pdu(address: int, value: int) -> bytes:
    """Build a Write Single Register (0x06) PDU.

    Raises:
        ValueError: If address or value is out of range
    """
    _check_address(address)
    if value < 0 or value > MAX_REGISTER_VALUE:
        raise ValueError(f"Register value must be 0-65535, got {value}")
    return struct.pack(">BHH", FunctionCode.WRITE_SINGLE_REGISTER, address, value)


def build_write_single_coil_pdu(address: int, value: bool) -> bytes:
    """Build a Write Single Coil (0x05) PDU; ON is 0xFF00, OFF is 0x0000."""
    _check_address(address)
    return struct.pack(
        ">BHH",
        FunctionCode.WRITE_SINGLE_COIL,
        address,
        COIL_ON if value else COIL_OFF,
    )


def build_write_multiple_registers_pdu(address: int, values: Sequence[int]) -> bytes:
    """Build a Write Multiple Registers (0x10) PDU.

    Args:
        address: First register to write
        values: 1-123 register values (0-65535 each)

    Returns:
        ``[0x10][Addr:2][Qty:2][ByteCount][Data...]``

    Raises:
        ValueError: If the address, count or any value is out of range
    """
    _check_address(address)
    count = len(values)
    if count < 1 or count > MAX_REGISTERS_PER_WRITE:
        raise ValueError(
            f"Register count must be 1-{MAX_REGISTERS_PER_WRITE}, got {count}"
        )
    _check_span(address, count)
    for value in values:
        if value < 0 or value > MAX_REGISTER_VALUE:
            raise ValueError(f"Register value must be 0-65535, got {value}")

    payload = struct.pack(f">{count}H", *values)
    header = struct.pack(
        ">BHHB", FunctionCode.WRITE_MULTIPLE_REGISTERS, address, count, len(payload)
    )
    return header + payload


def build_write_multiple_coils_pdu(address: int, values: Sequence[bool]) -> bytes:
    """Build a Write Multiple Coils (0x0F) PDU with LSB-first packed bits.

    Raises:
        ValueError: If the address or coil count is out of range
    """
    _check_address(address)
    count = len(values)
    if count < 1 or count > MAX_BITS_PER_WRITE:
        raise ValueError(f"Coil count must be 1-{MAX_BITS_PER_WRITE}, got {count}")
    _check_span(address, count)

    payload = pack_coils(values)
    header = struct.pack(
        ">BHHB", FunctionCode.WRITE_MULTIPLE_COILS, address, count, len(payload)
    )
    return header + payload


def parse_pdu(slave_id: int, pdu: bytes, expect_request: bool = False) -> ModbusFrame:
    """Classify and decode a PDU.

    The direction of the PDU is decided by the caller, never guessed from
    the payload length: a response whose byte count does not match its data
    is an error even when its length happens to match a request layout.

    Args:
        slave_id: Slave/unit id taken from the envelope
        pdu: Function byte and payload, envelope already stripped
        expect_request: Decode the master-to-slave layout instead of the
            slave-to-master one

    Returns:
        ModbusException if the function byte has bit 0x80 set, otherwise a
        ModbusRequest when ``expect_request`` is set and a ModbusResponse
        when it is not

    Raises:
        FrameTooShortError: If the payload is shorter than its layout
        IncompleteFrameError: If a byte count exceeds the available data
        UnknownFunctionCodeError: If the function byte is not supported
        FrameError: If the payload length matches no layout
    """
    if len(pdu) < 1:
        raise FrameTooShortError(len(pdu), 1, "PDU")

    function_byte = pdu[0]
    payload = bytes(pdu[1:])

    if function_byte & EXCEPTION_FLAG:
        return _parse_exception(slave_id, function_byte, payload)

    function = FunctionCode.from_byte(function_byte)
    if function is None:
        _LOGGER.warning("Unknown function code: 0x%02X", function_byte)
        raise UnknownFunctionCodeError(function_byte)

    if expect_request:
        return _parse_request(slave_id, function, payload)

    if function in _BYTE_COUNT_FUNCTIONS:
        return ModbusResponse(
            slave_id, function, _byte_counted_data(payload, 1, function.label)
        )
    if function.is_write_single or function.is_write_multiple:
        return ModbusResponse(
            slave_id, function, _address_quantity(payload, function.label)
        )
    return ModbusResponse(slave_id, function, payload)


def _parse_request(
    slave_id: int, function: FunctionCode, payload: bytes
) -> ModbusRequest:
    if function.is_read:
        address, quantity = struct.unpack(
            ">HH", _address_quantity(payload, function.label)
        )
        return ModbusRequest(slave_id, function, address, quantity)

    if function.is_write_single:
        address = struct.unpack(">H", _address_quantity(payload, function.label)[:2])[0]
        return ModbusRequest(slave_id, function, address, 1, payload[2:])

    if function.is_write_multiple:
        header = _address_quantity(payload[:_ADDRESS_QUANTITY_SIZE], function.label)
        address, quantity = struct.unpack(">HH", header)
        data = _byte_counted_data(
            payload[_ADDRESS_QUANTITY_SIZE:],
            _ADDRESS_QUANTITY_SIZE + 1,
            function.label,
        )
        return ModbusRequest(slave_id, function, address, quantity, data)

    raise FrameError(f"{function.label} requests cannot be decoded")


def _parse_exception(slave_id: int, function_byte: int, payload: bytes) -> ModbusException:
    if not payload:
        raise FrameTooShortError(1, 2, "Exception PDU")

    raw_code = payload[0]
    exception_code = ExceptionCode.from_byte(raw_code)
    if exception_code is None:
        exception_code = ExceptionCode.SLAVE_DEVICE_FAILURE

    if _LOGGER.isEnabledFor(logging.DEBUG):
        _LOGGER.debug(
            "Modbus exception: slave=0x%02X, func=0x%02X, %s",
            slave_id,
            function_byte,
            format_modbus_error(raw_code),
        )
    return ModbusException(
        slave_id=slave_id,
        function=function_byte & FUNCTION_CODE_MASK,
        exception_code=exception_code,
        raw_code=raw_code,
    )


def _byte_counted_data(payload: bytes, offset: int, label: str) -> bytes:
    """Data following a byte count prefix, checked against that count.

    ``offset`` is the position of the byte count within the PDU, used only
    for the lengths reported in errors.
    """
    if not payload:
        raise FrameTooShortError(offset, offset + 1, "PDU")

    byte_count = payload[0]
    data = payload[1:]
    if len(data) < byte_count:
        raise IncompleteFrameError(offset + 1 + byte_count, offset + len(payload))
    if len(data) > byte_count:
        raise FrameError(
            f"{label} byte count {byte_count} does not match {len(data)} data bytes"
        )
    return data


def _address_quantity(payload: bytes, label: str) -> bytes:
    """The fixed four byte address plus value/quantity block."""
    if len(payload) < _ADDRESS_QUANTITY_SIZE:
        raise FrameTooShortError(len(payload) + 1, _ADDRESS_QUANTITY_SIZE + 1, "PDU")
    if len(payload) > _ADDRESS_QUANTITY_SIZE:
        raise FrameError(
            f"{label} PDU has {len(payload) - _ADDRESS_QUANTITY_SIZE} trailing bytes"
        )
    return payload


def parse_registers(data: bytes) -> List[int]:
    """Unpack big-endian 16-bit registers from response data.

    A trailing odd byte yields a final register of 0.

    Example:
        >>> parse_registers(bytes([0x01, 0xE6, 0x00, 0xFA]))
        [486, 250]
    """
    count = len(data) // 2
    registers = list(struct.unpack(f">{count}H", data[: count * 2]))
    if len(data) % 2:
        registers.append(0)
    return registers


def parse_coils(data: bytes, count: int) -> List[bool]:
    """Unpack LSB-first packed bits.

    Args:
        data: Packed bytes from a Read Coils/Discrete Inputs response
        count: Number of bits requested (padding bits are dropped)

    Returns:
        Up to ``count`` booleans, fewer if ``data`` is too short

    Example:
        >>> parse_coils(bytes([0b00000101]), 3)
        [True, False, True]
    """
    bits: List[bool] = []
    for index, byte in enumerate(data):
        for bit in range(8):
            if index * 8 + bit >= count:
                return bits
            bits.append(bool((byte >> bit) & 1))
    return bits


def pack_coils(values: Sequence[bool]) -> bytes:
    """Pack booleans LSB-first into bytes (inverse of parse_coils)."""
    packed = bytearray((len(values) + 7) // 8)
    for index, value in enumerate(values):
        if value:
            packed[index // 8] |= 1 << (index % 8)
    return bytes(packed)

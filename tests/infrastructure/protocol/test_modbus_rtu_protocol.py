"""Tests for Modbus RTU framing."""

import struct

import pytest

from modbus_master.domain.exceptions import (
    CRCMismatchError,
    FrameTooShortError,
    IncompleteFrameError,
)
from modbus_master.domain.value_objects import (
    ExceptionCode,
    FunctionCode,
    ModbusException,
    ModbusRequest,
    ModbusResponse,
)
from modbus_master.infrastructure.protocol import (
    ModbusCRC16,
    ModbusRTUProtocol,
    build_rtu_request,
    build_rtu_write_multiple_coils,
    build_rtu_write_multiple_registers,
    build_rtu_write_single_coil,
    build_rtu_write_single_register,
    crc16_modbus,
    parse_rtu_frame,
    parse_rtu_request,
)


def with_crc(data: bytes) -> bytes:
    """Append a valid little-endian CRC."""
    return data + struct.pack("<H", crc16_modbus(data))


class TestBuildRtuRequest:
    """Test RTU request building."""

    def test_read_holding_frame(self):
        frame = build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 1)
        assert frame == bytes([0x01, 0x03, 0x01, 0x00, 0x00, 0x01, 0x85, 0xF6])

    def test_frame_length(self):
        frame = build_rtu_request(1, FunctionCode.READ_INPUT_REGISTERS, 0, 10)
        assert len(frame) == 8

    def test_crc_is_little_endian(self):
        frame = build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 2)
        assert struct.unpack("<H", frame[-2:])[0] == 0xF7C5

    def test_invalid_slave_raises(self):
        with pytest.raises(ValueError, match="Slave ID"):
            build_rtu_request(256, FunctionCode.READ_HOLDING_REGISTERS, 0, 1)

    def test_invalid_count_raises(self):
        with pytest.raises(ValueError, match="Quantity must be 1-125"):
            build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0, 126)

    def test_write_single_register(self):
        frame = build_rtu_write_single_register(1, 0x0100, 300)
        assert frame == bytes([0x01, 0x06, 0x01, 0x00, 0x01, 0x2C, 0x88, 0x7B])

    def test_write_single_coil(self):
        frame = build_rtu_write_single_coil(1, 0x0013, True)
        assert frame[:6] == bytes([0x01, 0x05, 0x00, 0x13, 0xFF, 0x00])
        assert parse_rtu_frame(frame).slave_id == 1

    def test_write_multiple_registers_layout(self):
        frame = build_rtu_write_multiple_registers(0x11, 0x0001, [0x000A, 0x0102])
        assert frame[:-2] == bytes(
            [0x11, 0x10, 0x00, 0x01, 0x00, 0x02, 0x04, 0x00, 0x0A, 0x01, 0x02]
        )
        assert struct.unpack("<H", frame[-2:])[0] == crc16_modbus(frame[:-2])

    def test_write_multiple_coils_layout(self):
        frame = build_rtu_write_multiple_coils(1, 0x0013, [True, False, True])
        assert frame[:-2] == bytes([0x01, 0x0F, 0x00, 0x13, 0x00, 0x03, 0x01, 0x05])


class TestParseRtuFrame:
    """Test RTU frame parsing."""

    @pytest.mark.parametrize("slave_id", [0, 1, 17, 247, 255])
    @pytest.mark.parametrize(
        "function",
        [
            FunctionCode.READ_COILS,
            FunctionCode.READ_DISCRETE_INPUTS,
            FunctionCode.READ_HOLDING_REGISTERS,
            FunctionCode.READ_INPUT_REGISTERS,
        ],
    )
    @pytest.mark.parametrize("address,quantity", [(0, 1), (0x0100, 2), (0x1234, 125)])
    def test_built_request_parses_with_same_slave(self, slave_id, function, address, quantity):
        frame = parse_rtu_request(build_rtu_request(slave_id, function, address, quantity))
        assert frame.slave_id == slave_id

    def test_built_request_classified_as_request(self):
        frame = parse_rtu_request(
            build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 2)
        )
        assert isinstance(frame, ModbusRequest)
        assert frame.function is FunctionCode.READ_HOLDING_REGISTERS
        assert frame.start_address == 0x0100
        assert frame.quantity == 2

    def test_read_response(self):
        data = with_crc(bytes([0x01, 0x03, 0x04, 0x01, 0xE6, 0x00, 0xFA]))
        frame = parse_rtu_frame(data)
        assert isinstance(frame, ModbusResponse)
        assert frame.data == bytes([0x01, 0xE6, 0x00, 0xFA])

    def test_request_with_byte_count_shaped_address(self):
        # Address high byte 0x03 reads like a byte count of three
        data = build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0300, 2)
        frame = parse_rtu_request(data)
        assert isinstance(frame, ModbusRequest)
        assert frame.start_address == 0x0300
        assert frame.quantity == 2

    def test_truncated_response_with_valid_crc_is_incomplete(self):
        data = with_crc(bytes([0x01, 0x03, 0x06, 0x00, 0x01, 0x00]))
        with pytest.raises(IncompleteFrameError) as exc_info:
            parse_rtu_frame(data)
        assert exc_info.value.expected == 8
        assert exc_info.value.available == 5

    def test_write_single_request(self):
        frame = parse_rtu_request(build_rtu_write_single_register(1, 0x0100, 300))
        assert isinstance(frame, ModbusRequest)
        assert frame.start_address == 0x0100
        assert frame.quantity == 1
        assert frame.data == bytes([0x01, 0x2C])

    def test_response_never_classified_as_request(self):
        frame = parse_rtu_frame(with_crc(bytes([0x01, 0x10, 0x00, 0x01, 0x00, 0x02])))
        assert isinstance(frame, ModbusResponse)
        assert frame.data == bytes([0x00, 0x01, 0x00, 0x02])

    def test_exception_response(self):
        frame = parse_rtu_frame(with_crc(bytes([0x01, 0x83, 0x02])))
        assert isinstance(frame, ModbusException)
        assert frame.function == 0x03
        assert frame.exception_code is ExceptionCode.ILLEGAL_DATA_ADDRESS

    def test_crc_mismatch_raises(self):
        data = bytearray(with_crc(bytes([0x01, 0x03, 0x02, 0x00, 0x2A])))
        data[-1] ^= 0xFF
        with pytest.raises(CRCMismatchError) as exc_info:
            parse_rtu_frame(bytes(data))
        assert exc_info.value.calculated == crc16_modbus(bytes(data[:-2]))

    def test_crc_mismatch_logs_warning(self, caplog):
        data = bytes([0x01, 0x03, 0x02, 0x00, 0x2A, 0x00, 0x00])
        with pytest.raises(CRCMismatchError):
            parse_rtu_frame(data)
        assert "CRC mismatch" in caplog.text

    def test_corrupted_payload_fails_crc(self):
        data = bytearray(with_crc(bytes([0x01, 0x03, 0x02, 0x00, 0x2A])))
        data[4] = 0x2B
        with pytest.raises(CRCMismatchError):
            parse_rtu_frame(bytes(data))

    @pytest.mark.parametrize("length", [0, 1, 2, 3])
    def test_too_short_raises(self, length):
        with pytest.raises(FrameTooShortError):
            parse_rtu_frame(bytes(length))

    def test_exception_frame_needs_five_bytes(self):
        with pytest.raises(FrameTooShortError):
            parse_rtu_frame(with_crc(bytes([0x01, 0x83])))


class TestModbusRTUProtocol:
    """Test the IProtocol implementation."""

    def test_build_read_request_uses_injected_crc(self):
        protocol = ModbusRTUProtocol(ModbusCRC16())
        frame = protocol.build_read_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 1)
        assert frame == build_rtu_request(1, FunctionCode.READ_HOLDING_REGISTERS, 0x0100, 1)

    def test_parse_response(self):
        protocol = ModbusRTUProtocol()
        frame = protocol.parse_response(with_crc(bytes([0x02, 0x04, 0x02, 0x00, 0x07])))
        assert frame.slave_id == 2
        assert frame.data == bytes([0x00, 0x07])

    def test_write_helpers(self):
        protocol = ModbusRTUProtocol()
        assert protocol.build_write_single_register(1, 0x0100, 300)[1] == 0x06
        assert protocol.build_write_multiple_registers(1, 0, [1, 2])[1] == 0x10

"""Protocol layer implementations."""

from .modbus_crc16 import ModbusCRC16, crc16_modbus
from .pdu import pack_coils, parse_coils, parse_pdu, parse_registers
from .modbus_rtu_protocol import (
    ModbusRTUProtocol,
    build_rtu_request,
    build_rtu_write_multiple_coils,
    build_rtu_write_multiple_registers,
    build_rtu_write_single_coil,
    build_rtu_write_single_register,
    parse_rtu_frame,
    parse_rtu_request,
)
from .modbus_tcp_protocol import (
    ModbusTCPProtocol,
    build_tcp_frame,
    build_tcp_request,
    build_tcp_write_multiple_registers,
    parse_tcp_frame,
    parse_tcp_request,
)
from .frame_formatter import format_frame

__all__ = [
    "ModbusCRC16",
    "crc16_modbus",
    "pack_coils",
    "parse_coils",
    "parse_pdu",
    "parse_registers",
    "ModbusRTUProtocol",
    "build_rtu_request",
    "build_rtu_write_multiple_coils",
    "build_rtu_write_multiple_registers",
    "build_rtu_write_single_coil",
    "build_rtu_write_single_register",
    "parse_rtu_frame",
    "parse_rtu_request",
    "ModbusTCPProtocol",
    "build_tcp_frame",
    "build_tcp_request",
    "build_tcp_write_multiple_registers",
    "parse_tcp_frame",
    "parse_tcp_request",
    "format_frame",
]

"""Human-readable frame dumps for logs and traffic monitors."""

import struct

from ...const import MBAP_HEADER_SIZE, RTU_CRC_SIZE, RTU_MIN_FRAME_SIZE, TCP_MIN_FRAME_SIZE
from ...domain.value_objects import FramingMode


def format_frame(data: bytes, mode: FramingMode) -> str:
    """Describe a raw frame without validating it.

    Examples:
        >>> format_frame(bytes.fromhex("01030100000185f6"), FramingMode.RTU)
        'RTU: Slave=01 Func=03 Data=01000001 CRC=F685'
        >>> format_frame(bytes.fromhex("00010000000601030000000a"), FramingMode.TCP)
        'TCP: Trans=0001 Unit=01 Func=03 Data=0000000a'
    """
    if mode is FramingMode.RTU:
        if len(data) < RTU_MIN_FRAME_SIZE:
            return "Invalid RTU frame"
        crc = struct.unpack("<H", data[-RTU_CRC_SIZE:])[0]
        return (
            f"RTU: Slave={data[0]:02X} Func={data[1]:02X} "
            f"Data={data[2:-RTU_CRC_SIZE].hex()} CRC={crc:04X}"
        )

    if len(data) < TCP_MIN_FRAME_SIZE:
        return "Invalid TCP frame"
    transaction_id = struct.unpack(">H", data[:2])[0]
    return (
        f"TCP: Trans={transaction_id:04X} Unit={data[6]:02X} "
        f"Func={data[MBAP_HEADER_SIZE]:02X} Data={data[MBAP_HEADER_SIZE + 1:].hex()}"
    )

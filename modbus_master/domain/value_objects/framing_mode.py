"""Modbus framing variants."""

from enum import Enum


class FramingMode(Enum):
    """Envelope wrapped around a PDU.

    RTU frames carry the slave id and a trailing CRC-16; TCP frames carry
    an MBAP header instead.
    """

    RTU = "rtu"
    TCP = "tcp"

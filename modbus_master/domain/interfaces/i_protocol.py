"""IProtocol interface for Modbus framing implementations."""

from abc import ABC, abstractmethod

from ..value_objects import FunctionCode, ModbusFrame


class IProtocol(ABC):
    """Interface for building and parsing framed Modbus messages.

    Implementations wrap the shared PDU codec in an envelope (RTU CRC or
    TCP MBAP header).
    """

    @abstractmethod
    def build_read_request(
        self, slave_id: int, function: FunctionCode, address: int, count: int
    ) -> bytes:
        """Build a framed read request.

        Args:
            slave_id: Device address (unit id on TCP)
            function: Read function code
            address: First address to read
            count: Number of registers or bits

        Returns:
            Complete frame ready to send

        Raises:
            ValueError: If any argument is out of range
        """

    @abstractmethod
    def parse_response(self, data: bytes) -> ModbusFrame:
        """Parse a received frame.

        Args:
            data: Complete frame as received

        Returns:
            ModbusResponse or ModbusException

        Raises:
            FrameError: If the frame is malformed
        """

"""Register reader that speaks Modbus over a byte transport.

This is the bridge between the polling scheduler's read contract and the
frame codec: it builds a read request, exchanges it over an ITransport and
turns the reply into register words.
"""

import logging
from typing import List, Optional

from ...const import DEFAULT_RESPONSE_TIMEOUT
from ...domain.exceptions import FrameError, ModbusDeviceError
from ...domain.interfaces import IProtocol, IRegisterReader, ITransport
from ...domain.value_objects import ModbusException, ModbusResponse, RegisterType
from ..decorators import handle_transport_errors, require_connection
from ..protocol.modbus_rtu_protocol import ModbusRTUProtocol
from ..protocol.pdu import parse_coils, parse_registers

_LOGGER = logging.getLogger(__name__)


class FrameRegisterReader(IRegisterReader):
    """IRegisterReader backed by a protocol and a transport.

    Coils and discrete inputs are returned as 0/1 words so that every
    register type flows through the same conversion path.

    Example:
        >>> reader = FrameRegisterReader(transport, ModbusRTUProtocol())
        >>> await poller.start(reader)
    """

    def __init__(
        self,
        transport: ITransport,
        protocol: Optional[IProtocol] = None,
        timeout: float = DEFAULT_RESPONSE_TIMEOUT,
    ):
        """Initialize reader.

        Args:
            transport: Connected byte transport
            protocol: Framing to use (default: RTU)
            timeout: Seconds to wait for each reply
        """
        self._transport = transport
        self._protocol = protocol or ModbusRTUProtocol()
        self._timeout = timeout

    @handle_transport_errors("Modbus read")
    @require_connection()
    async def read(
        self,
        slave_id: int,
        register_type: RegisterType,
        start_address: int,
        count: int,
    ) -> List[int]:
        """Read ``count`` registers or bits.

        Raises:
            TransportError: If the transport is down or the exchange fails
            ModbusDeviceError: If the device answered with an exception
            FrameError: If the reply is malformed or does not match the request
        """
        function = register_type.read_function_code
        request = self._protocol.build_read_request(
            slave_id, function, start_address, count
        )

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Reading %s: slave=%d, addr=0x%04X, count=%d",
                register_type.value,
                slave_id,
                start_address,
                count,
            )

        reply = await self._transport.send(request, timeout=self._timeout)
        frame = self._protocol.parse_response(reply)

        if isinstance(frame, ModbusException):
            raise ModbusDeviceError(
                frame.slave_id, frame.function, frame.exception_code, frame.raw_code
            )
        if not isinstance(frame, ModbusResponse):
            raise FrameError(f"Expected a response, got {type(frame).__name__}")
        if frame.slave_id != slave_id:
            raise FrameError(
                f"Response from slave {frame.slave_id}, expected {slave_id}"
            )
        if frame.function is not function:
            raise FrameError(
                f"Response function 0x{frame.function:02X}, expected 0x{function:02X}"
            )

        if register_type.is_bit:
            values = [int(bit) for bit in parse_coils(frame.data, count)]
        else:
            values = parse_registers(frame.data)

        if len(values) != count:
            raise FrameError(f"Expected {count} values, got {len(values)}")
        return values

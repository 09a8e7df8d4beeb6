"""ITransport interface for raw byte transports."""

from abc import ABC, abstractmethod


class ITransport(ABC):
    """Interface for request/response byte transports.

    The transport moves complete frames; it knows nothing about Modbus.
    Serial lines carry RTU frames, sockets carry TCP frames.

    Connection lifecycle:
        1. connect(address) -> establishes the link
        2. send(data) -> writes a frame and returns the reply (repeatedly)
        3. disconnect() -> closes the link
    """

    @abstractmethod
    async def connect(self, address: str) -> bool:
        """Establish the link.

        Args:
            address: Transport specific address ("host:port", "/dev/ttyUSB0")

        Returns:
            True if the link is up
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the link. Safe to call more than once."""

    @abstractmethod
    async def send(self, data: bytes, timeout: float = 1.0) -> bytes:
        """Send a frame and wait for the reply.

        Args:
            data: Complete frame to send
            timeout: Seconds to wait for the reply

        Returns:
            Reply frame

        Raises:
            TransportError: If not connected or the exchange fails
            asyncio.TimeoutError: If no reply arrives in time
        """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """True while the link is up."""

"""ICRC interface for checksum implementations."""

from abc import ABC, abstractmethod


class ICRC(ABC):
    """Interface for frame checksum calculation.

    Example:
        >>> crc = ModbusCRC16()
        >>> crc.calculate(b"123456789")
        19255
        >>> crc.validate(b"123456789", 0x4B37)
        True
    """

    @abstractmethod
    def calculate(self, data: bytes) -> int:
        """Calculate the checksum of ``data``.

        Args:
            data: Bytes to checksum (without any trailing checksum)

        Returns:
            16-bit checksum
        """

    @abstractmethod
    def validate(self, data: bytes, expected_crc: int) -> bool:
        """Check ``data`` against a received checksum.

        Args:
            data: Frame contents without the checksum
            expected_crc: Checksum as received

        Returns:
            True if the calculated checksum matches
        """

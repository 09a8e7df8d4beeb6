"""IRegisterReader interface: the polling scheduler's read contract."""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List

from ..value_objects import RegisterType

# Signature of the read function accepted by the scheduler
ReadFunction = Callable[[int, RegisterType, int, int], Awaitable[List[int]]]


class IRegisterReader(ABC):
    """Reads a contiguous block of registers or bits from a device.

    The scheduler accepts any async callable with the same signature as
    ``read``; this class exists for implementations that want a named type.
    Instances are callable, so they can be passed to ``ModbusPoller.start``
    directly.
    """

    @abstractmethod
    async def read(
        self,
        slave_id: int,
        register_type: RegisterType,
        start_address: int,
        count: int,
    ) -> List[int]:
        """Read ``count`` consecutive values starting at ``start_address``.

        Returns:
            Exactly ``count`` words (0/1 for coils and discrete inputs)

        Raises:
            Exception: Any failure; the scheduler reports it as an error
                reading and keeps polling
        """

    async def __call__(
        self,
        slave_id: int,
        register_type: RegisterType,
        start_address: int,
        count: int,
    ) -> List[int]:
        return await self.read(slave_id, register_type, start_address, count)

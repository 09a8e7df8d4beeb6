"""Connection guard decorator."""

import logging
from functools import wraps
from typing import Callable

from ...domain.exceptions import TransportError

_LOGGER = logging.getLogger(__name__)


def require_connection(transport_attr: str = "_transport"):
    """Decorator that refuses to run a coroutine method while disconnected.

    Args:
        transport_attr: Name of the instance attribute holding the ITransport

    Example:
        @require_connection()
        async def read(self, slave_id, register_type, start_address, count):
            # Transport is connected - just do work
            ...
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            transport = getattr(self, transport_attr)
            if not transport.is_connected:
                _LOGGER.debug("%s called while transport is disconnected", func.__name__)
                raise TransportError("Transport is not connected")
            return await func(self, *args, **kwargs)

        return wrapper

    return decorator

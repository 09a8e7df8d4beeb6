"""Error logging decorator for the transport boundary."""

import asyncio
import logging
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type

from ...domain.exceptions import FrameError, ModbusDeviceError, TransportError

# Expected failures of a Modbus exchange, logged without a stack trace.
# Order matters: the first matching class wins.
_EXPECTED_ERRORS: Tuple[Tuple[Type[BaseException], str], ...] = (
    (ModbusDeviceError, "device error"),
    (FrameError, "frame error"),
    (TransportError, "transport error"),
)


def _timeout_of(args: tuple, kwargs: dict) -> Any:
    """Timeout of the failed call: explicit kwarg or the instance setting."""
    if "timeout" in kwargs:
        return kwargs["timeout"]
    if args:
        return getattr(args[0], "_timeout", "unknown")
    return "unknown"


def handle_transport_errors(
    operation_name: str,
    logger: Optional[logging.Logger] = None,
    reraise: bool = True,
    default_return: Any = None,
):
    """Log failures of a transport operation, then re-raise or substitute.

    Timeouts are logged as warnings, device exception responses, framing
    and transport errors as errors without traceback, anything else as an
    error with traceback.

    Args:
        operation_name: Human-readable operation name for logging
        logger: Logger to use (defaults to function's module logger)
        reraise: Whether to re-raise exception after logging
        default_return: Value to return on error if not re-raising

    Example:
        @handle_transport_errors("Modbus read")
        async def read(self, slave_id, register_type, start_address, count):
            reply = await self._transport.send(request, timeout=self._timeout)
            return self._decode(reply)
    """

    def decorator(func: Callable):
        log = logger or logging.getLogger(func.__module__)

        def on_error(err: Exception, args: tuple, kwargs: dict) -> Any:
            if isinstance(err, asyncio.TimeoutError):
                log.warning(
                    "%s timed out after %ss: %s",
                    operation_name,
                    _timeout_of(args, kwargs),
                    err,
                )
            else:
                for error_type, label in _EXPECTED_ERRORS:
                    if isinstance(err, error_type):
                        log.error("%s %s: %s", operation_name, label, err)
                        break
                else:
                    log.error(
                        "%s unexpected error: %s", operation_name, err, exc_info=True
                    )
            if reraise:
                raise err
            return default_return

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as err:
                return on_error(err, args, kwargs)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as err:
                return on_error(err, args, kwargs)

        return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper

    return decorator

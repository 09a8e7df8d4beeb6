"""Value objects for the Modbus master domain.

Value objects are immutable domain primitives: equality is based on
value, they validate at construction and never change afterwards.
"""

from .function_code import FunctionCode
from .exception_code import ExceptionCode, format_modbus_error
from .framing_mode import FramingMode
from .modbus_frame import (
    MbapHeader,
    ModbusException,
    ModbusFrame,
    ModbusRequest,
    ModbusResponse,
)
from .modbus_value import ModbusValue, ValueKind
from .data_type import ModbusDataType
from .register_type import RegisterType
from .polling_event import (
    ErrorEvent,
    PollingEvent,
    ReadingsEvent,
    StartedEvent,
    StoppedEvent,
    ValueChangedEvent,
)

__all__ = [
    "FunctionCode",
    "ExceptionCode",
    "format_modbus_error",
    "FramingMode",
    "MbapHeader",
    "ModbusException",
    "ModbusFrame",
    "ModbusRequest",
    "ModbusResponse",
    "ModbusValue",
    "ValueKind",
    "ModbusDataType",
    "RegisterType",
    "ErrorEvent",
    "PollingEvent",
    "ReadingsEvent",
    "StartedEvent",
    "StoppedEvent",
    "ValueChangedEvent",
]

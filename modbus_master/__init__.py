"""Modbus master protocol engine and register polling scheduler."""

from .domain.entities import (
    OptimizedRead,
    PollGroup,
    RegisterDefinition,
    RegisterDefinitionBuilder,
    RegisterReading,
)
from .domain.exceptions import (
    ConfigurationError,
    CRCMismatchError,
    FrameError,
    FrameTooShortError,
    IncompleteFrameError,
    InvalidProtocolIdError,
    ModbusDeviceError,
    ModbusMasterError,
    TransportError,
    UnknownFunctionCodeError,
)
from .domain.interfaces import IEventSink, IRegisterReader, ITransport
from .domain.value_objects import (
    ErrorEvent,
    ExceptionCode,
    FramingMode,
    FunctionCode,
    ModbusDataType,
    ModbusValue,
    PollingEvent,
    ReadingsEvent,
    RegisterType,
    StartedEvent,
    StoppedEvent,
    ValueChangedEvent,
)
from .infrastructure.events import QueueEventSink
from .infrastructure.transport import FrameRegisterReader
from .poller import ModbusPoller, PollerState

__version__ = "0.1.0"

__all__ = [
    "OptimizedRead",
    "PollGroup",
    "RegisterDefinition",
    "RegisterDefinitionBuilder",
    "RegisterReading",
    "ConfigurationError",
    "CRCMismatchError",
    "FrameError",
    "FrameTooShortError",
    "IncompleteFrameError",
    "InvalidProtocolIdError",
    "ModbusDeviceError",
    "ModbusMasterError",
    "TransportError",
    "UnknownFunctionCodeError",
    "IEventSink",
    "IRegisterReader",
    "ITransport",
    "ErrorEvent",
    "ExceptionCode",
    "FramingMode",
    "FunctionCode",
    "ModbusDataType",
    "ModbusValue",
    "PollingEvent",
    "ReadingsEvent",
    "RegisterType",
    "StartedEvent",
    "StoppedEvent",
    "ValueChangedEvent",
    "QueueEventSink",
    "FrameRegisterReader",
    "ModbusPoller",
    "PollerState",
]

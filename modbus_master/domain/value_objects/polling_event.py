"""Polling events emitted by the scheduler.

The event stream is the scheduler's only output contract:
``StartedEvent`` always comes first and ``StoppedEvent`` always last, with
``ReadingsEvent``, ``ValueChangedEvent`` and ``ErrorEvent`` in between.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple, Union

from .modbus_value import ModbusValue
from .register_type import RegisterType

if TYPE_CHECKING:
    from ..entities.register_reading import RegisterReading


@dataclass(frozen=True)
class StartedEvent:
    """Polling loop started."""


@dataclass(frozen=True)
class StoppedEvent:
    """Polling loop stopped after its last tick completed."""


@dataclass(frozen=True)
class ReadingsEvent:
    """One batch of readings for a poll group.

    Readings are ordered address-ascending per register type, with register
    types in the order they were first declared in the group.
    """

    group: str
    readings: Tuple[RegisterReading, ...]


@dataclass(frozen=True)
class ValueChangedEvent:
    """A change-detecting register decoded to a different value."""

    register: str
    old_value: Optional[ModbusValue]
    new_value: ModbusValue


@dataclass(frozen=True)
class ErrorEvent:
    """A wire read failed; polling continues on the next tick.

    Attributes:
        message: Transport error text
        group: Poll group that issued the read
        slave_id: Device the read targeted
        register_type: Table being read
        start_address: First address of the failed read
        count: Quantity of the failed read
    """

    message: str
    group: str = ""
    slave_id: Optional[int] = None
    register_type: Optional[RegisterType] = None
    start_address: Optional[int] = None
    count: Optional[int] = None


PollingEvent = Union[
    StartedEvent,
    StoppedEvent,
    ReadingsEvent,
    ValueChangedEvent,
    ErrorEvent,
]

"""Test doubles for unit testing.

Test doubles are fake implementations of interfaces used for testing.
They're faster and more reliable than mocking, and they implement the
actual interface contracts.

Example:
    >>> from tests.doubles import FakeRegisterReader
    >>> reader = FakeRegisterReader()
    >>> reader.set_registers(1, RegisterType.HOLDING, 0x0100, [486, 250])
    >>> await reader.read(1, RegisterType.HOLDING, 0x0100, 2)
    [486, 250]
"""

from .fake_transport import FakeTransport
from .fake_register_reader import FakeRegisterReader
from .recording_event_sink import RecordingEventSink

__all__ = [
    "FakeTransport",
    "FakeRegisterReader",
    "RecordingEventSink",
]

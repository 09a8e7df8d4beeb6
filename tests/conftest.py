"""Pytest configuration and fixtures for modbus_master tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to Python path so we can import modbus_master
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from modbus_master.domain.entities import PollGroup, RegisterDefinition
from modbus_master.domain.value_objects import ModbusDataType, RegisterType
from tests.doubles import FakeRegisterReader, FakeTransport, RecordingEventSink


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Return a connected-on-demand fake transport."""
    return FakeTransport()


@pytest.fixture
def fake_reader() -> FakeRegisterReader:
    """Return an in-memory register reader."""
    return FakeRegisterReader()


@pytest.fixture
def event_sink() -> RecordingEventSink:
    """Return an event sink that records every event."""
    return RecordingEventSink()


@pytest.fixture
def inverter_group() -> PollGroup:
    """Group with three adjacent holding registers and one far away."""
    group = PollGroup("inverter", slave_id=1, interval=1.0)
    group.add_register(RegisterDefinition(0x0100, "battery_voltage", scale=0.1, unit="V"))
    group.add_register(RegisterDefinition(0x0101, "battery_current", scale=0.01, unit="A"))
    group.add_register(
        RegisterDefinition(
            0x0102,
            "inverter_temperature",
            data_type=ModbusDataType.I16,
            scale=0.1,
            unit="°C",
            detect_change=True,
        )
    )
    group.add_register(
        RegisterDefinition(
            0x0200,
            "grid_power",
            data_type=ModbusDataType.I32BE,
            register_type=RegisterType.INPUT,
            unit="W",
        )
    )
    return group

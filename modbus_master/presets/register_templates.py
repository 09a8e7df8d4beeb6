"""Register templates for common measurements.

Each template returns a complete RegisterDefinition for a holding register
with the usual data type, unit and scaling of that measurement. Use
``dataclasses.replace`` to adjust a template to a specific device.
"""

from __future__ import annotations

from typing import Callable, Dict

from ..domain.entities import RegisterDefinition
from ..domain.exceptions import ConfigurationError
from ..domain.value_objects import ModbusDataType

TemplateFactory = Callable[[int, str], RegisterDefinition]


# ============================================================================
# ENVIRONMENT
# ============================================================================


def temperature(address: int, name: str) -> RegisterDefinition:
    """Signed temperature in tenths of a degree, change-detected."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.I16)
        .unit("°C")
        .scale_offset(0.1, 0.0)
        .with_change_detection()
        .build()
    )


def humidity(address: int, name: str) -> RegisterDefinition:
    """Relative humidity in tenths of a percent."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.U16)
        .unit("%")
        .scale_offset(0.1, 0.0)
        .build()
    )


def pressure_f32(address: int, name: str) -> RegisterDefinition:
    """Pressure as a big-endian float32 in bar."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.F32BE)
        .unit("bar")
        .build()
    )


# ============================================================================
# COUNTERS AND STATUS
# ============================================================================


def counter_u32(address: int, name: str) -> RegisterDefinition:
    """32-bit event/pulse counter, change-detected."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.U32BE)
        .with_change_detection()
        .build()
    )


def status_word(address: int, name: str) -> RegisterDefinition:
    """16-bit status field, change-detected."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.BINARY)
        .with_change_detection()
        .build()
    )


# ============================================================================
# ELECTRICAL
# ============================================================================


def energy_kwh(address: int, name: str) -> RegisterDefinition:
    """Energy meter reading as a big-endian float32 in kWh."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.F32BE)
        .unit("kWh")
        .build()
    )


def voltage(address: int, name: str) -> RegisterDefinition:
    """Voltage in tenths of a volt."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.U16)
        .unit("V")
        .scale_offset(0.1, 0.0)
        .build()
    )


def current(address: int, name: str) -> RegisterDefinition:
    """Current in hundredths of an ampere."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.U16)
        .unit("A")
        .scale_offset(0.01, 0.0)
        .build()
    )


def frequency(address: int, name: str) -> RegisterDefinition:
    """Frequency in hundredths of a hertz."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.U16)
        .unit("Hz")
        .scale_offset(0.01, 0.0)
        .build()
    )


def power_w(address: int, name: str) -> RegisterDefinition:
    """Signed active power in watts (negative when exporting)."""
    return (
        RegisterDefinition.builder(address, name)
        .data_type(ModbusDataType.I32BE)
        .unit("W")
        .build()
    )


TEMPLATES: Dict[str, TemplateFactory] = {
    "temperature": temperature,
    "humidity": humidity,
    "pressure_f32": pressure_f32,
    "counter_u32": counter_u32,
    "status_word": status_word,
    "energy_kwh": energy_kwh,
    "voltage": voltage,
    "current": current,
    "frequency": frequency,
    "power_w": power_w,
}


def create_from_template(template: str, address: int, name: str) -> RegisterDefinition:
    """Create a definition from a template name.

    Raises:
        ConfigurationError: If the template is unknown

    Example:
        >>> create_from_template("voltage", 0x0100, "battery_voltage").unit
        'V'
    """
    factory = TEMPLATES.get(template)
    if factory is None:
        raise ConfigurationError(
            f"Unknown register template {template!r}, "
            f"expected one of: {', '.join(sorted(TEMPLATES))}"
        )
    return factory(address, name)

"""RegisterDefinition entity and its fluent builder.

A RegisterDefinition describes one named value on a device: where it lives,
how its raw words are decoded and how the decoded value is scaled. Once a
definition has been added to a poll group it is never mutated; the builder
returns a new instance from every call.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from ...const import MAX_ADDRESS
from ..exceptions import ConfigurationError
from ..value_objects import ModbusDataType, ModbusValue, RegisterType


@dataclass(frozen=True)
class RegisterDefinition:
    """Immutable description of a polled register.

    Attributes:
        address: First register address (0-65535)
        name: Unique name within the poll group
        register_type: Modbus table the register lives in
        data_type: How the raw words are decoded
        unit: Unit of measurement (e.g., "V", "°C")
        scale: Multiplier applied to numeric values
        offset: Added after scaling
        description: Human-readable description
        poll_interval: Optional per-register interval override (seconds)
        detect_change: Emit ValueChanged events when the value changes

    Example:
        >>> definition = (
        ...     RegisterDefinition.builder(0x0100, "battery_voltage")
        ...     .data_type(ModbusDataType.U16)
        ...     .unit("V")
        ...     .scale_offset(0.1, 0.0)
        ...     .build()
        ... )
        >>> definition.count
        1
        >>> definition.apply_scaling(ModbusValue.u64(486))
        48.6
    """

    address: int
    name: str
    register_type: RegisterType = RegisterType.HOLDING
    data_type: ModbusDataType = ModbusDataType.U16
    unit: str = ""
    scale: float = 1.0
    offset: float = 0.0
    description: str = ""
    poll_interval: Optional[float] = None
    detect_change: bool = False

    def __post_init__(self):
        """Validate the definition."""
        if not self.name:
            raise ConfigurationError("Register name must not be empty")
        if not 0 <= self.address <= MAX_ADDRESS:
            raise ConfigurationError(
                f"Register {self.name}: address must be 0-65535, got {self.address}"
            )
        if self.address + self.count - 1 > MAX_ADDRESS:
            raise ConfigurationError(
                f"Register {self.name}: {self.data_type.value} at {self.address} "
                f"runs past address 65535"
            )
        if self.poll_interval is not None and self.poll_interval <= 0:
            raise ConfigurationError(
                f"Register {self.name}: poll interval must be positive, "
                f"got {self.poll_interval}"
            )

    @property
    def count(self) -> int:
        """Number of registers occupied, fixed by the data type."""
        return self.data_type.register_count()

    @property
    def end_address(self) -> int:
        """Last address occupied (inclusive)."""
        return self.address + self.count - 1

    def apply_scaling(self, value: ModbusValue) -> Optional[float]:
        """Scale a decoded value.

        Returns:
            ``value * scale + offset`` for numeric values, None for bit
            fields and strings
        """
        numeric = value.to_float()
        if numeric is None:
            return None
        return numeric * self.scale + self.offset

    @classmethod
    def builder(cls, address: int, name: str) -> "RegisterDefinitionBuilder":
        """Start a fluent definition with holding/U16 defaults."""
        return RegisterDefinitionBuilder(address=address, name=name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert definition to dictionary representation."""
        return {
            "address": self.address,
            "address_hex": f"0x{self.address:04X}",
            "name": self.name,
            "register_type": self.register_type.value,
            "data_type": self.data_type.value,
            "unit": self.unit,
            "scale": self.scale,
            "offset": self.offset,
            "description": self.description,
            "poll_interval": self.poll_interval,
            "detect_change": self.detect_change,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegisterDefinition":
        """Create a definition from dictionary representation.

        Args:
            data: Dictionary with at least ``address`` and ``name``

        Returns:
            RegisterDefinition instance

        Raises:
            ConfigurationError: If a register or data type name is unknown
        """
        try:
            register_type = RegisterType(data.get("register_type", "holding"))
            data_type = ModbusDataType(data.get("data_type", "u16"))
        except ValueError as err:
            raise ConfigurationError(
                f"Register {data.get('name')}: {err}"
            ) from err

        return cls(
            address=data["address"],
            name=data["name"],
            register_type=register_type,
            data_type=data_type,
            unit=data.get("unit", ""),
            scale=data.get("scale", 1.0),
            offset=data.get("offset", 0.0),
            description=data.get("description", ""),
            poll_interval=data.get("poll_interval"),
            detect_change=data.get("detect_change", False),
        )


@dataclass(frozen=True)
class RegisterDefinitionBuilder:
    """Fluent builder for RegisterDefinition.

    Every method returns a new builder, so partially configured builders
    can be shared as templates.
    """

    address: int
    name: str
    _fields: Dict[str, Any] = field(default_factory=dict)

    def _with(self, **changes: Any) -> "RegisterDefinitionBuilder":
        return replace(self, _fields={**self._fields, **changes})

    def register_type(self, register_type: RegisterType) -> "RegisterDefinitionBuilder":
        """Set the Modbus table."""
        return self._with(register_type=register_type)

    def data_type(self, data_type: ModbusDataType) -> "RegisterDefinitionBuilder":
        """Set the decoding rule (and thereby the register count)."""
        return self._with(data_type=data_type)

    def unit(self, unit: str) -> "RegisterDefinitionBuilder":
        return self._with(unit=unit)

    def scale_offset(self, scale: float, offset: float) -> "RegisterDefinitionBuilder":
        """Set ``scaled = value * scale + offset``."""
        return self._with(scale=scale, offset=offset)

    def with_change_detection(self, enabled: bool = True) -> "RegisterDefinitionBuilder":
        return self._with(detect_change=enabled)

    def description(self, description: str) -> "RegisterDefinitionBuilder":
        return self._with(description=description)

    def poll_interval(self, interval: Optional[float]) -> "RegisterDefinitionBuilder":
        """Poll this register on its own cadence instead of the group's."""
        return self._with(poll_interval=interval)

    def build(self) -> RegisterDefinition:
        """Create the definition.

        Raises:
            ConfigurationError: If the accumulated settings are invalid
        """
        return RegisterDefinition(address=self.address, name=self.name, **self._fields)

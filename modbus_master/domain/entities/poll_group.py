"""PollGroup entity.

A poll group is the unit of independent scheduling: one slave device, one
interval, a set of register definitions and an enabled flag.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ...const import DEFAULT_POLL_INTERVAL, DEFAULT_SLAVE_ID, MAX_SLAVE_ID, MIN_SLAVE_ID
from ..exceptions import ConfigurationError
from .optimized_read import OptimizedRead
from .register_definition import RegisterDefinition


@dataclass
class PollGroup:
    """Registers polled together from one device.

    Attributes:
        name: Unique group name
        slave_id: Device address (0-255)
        interval: Seconds between polls
        registers: Owned definitions, names unique within the group
        enabled: Disabled groups are never read

    Example:
        >>> group = PollGroup("inverter", slave_id=1, interval=2.0)
        >>> group = group.add_register(RegisterDefinition(0x0100, "battery_voltage"))
        >>> [read.count for read in group.optimize_reads()]
        [1]
    """

    name: str
    slave_id: int = DEFAULT_SLAVE_ID
    interval: float = DEFAULT_POLL_INTERVAL
    registers: List[RegisterDefinition] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self):
        """Validate group settings and initial registers."""
        if not self.name:
            raise ConfigurationError("Poll group name must not be empty")
        if not MIN_SLAVE_ID <= self.slave_id <= MAX_SLAVE_ID:
            raise ConfigurationError(
                f"Poll group {self.name}: slave id must be 0-255, got {self.slave_id}"
            )
        if self.interval <= 0:
            raise ConfigurationError(
                f"Poll group {self.name}: interval must be positive, got {self.interval}"
            )

        initial = list(self.registers)
        self.registers = []
        for definition in initial:
            self.add_register(definition)

    def add_register(self, definition: RegisterDefinition) -> "PollGroup":
        """Add a definition to the group.

        Returns:
            The group itself, for chaining

        Raises:
            ConfigurationError: If a register with the same name exists
        """
        if self.get_register(definition.name) is not None:
            raise ConfigurationError(
                f"Poll group {self.name}: duplicate register name {definition.name}"
            )
        self.registers.append(definition)
        return self

    def remove_register(self, name: str) -> bool:
        """Remove a definition by name. Returns True if one was removed."""
        for index, definition in enumerate(self.registers):
            if definition.name == name:
                del self.registers[index]
                return True
        return False

    def get_register(self, name: str) -> Optional[RegisterDefinition]:
        for definition in self.registers:
            if definition.name == name:
                return definition
        return None

    def optimize_reads(self, optimizer=None) -> List[OptimizedRead]:
        """Merge this group's definitions into wire reads.

        Args:
            optimizer: ReadOptimizer to use (default: standard gap size)
        """
        if optimizer is None:
            from ..services.read_optimizer import ReadOptimizer

            optimizer = ReadOptimizer()
        return optimizer.optimize(self.registers)

    def snapshot(self) -> "PollGroup":
        """Copy safe to iterate while the original is being modified."""
        copy = PollGroup.__new__(PollGroup)
        copy.name = self.name
        copy.slave_id = self.slave_id
        copy.interval = self.interval
        copy.registers = list(self.registers)
        copy.enabled = self.enabled
        return copy

    def __len__(self) -> int:
        return len(self.registers)

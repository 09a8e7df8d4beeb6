"""OptimizedRead entity.

An OptimizedRead is one wire request covering several register
definitions of the same table. It is rebuilt on every scheduler tick and
never stored.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, TypeVar

from ..value_objects import FunctionCode, RegisterType
from .register_definition import RegisterDefinition

T = TypeVar("T")


@dataclass
class OptimizedRead:
    """A merged read request.

    Attributes:
        register_type: Table read by this request (never mixed)
        start_address: First address requested
        count: Number of registers or bits requested
        registers: Member definitions, address ascending

    Example:
        >>> read = OptimizedRead(RegisterType.HOLDING, 0, 3)
        >>> read.end_address
        2
    """

    register_type: RegisterType
    start_address: int
    count: int
    registers: List[RegisterDefinition] = field(default_factory=list)

    @property
    def end_address(self) -> int:
        """Last address requested (inclusive)."""
        return self.start_address + self.count - 1

    @property
    def function_code(self) -> FunctionCode:
        return self.register_type.read_function_code

    def covers(self, definition: RegisterDefinition) -> bool:
        """True if the definition's whole address range lies in this read."""
        return (
            definition.register_type is self.register_type
            and definition.address >= self.start_address
            and definition.end_address <= self.end_address
        )

    def slice_for(self, definition: RegisterDefinition, values: Sequence[T]) -> Sequence[T]:
        """Extract the words belonging to one member from the read result.

        Raises:
            ValueError: If the definition lies outside this read
        """
        if not self.covers(definition):
            raise ValueError(f"{definition.name} is not covered by {self}")
        start = definition.address - self.start_address
        return values[start : start + definition.count]

    def __str__(self) -> str:
        return (
            f"{self.register_type.value}@0x{self.start_address:04X}"
            f"+{self.count} ({len(self.registers)} registers)"
        )

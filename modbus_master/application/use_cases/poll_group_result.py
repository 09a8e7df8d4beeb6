"""Poll Group Result DTO."""

from dataclasses import dataclass, field
from typing import List

from ...domain.entities import RegisterReading


@dataclass
class PollGroupResult:
    """Result of polling one group once.

    Attributes:
        group: Poll group name
        readings: One reading per polled register, in emission order
        errors: Number of wire reads that failed
        changed: Names of registers flagged by change detection
        duration: Time taken for all reads (seconds)
    """

    group: str
    readings: List[RegisterReading] = field(default_factory=list)
    errors: int = 0
    changed: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.errors == 0

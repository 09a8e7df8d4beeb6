"""Read optimizer domain service.

Merges register definitions into as few wire reads as possible. Reading a
few unused registers is cheaper than an extra round-trip, so definitions
separated by small gaps share one request.
"""

import logging
from typing import Dict, Iterable, List

from ...const import MAX_GAP_SIZE
from ..entities.optimized_read import OptimizedRead
from ..entities.register_definition import RegisterDefinition
from ..value_objects import RegisterType

_LOGGER = logging.getLogger(__name__)


class ReadOptimizer:
    """Greedy merger of register definitions into OptimizedReads.

    Rules:
    - Definitions are grouped by RegisterType; types are never mixed and
      groups keep the order in which each type first appears.
    - Within a type, definitions are sorted by address and merged while the
      next one starts at most ``max_gap_size`` addresses past the end of the
      current read.
    - A read never exceeds the per-request limit of its table (125
      registers, 2000 bits); a definition that would push it over starts a
      new read.

    Example:
        >>> optimizer = ReadOptimizer()
        >>> reads = optimizer.optimize([
        ...     RegisterDefinition(0, "a"),
        ...     RegisterDefinition(1, "b"),
        ...     RegisterDefinition(2, "c"),
        ...     RegisterDefinition(100, "d"),
        ... ])
        >>> [(r.start_address, r.count) for r in reads]
        [(0, 3), (100, 1)]
    """

    def __init__(self, max_gap_size: int = MAX_GAP_SIZE):
        if max_gap_size < 0:
            raise ValueError(f"max_gap_size must be >= 0, got {max_gap_size}")
        self._max_gap_size = max_gap_size

    @property
    def max_gap_size(self) -> int:
        return self._max_gap_size

    def optimize(self, definitions: Iterable[RegisterDefinition]) -> List[OptimizedRead]:
        """Build the reads covering all definitions.

        Args:
            definitions: Definitions to cover, in declaration order

        Returns:
            Reads grouped by type (discovery order), address ascending
            within each type
        """
        by_type: Dict[RegisterType, List[RegisterDefinition]] = {}
        for definition in definitions:
            by_type.setdefault(definition.register_type, []).append(definition)

        reads: List[OptimizedRead] = []
        for register_type, members in by_type.items():
            reads.extend(self._merge(register_type, members))

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Optimized %d definitions into %d reads: %s",
                sum(len(r.registers) for r in reads),
                len(reads),
                ", ".join(str(r) for r in reads),
            )
        return reads

    def _merge(
        self, register_type: RegisterType, members: List[RegisterDefinition]
    ) -> List[OptimizedRead]:
        limit = register_type.max_read_count
        reads: List[OptimizedRead] = []
        current = None
        current_end = 0  # exclusive

        for definition in sorted(members, key=lambda d: d.address):
            definition_end = definition.address + definition.count
            if current is not None:
                merged_end = max(current_end, definition_end)
                if (
                    definition.address <= current_end + self._max_gap_size
                    and merged_end - current.start_address <= limit
                ):
                    current.registers.append(definition)
                    current_end = merged_end
                    current.count = current_end - current.start_address
                    continue
                reads.append(current)

            current = OptimizedRead(
                register_type=register_type,
                start_address=definition.address,
                count=definition.count,
                registers=[definition],
            )
            current_end = definition_end

        if current is not None:
            reads.append(current)
        return reads

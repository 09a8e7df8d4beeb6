"""Domain entities with identity and behavior."""

from .register_definition import RegisterDefinition, RegisterDefinitionBuilder
from .optimized_read import OptimizedRead
from .register_reading import RegisterReading
from .poll_group import PollGroup

__all__ = [
    "RegisterDefinition",
    "RegisterDefinitionBuilder",
    "OptimizedRead",
    "RegisterReading",
    "PollGroup",
]

"""Domain services: stateless rules that span several entities."""

from .change_detector import ChangeDetector
from .read_optimizer import ReadOptimizer

__all__ = ["ChangeDetector", "ReadOptimizer"]

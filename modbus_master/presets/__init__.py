"""Register templates for common measurements.

Templates cover environment sensors (temperature, humidity, pressure),
counters and status words, and electrical meters (energy, voltage,
current, frequency, power).
"""

from .register_templates import TEMPLATES, create_from_template

__all__ = [
    "TEMPLATES",
    "create_from_template",
]

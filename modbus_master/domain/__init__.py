"""Domain layer: value objects, entities, interfaces and services."""

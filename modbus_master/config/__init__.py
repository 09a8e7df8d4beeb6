"""Configuration file schemas."""

from .schema import CONFIG_SCHEMA, GROUP_SCHEMA, REGISTER_SCHEMA

__all__ = ["CONFIG_SCHEMA", "GROUP_SCHEMA", "REGISTER_SCHEMA"]

"""Configuration loader for poll group definitions."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

import voluptuous as vol
import yaml
from voluptuous.humanize import humanize_error

from .config import CONFIG_SCHEMA
from .const import SUPPORTED_CONFIG_VERSION
from .domain.entities import PollGroup, RegisterDefinition
from .domain.exceptions import ConfigurationError
from .presets import create_from_template

_LOGGER = logging.getLogger(__name__)

_DEFINITION_FIELDS = (
    "register_type",
    "data_type",
    "unit",
    "scale",
    "offset",
    "description",
    "poll_interval",
    "detect_change",
)


def load_poll_groups(path: str | Path) -> list[PollGroup]:
    """Load and validate poll groups from a YAML file.

    Args:
        path: Path to the configuration file

    Returns:
        Poll groups in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the YAML or its contents are invalid
    """
    config_file = Path(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    try:
        config = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as err:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {err}") from err

    groups = parse_poll_groups(config)
    _LOGGER.info(
        "Loaded %d poll groups with %d registers from %s",
        len(groups),
        sum(len(group.registers) for group in groups),
        config_file,
    )
    return groups


async def async_load_poll_groups(path: str | Path) -> list[PollGroup]:
    """Load poll groups without blocking the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_poll_groups, path)


def parse_poll_groups(config: Any) -> list[PollGroup]:
    """Build poll groups from an already parsed configuration mapping.

    Raises:
        ConfigurationError: If the configuration is empty, has an
            unsupported version, fails schema validation or defines
            duplicate names
    """
    if not config:
        raise ConfigurationError("Configuration is empty")
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a mapping")

    if "version" not in config:
        raise ConfigurationError("Configuration missing required 'version' field")
    version = str(config["version"])
    if not version.startswith(SUPPORTED_CONFIG_VERSION):
        raise ConfigurationError(
            f"Configuration version {version} not supported. "
            f"Only version {SUPPORTED_CONFIG_VERSION}x is supported."
        )

    try:
        validated = CONFIG_SCHEMA(config)
    except vol.Invalid as err:
        raise ConfigurationError(
            f"Invalid configuration: {humanize_error(config, err)}"
        ) from err

    groups: list[PollGroup] = []
    seen: set[str] = set()
    for group_config in validated["groups"]:
        if group_config["name"] in seen:
            raise ConfigurationError(f"Duplicate poll group name: {group_config['name']}")
        seen.add(group_config["name"])
        groups.append(_build_group(group_config))
    return groups


def _build_group(config: dict[str, Any]) -> PollGroup:
    group = PollGroup(
        name=config["name"],
        slave_id=config["slave_id"],
        interval=config["interval"],
        enabled=config["enabled"],
    )
    for register_config in config["registers"]:
        group.add_register(_build_definition(register_config))
    return group


def _build_definition(config: dict[str, Any]) -> RegisterDefinition:
    overrides = {key: config[key] for key in _DEFINITION_FIELDS if key in config}
    if "template" in config:
        base = create_from_template(config["template"], config["address"], config["name"])
        return replace(base, **overrides)
    return RegisterDefinition(address=config["address"], name=config["name"], **overrides)

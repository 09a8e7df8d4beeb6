"""Voluptuous schemas for poll group configuration files.

Example file::

    version: "1.0"
    groups:
      - name: inverter
        slave_id: 1
        interval: 2.0
        registers:
          - name: battery_voltage
            address: 0x0100
            template: voltage
          - name: fault_bits
            address: "0x0200"
            data_type: binary
            detect_change: true
            poll_interval: 0.5

Keys a template can set have no schema default, so that an explicit value
overrides the template and an absent one keeps it.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from ..const import DEFAULT_POLL_INTERVAL, DEFAULT_SLAVE_ID, MAX_ADDRESS, MAX_SLAVE_ID, MIN_SLAVE_ID
from ..domain.value_objects import ModbusDataType, RegisterType
from ..presets import TEMPLATES


def register_address(value: Any) -> int:
    """Validate an address given as an int or a "0x..." string."""
    if isinstance(value, bool):
        raise vol.Invalid(f"invalid register address {value!r}")
    if isinstance(value, str):
        try:
            value = int(value, 0)
        except ValueError as err:
            raise vol.Invalid(f"invalid register address {value!r}") from err
    if not isinstance(value, int):
        raise vol.Invalid(f"invalid register address {value!r}")
    if not 0 <= value <= MAX_ADDRESS:
        raise vol.Invalid(f"register address must be 0-65535, got {value}")
    return value


_POSITIVE_SECONDS = vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))

REGISTER_SCHEMA = vol.Schema(
    {
        vol.Required("name"): vol.All(str, vol.Length(min=1)),
        vol.Required("address"): register_address,
        vol.Optional("template"): vol.In(sorted(TEMPLATES)),
        vol.Optional("register_type"): vol.Coerce(RegisterType),
        vol.Optional("data_type"): vol.Coerce(ModbusDataType),
        vol.Optional("unit"): str,
        vol.Optional("scale"): vol.Coerce(float),
        vol.Optional("offset"): vol.Coerce(float),
        vol.Optional("description"): str,
        vol.Optional("poll_interval"): _POSITIVE_SECONDS,
        vol.Optional("detect_change"): bool,
    }
)

GROUP_SCHEMA = vol.Schema(
    {
        vol.Required("name"): vol.All(str, vol.Length(min=1)),
        vol.Optional("slave_id", default=DEFAULT_SLAVE_ID): vol.All(
            int, vol.Range(min=MIN_SLAVE_ID, max=MAX_SLAVE_ID)
        ),
        vol.Optional("interval", default=DEFAULT_POLL_INTERVAL): _POSITIVE_SECONDS,
        vol.Optional("enabled", default=True): bool,
        vol.Optional("registers", default=list): [REGISTER_SCHEMA],
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required("version"): vol.Coerce(str),
        vol.Optional("groups", default=list): [GROUP_SCHEMA],
    }
)

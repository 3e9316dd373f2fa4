#!/usr/bin/env python3
"""ExControl - Test the configuration & device record parsers."""

from typing import Any

import pytest
import voluptuous as vol
import yaml

from excontrol.const import Action
from excontrol.schemas import (
    SCH_CONTROLLER_CONFIG,
    SCH_DEVICE,
    SCH_SCHEDULE_ENTRY,
)
from excontrol_tx.schemas import SCH_DIAG_LOG, qos_from_config


def no_duplicates_constructor(
    loader: yaml.Loader, node: yaml.Node, deep: bool = False
) -> Any:
    """Check for duplicate keys."""
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)  # type: ignore[no-untyped-call]
        if key in mapping:
            raise yaml.constructor.ConstructorError(
                f"Duplicate key: {key} ('{mapping[key]}' overwrites '{value_node}')"
            )
        value = loader.construct_object(value_node, deep=deep)  # type: ignore[no-untyped-call]
        mapping[key] = value
    return loader.construct_mapping(node, deep)


class CheckForDuplicatesLoader(yaml.Loader):
    """Local class to prevent pollution of global yaml.Loader."""

    pass


CheckForDuplicatesLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, no_duplicates_constructor
)


def _test_schema(validator: vol.Schema, config: str) -> dict:
    return validator(yaml.load(config, CheckForDuplicatesLoader))  # type: ignore[no-any-return]


def _test_schema_bad(validator: vol.Schema, config: str) -> None:
    try:
        _test_schema(validator, config)
    except (vol.MultipleInvalid, yaml.YAMLError):
        pass
    else:
        raise TypeError(f"should *not* be valid YAML, but parsed OK: {config}")


def _test_schema_good(validator: vol.Schema, config: str) -> dict:
    try:
        return _test_schema(validator, config)
    except vol.MultipleInvalid as err:
        raise TypeError(
            f"should parse via voluptuous, but didn't: {config} ({err})"
        ) from err
    except yaml.YAMLError as err:
        raise TypeError(f"should be valid YAML, but isn't: {config} ({err})") from err


CONTROLLER_BAD = (
    """
    #  expected a dictionary
    """,
    """
    other_key: null  # extra keys not allowed @ data['other_key']
    """,
    """
    failure_threshold: 0
    """,
    """
    max_retries: 9
    """,
    """
    retry_backoff: -1
    """,
    """
    probe_interval: null
    """,
    """
    diagnostic_log:
      rotate_backups: 7  # required key not provided @ data['file_name']
    """,
)
CONTROLLER_GOOD = (
    """
    {}
    """,
    """
    probe_interval: 30
    failure_threshold: 5
    schedule_interval: 60
    """,
    """
    max_retries: 0
    retry_backoff: 2.5
    send_timeout: 10
    """,
    """
    multi_outlet_type: PDU
    diagnostic_log: diagnostics.log
    """,
    """
    diagnostic_log:
      file_name: diagnostics.log
      rotate_backups: 7
      rotate_bytes: 1000000
    """,
)


@pytest.mark.parametrize("index", range(len(CONTROLLER_BAD)))
def test_controller_config_bad(index: int) -> None:
    _test_schema_bad(SCH_CONTROLLER_CONFIG, CONTROLLER_BAD[index])


@pytest.mark.parametrize("index", range(len(CONTROLLER_GOOD)))
def test_controller_config_good(index: int) -> None:
    _test_schema_good(SCH_CONTROLLER_CONFIG, CONTROLLER_GOOD[index])


def test_controller_config_defaults() -> None:
    config = _test_schema_good(SCH_CONTROLLER_CONFIG, "{}")

    assert config == {
        "probe_interval": 60.0,
        "failure_threshold": 3,
        "schedule_interval": 0,
        "multi_outlet_type": "power_strip",
        "max_retries": 1,
        "retry_backoff": 5.0,
        "send_timeout": 30.0,
        "diagnostic_log": None,
    }

    qos = qos_from_config(config)
    assert (qos.max_retries, qos.backoff, qos.timeout) == (1, 5.0, None)  # transport


def test_diag_log_short_form() -> None:
    config = _test_schema_good(SCH_DIAG_LOG, "diagnostic_log: diagnostics.log")

    assert config["diagnostic_log"] == {
        "file_name": "diagnostics.log",
        "rotate_backups": 7,
        "rotate_bytes": None,
    }


SCHEDULE_ENTRY_BAD = (
    """
    action: reboot
    days: [monday]
    time: "09:00"
    """,
    """
    days: [monday]  # required key not provided @ data['action']
    time: "09:00"
    """,
    """
    action: turn_on
    days: [funday]
    time: "09:00"
    """,
    """
    action: turn_on
    one_time_utc: "2025-03-05 09:00"
    has_triggered: maybe
    """,
)
SCHEDULE_ENTRY_GOOD = (
    """
    action: turn_on
    days: [monday, Friday]
    time: "09:00"
    """,
    """
    action: TURN_OFF
    one_time_utc: "2025-03-05T18:30"
    has_triggered: false
    """,
    """
    action: turn_on
    days: [monday]
    time: "whenever"  # parsed when evaluated, never due
    """,
)


@pytest.mark.parametrize("index", range(len(SCHEDULE_ENTRY_BAD)))
def test_schedule_entry_bad(index: int) -> None:
    _test_schema_bad(SCH_SCHEDULE_ENTRY, SCHEDULE_ENTRY_BAD[index])


@pytest.mark.parametrize("index", range(len(SCHEDULE_ENTRY_GOOD)))
def test_schedule_entry_good(index: int) -> None:
    _test_schema_good(SCH_SCHEDULE_ENTRY, SCHEDULE_ENTRY_GOOD[index])


def test_schedule_entry_normalised() -> None:
    entry = _test_schema_good(SCH_SCHEDULE_ENTRY, SCHEDULE_ENTRY_GOOD[0])
    assert entry["action"] is Action.TURN_ON
    assert entry["days"] == ["monday", "friday"]
    assert entry["has_triggered"] is False

    entry = _test_schema_good(SCH_SCHEDULE_ENTRY, SCHEDULE_ENTRY_GOOD[1])
    assert entry["action"] is Action.TURN_OFF
    assert entry["days"] == []


DEVICE_BAD = (
    """
    type: pc  # required key not provided @ data['name']
    """,
    """
    name: ""
    """,
    """
    name: pc_1
    colour: blue  # extra keys not allowed @ data['colour']
    """,
    """
    name: pc_1
    dependencies:
      - depends_on: pc_2
        delay_minutes: -5
    """,
    """
    name: pc_1
    commands:
      on: 42
    """,
    """
    name: strip_1
    outlets:
      - is_on: true  # required key not provided @ data['outlets'][0]['name']
    """,
)
DEVICE_GOOD = (
    """
    name: pc_1
    """,
    """
    name: projector_1
    type: projector
    ip: 192.168.1.50
    mac: "00:11:22:33:44:55"
    area: hall
    category: av
    is_online: false
    commands:
      "ON": pjlink power 1
      "off": pjlink power 0
    dependencies:
      - depends_on: pc_1
        delay_minutes: 10
    schedule:
      - action: turn_on
        days: [monday, tuesday]
        time: "08:45"
      - action: turn_off
        one_time_utc: "2025-03-05 18:00"
    """,
    """
    name: strip_1
    type: power_strip
    outlets:
      - name: projector
        commands:
          "on": relay 1 on
      - name: speakers
        is_on: true
    scheduler_groups: [weekdays]  # ignored
    """,
)


@pytest.mark.parametrize("index", range(len(DEVICE_BAD)))
def test_device_bad(index: int) -> None:
    _test_schema_bad(SCH_DEVICE, DEVICE_BAD[index])


@pytest.mark.parametrize("index", range(len(DEVICE_GOOD)))
def test_device_good(index: int) -> None:
    _test_schema_good(SCH_DEVICE, DEVICE_GOOD[index])


def test_device_normalised() -> None:
    device = _test_schema_good(SCH_DEVICE, DEVICE_GOOD[1])

    assert device["commands"] == {"on": "pjlink power 1", "off": "pjlink power 0"}
    assert device["dependencies"] == [{"depends_on": "pc_1", "delay_minutes": 10}]
    assert [e["action"] for e in device["schedule"]] == [
        Action.TURN_ON,
        Action.TURN_OFF,
    ]

    device = _test_schema_good(SCH_DEVICE, DEVICE_GOOD[2])
    assert "scheduler_groups" not in device
    assert device["is_online"] is True
    assert device["outlets"][1] == {"name": "speakers", "is_on": True, "commands": {}}

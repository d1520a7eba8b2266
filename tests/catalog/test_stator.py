# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Tests for the stator catalog."""

from types import MappingProxyType

import pytest

from machinetwin.catalog import CatalogError, Location, stator_catalog
from machinetwin.config import CatalogConfig, ChannelConfig


def test_default_layout() -> None:
    """The default configuration produces the 24 stator sensors."""
    catalog = stator_catalog()

    sensors = catalog.list_sensors()
    assert len(sensors) == 24
    assert sensors[0][0] == "sensor_1"
    assert sensors[-1][0] == "sensor_24"

    first = catalog.get_sensor("sensor_1")
    assert first is not None
    assert first.name == "Sensor 1"
    assert first.group_name == "Stator 1"
    assert first.object_id == 1001
    assert (first.location.x, first.location.z) == (0.0, 0.0)
    assert first.location.y == pytest.approx(2.895)

    last = catalog.get_sensor("sensor_24")
    assert last is not None
    assert last.location.y == pytest.approx(2.0 + 24 * 0.895)

    assert [key for key, _ in catalog.list_channels()] == ["temperature"]
    temperature = catalog.get_channel("temperature")
    assert temperature is not None
    assert temperature.unit == "°C"
    assert (temperature.min, temperature.max) == (10.0, 40.0)


def test_custom_layout() -> None:
    """Keys, names, positions and channels follow the configuration."""
    catalog = stator_catalog(
        CatalogConfig(
            sensor_count=2,
            sensor_key_format="rtd-{n:02d}",
            sensor_name_format="RTD {n}",
            group_name_format="Slot {n}",
            base_height=0.0,
            spacing=1.5,
            object_id_offset=0,
            channels=MappingProxyType(
                {
                    "temperature": ChannelConfig("Temperature", unit="°C"),
                    "vibration": ChannelConfig("Vibration", unit="mm/s", max=20.0),
                }
            ),
        )
    )

    assert list(catalog.sensors) == ["rtd-01", "rtd-02"]
    second = catalog.get_sensor("rtd-02")
    assert second is not None
    assert second.name == "RTD 2"
    assert second.group_name == "Slot 2"
    assert second.location == Location(0.0, 3.0, 0.0)
    assert second.object_id == 2
    assert catalog.channels_for("rtd-01") == ("temperature", "vibration")


@pytest.mark.parametrize(
    "config",
    [
        CatalogConfig(sensor_key_format="sensor_{m}"),
        CatalogConfig(sensor_key_format="sensor"),
        CatalogConfig(sensor_count=0),
        CatalogConfig(channels=MappingProxyType({})),
        CatalogConfig(
            channels=MappingProxyType({"bad": ChannelConfig("Bad", min=2.0, max=1.0)})
        ),
    ],
    ids=["unknown-field", "duplicate-keys", "no-sensors", "no-channels", "bad-range"],
)
def test_invalid_layout(config: CatalogConfig) -> None:
    """Configurations that can't produce a valid catalog raise CatalogError."""
    with pytest.raises(CatalogError):
        stator_catalog(config)

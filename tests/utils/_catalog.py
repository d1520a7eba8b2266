# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Catalogs for tests."""

from machinetwin.catalog import Channel, EntityCatalog, Location, Sensor


def make_catalog(
    sensor_count: int = 3, channels: tuple[str, ...] = ("temperature",)
) -> EntityCatalog:
    """Create a catalog with `sensor_1` to `sensor_<sensor_count>`.

    Args:
        sensor_count: The number of sensors.
        channels: The channel keys.

    Returns:
        The catalog.
    """
    return EntityCatalog(
        [
            (
                f"sensor_{n}",
                Sensor(f"Sensor {n}", f"Stator {n}", Location(0.0, float(n), 0.0), n),
            )
            for n in range(1, sensor_count + 1)
        ],
        [(key, Channel(key.title(), "double", "°C", 10.0, 40.0)) for key in channels],
    )

# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Build the catalog of the stator temperature sensors."""

import logging

from ..config import CatalogConfig
from ._catalog import CatalogError, EntityCatalog
from ._types import Channel, Location, Sensor

_logger = logging.getLogger(__name__)


def stator_catalog(config: CatalogConfig | None = None) -> EntityCatalog:
    """Create the catalog with one sensor per stator.

    Sensor `n` (starting at 1) is placed at height
    `config.base_height + n * config.spacing` and references the scene object
    `config.object_id_offset + n`.

    Args:
        config: The catalog configuration, the default stator layout if `None`.

    Returns:
        The catalog.

    Raises:
        CatalogError: If the configuration can't produce a valid catalog, for
            example when a format string is broken or produces duplicate keys.
    """
    if config is None:
        config = CatalogConfig()

    sensors: list[tuple[str, Sensor]] = []
    try:
        for n in range(1, config.sensor_count + 1):
            sensors.append(
                (
                    config.sensor_key_format.format(n=n),
                    Sensor(
                        name=config.sensor_name_format.format(n=n),
                        group_name=config.group_name_format.format(n=n),
                        location=Location(
                            0.0, config.base_height + n * config.spacing, 0.0
                        ),
                        object_id=config.object_id_offset + n,
                    ),
                )
            )
        channels = [
            (
                key,
                Channel(
                    name=channel.name,
                    value_type=channel.value_type,
                    unit=channel.unit,
                    min=channel.min,
                    max=channel.max,
                ),
            )
            for key, channel in config.channels.items()
        ]
    except (KeyError, IndexError, ValueError) as err:
        raise CatalogError(f"Can't build the stator catalog: {err}") from err

    catalog = EntityCatalog(sensors, channels)
    _logger.info(
        "Stator catalog ready: %d sensors, channels %s",
        len(sensors),
        ", ".join(key for key, _ in channels),
    )
    return catalog

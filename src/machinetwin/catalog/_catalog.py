# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""A static registry of sensors and channels."""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import TypeVar

from ._types import Channel, Sensor

_T = TypeVar("_T")
_logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when an entity catalog can't be built.

    Nothing downstream of the catalog is meaningful without it, so this error is
    not recovered from.
    """


class EntityCatalog:
    """The registry of all sensors and channels known to the application.

    The catalog is populated once, synchronously, when it is created, and never
    changes afterwards. Sensors and channels are listed in registration order.

    Example:
        ```python
        catalog = EntityCatalog(
            sensors=[("sensor_1", Sensor("Sensor 1", "Stator 1", Location(0, 2, 0)))],
            channels=[("temperature", Channel("Temperature", "double", "°C", 10, 40))],
        )
        for key, sensor in catalog.list_sensors():
            print(key, sensor.name)
        ```
    """

    def __init__(
        self,
        sensors: Iterable[tuple[str, Sensor]],
        channels: Iterable[tuple[str, Channel]],
        *,
        relevant_channels: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        """Create and validate a catalog.

        Args:
            sensors: The sensors to register, as `(key, sensor)` pairs.
            channels: The channels to register, as `(key, channel)` pairs.
            relevant_channels: The channels produced for each sensor. Sensors not
                in this mapping get all channels.

        Raises:
            CatalogError: If a key is empty or duplicated, an entry has the wrong
                type, there are no sensors or channels, or a relevant channel is
                not registered.
        """
        self._sensors: dict[str, Sensor] = _build_registry(sensors, Sensor, "sensor")
        self._channels: dict[str, Channel] = _build_registry(
            channels, Channel, "channel"
        )

        self._relevant: dict[str, tuple[str, ...]] = {}
        for sensor_key, channel_keys in (relevant_channels or {}).items():
            if sensor_key not in self._sensors:
                raise CatalogError(
                    f"Unknown sensor {sensor_key!r} in relevant channels"
                )
            unknown = [key for key in channel_keys if key not in self._channels]
            if unknown:
                raise CatalogError(
                    f"Unknown channels {unknown!r} for sensor {sensor_key!r}"
                )
            self._relevant[sensor_key] = tuple(dict.fromkeys(channel_keys))

        _logger.debug(
            "Catalog created with %d sensors and %d channels",
            len(self._sensors),
            len(self._channels),
        )

    @property
    def sensors(self) -> Mapping[str, Sensor]:
        """A read-only mapping from sensor key to sensor."""
        return MappingProxyType(self._sensors)

    @property
    def channels(self) -> Mapping[str, Channel]:
        """A read-only mapping from channel key to channel."""
        return MappingProxyType(self._channels)

    def list_sensors(self) -> tuple[tuple[str, Sensor], ...]:
        """List all sensors in registration order.

        Returns:
            The `(key, sensor)` pairs.
        """
        return tuple(self._sensors.items())

    def list_channels(self) -> tuple[tuple[str, Channel], ...]:
        """List all channels in registration order.

        Returns:
            The `(key, channel)` pairs.
        """
        return tuple(self._channels.items())

    def get_sensor(self, key: str) -> Sensor | None:
        """Get a sensor by key, or `None` if it is not registered."""
        return self._sensors.get(key)

    def get_channel(self, key: str) -> Channel | None:
        """Get a channel by key, or `None` if it is not registered."""
        return self._channels.get(key)

    def has_sensor(self, key: str) -> bool:
        """Check whether a sensor is registered."""
        return key in self._sensors

    def has_channel(self, key: str) -> bool:
        """Check whether a channel is registered."""
        return key in self._channels

    def channels_for(self, sensor_key: str) -> tuple[str, ...]:
        """Get the keys of the channels produced for a sensor.

        Args:
            sensor_key: The sensor to look up.

        Returns:
            The channel keys, or an empty tuple if the sensor is unknown.
        """
        if sensor_key not in self._sensors:
            return ()
        return self._relevant.get(sensor_key, tuple(self._channels))

    def pairs(self) -> Iterator[tuple[str, str]]:
        """Iterate over all `(sensor_key, channel_key)` pairs that hold data.

        Yields:
            The pairs, sensors in registration order.
        """
        for sensor_key in self._sensors:
            for channel_key in self.channels_for(sensor_key):
                yield sensor_key, channel_key

    def __contains__(self, pair: object) -> bool:
        """Check whether a `(sensor_key, channel_key)` pair holds data."""
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        sensor_key, channel_key = pair
        return channel_key in self.channels_for(sensor_key)

    def __repr__(self) -> str:
        """Return a string representation of this catalog."""
        return (
            f"{type(self).__name__}(sensors={list(self._sensors)!r}, "
            f"channels={list(self._channels)!r})"
        )


def _build_registry(
    entries: Iterable[tuple[str, _T]], entry_type: type[_T], kind: str
) -> dict[str, _T]:
    registry: dict[str, _T] = {}
    for key, entry in entries:
        if not isinstance(key, str) or not key:
            raise CatalogError(f"Invalid {kind} key {key!r}")
        if not isinstance(entry, entry_type):
            raise CatalogError(
                f"Expected a {entry_type.__name__} for {kind} {key!r}, got {entry!r}"
            )
        if key in registry:
            raise CatalogError(f"Duplicate {kind} key {key!r}")
        registry[key] = entry
    if not registry:
        raise CatalogError(f"A catalog needs at least one {kind}")
    return registry

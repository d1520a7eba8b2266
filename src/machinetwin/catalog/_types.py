# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Sensor and channel definitions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A position in the 3D scene, only used by the scene layer."""

    x: float
    """The X coordinate."""

    y: float
    """The Y coordinate."""

    z: float
    """The Z coordinate."""


@dataclass(frozen=True)
class Sensor:
    """A named telemetry source.

    The sensor key is owned by the [`EntityCatalog`][machinetwin.catalog.EntityCatalog],
    so the same `Sensor` description could in principle be registered under different
    keys.
    """

    name: str
    """The display name of the sensor."""

    group_name: str
    """The name of the group (owner) the sensor belongs to, used for listing."""

    location: Location
    """Where the sensor is placed in the scene."""

    object_id: int | str | None = None
    """A reference to the scene object carrying the sensor."""


@dataclass(frozen=True)
class Channel:
    """A measurement kind, like temperature."""

    name: str
    """The display name of the channel."""

    value_type: str
    """A tag describing the kind of value, for example `"double"`."""

    unit: str
    """The physical unit of the values."""

    min: float
    """Lower end of the expected value range.

    This is used only for display scaling, values outside the range are stored as
    they are.
    """

    max: float
    """Upper end of the expected value range, see `min`."""

    def __post_init__(self) -> None:
        """Validate the display range.

        Raises:
            ValueError: If `min` is bigger than `max`.
        """
        if self.min > self.max:
            raise ValueError(
                f"Channel {self.name!r}: min ({self.min}) is bigger than "
                f"max ({self.max})"
            )

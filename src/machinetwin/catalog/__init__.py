# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""The registry of sensors and channels.

Sensor and channel keys are opaque strings. The default stator layout uses
`sensor_1` to `sensor_24` and a single `temperature` channel, but those come
from the configuration, see [`stator_catalog`][machinetwin.catalog.stator_catalog].
"""

from ._catalog import CatalogError, EntityCatalog
from ._stator import stator_catalog
from ._types import Channel, Location, Sensor

__all__ = [
    "CatalogError",
    "Channel",
    "EntityCatalog",
    "Location",
    "Sensor",
    "stator_catalog",
]

# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Map sensor values to heatmap colours."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import numpy as np

from ..catalog import Channel
from ._context import TelemetryContext

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColourBand:
    """Values up to `upper` (inclusive) get `colour`."""

    upper: float
    """The upper bound of the band, inclusive."""

    colour: str
    """The colour, as a hex string like `#FF0000`."""


class HeatmapScale:
    """A banded colour scale for the stator heatmap.

    Bands are checked from the lowest upper bound to the highest; values above
    all bands get the overflow colour.
    """

    def __init__(self, bands: Iterable[ColourBand], overflow: str) -> None:
        """Initialize this scale.

        Args:
            bands: The colour bands, in any order.
            overflow: The colour of values above all bands.

        Raises:
            ValueError: If two bands have the same upper bound.
        """
        self._bands = tuple(sorted(bands, key=lambda band: band.upper))
        uppers = [band.upper for band in self._bands]
        if len(set(uppers)) != len(uppers):
            raise ValueError(f"Duplicate band upper bounds in {uppers}")
        self._overflow = overflow

    @classmethod
    def default(cls) -> "HeatmapScale":
        """Create the temperature scale used by the stator view.

        Returns:
            Blue up to 20, green up to 23, yellow up to 24 and red above.
        """
        return cls(
            [
                ColourBand(20.0, "#0000FF"),
                ColourBand(23.0, "#00FF00"),
                ColourBand(24.0, "#FFFF00"),
            ],
            overflow="#FF0000",
        )

    @property
    def bands(self) -> tuple[ColourBand, ...]:
        """The colour bands, sorted by upper bound."""
        return self._bands

    def colour_for(self, value: float) -> str:
        """Get the colour of a value.

        Args:
            value: The value to colour.

        Returns:
            The colour of the first band containing the value.
        """
        for band in self._bands:
            if value <= band.upper:
                return band.colour
        return self._overflow

    def colours(
        self, context: TelemetryContext, channel_key: str
    ) -> Mapping[str, str]:
        """Colour every sensor by its newest value of a channel.

        Args:
            context: The telemetry to read.
            channel_key: The channel to colour by.

        Returns:
            The colour of each sensor; sensors without data are left out.
        """
        values = context.latest_values(channel_key)
        missing = len(context.list_sensors()) - len(values)
        if missing:
            _logger.debug("No %r data for %d sensors", channel_key, missing)
        return {key: self.colour_for(value) for key, value in values.items()}

    @staticmethod
    def normalize(value: float, channel: Channel) -> float:
        """Scale a value to `[0, 1]` using the display range of its channel.

        Values outside the range are clipped. A channel with an empty range maps
        every value to 0.

        Args:
            value: The value to scale.
            channel: The channel the value belongs to.

        Returns:
            The scaled value.
        """
        span = channel.max - channel.min
        if span == 0:
            return 0.0
        return float(np.clip((value - channel.min) / span, 0.0, 1.0))

# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Sources of sensor values for the tick scheduler."""

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Protocol

import numpy as np

from ..catalog import Channel


class ValueSource(Protocol):
    """Produces the current value of a sensor channel.

    The tick scheduler asks the source once per sensor channel and tick. A source
    may raise to signal that no value is available, the scheduler then skips that
    sensor for the tick.
    """

    def sample(self, sensor_key: str, channel_key: str, channel: Channel) -> float:
        """Get the current value of a sensor channel.

        Args:
            sensor_key: The sensor to sample.
            channel_key: The channel to sample.
            channel: The channel description.

        Returns:
            The current value.
        """


class UniformRandomSource:
    """Synthetic values drawn uniformly from `[low, high)`."""

    def __init__(
        self, low: float = 20.0, high: float = 30.0, *, seed: int | None = None
    ) -> None:
        """Initialize this source.

        Args:
            low: The lowest value produced.
            high: The upper bound of the produced values, exclusive.
            seed: The seed of the random generator, `None` for a random seed.

        Raises:
            ValueError: If `low` is bigger than `high`.
        """
        if low > high:
            raise ValueError(f"low ({low}) is bigger than high ({high})")
        self._low = low
        self._high = high
        self._rng = np.random.default_rng(seed)

    def sample(self, sensor_key: str, channel_key: str, channel: Channel) -> float:
        """Draw a random value, ignoring which sensor is sampled."""
        return float(self._rng.uniform(self._low, self._high))


class SequenceSource:
    """Replays scripted values for each sensor.

    Each call consumes one value of the sensor's script, so a sensor with two
    channels uses two values per tick.
    """

    def __init__(self, values: Mapping[str, Iterable[float]]) -> None:
        """Initialize this source.

        Args:
            values: The values to produce for each sensor key, in order.
        """
        self._values: dict[str, Iterator[float]] = {
            key: iter(sensor_values) for key, sensor_values in values.items()
        }

    def sample(self, sensor_key: str, channel_key: str, channel: Channel) -> float:
        """Produce the next scripted value of a sensor.

        Args:
            sensor_key: The sensor to sample.
            channel_key: The channel to sample.
            channel: The channel description.

        Returns:
            The next value.

        Raises:
            LookupError: If the sensor has no script or its script is exhausted.
        """
        values = self._values.get(sensor_key)
        if values is None:
            raise LookupError(f"No values scripted for sensor {sensor_key!r}")
        try:
            return next(values)
        except StopIteration:
            raise LookupError(f"Scripted values for {sensor_key!r} ran out") from None


class CallableSource:
    """Adapts a plain function to the `ValueSource` protocol.

    This is the hook to plug in a live feed.
    """

    def __init__(self, func: Callable[[str, str], float]) -> None:
        """Initialize this source.

        Args:
            func: Called with the sensor key and the channel key, returns the value.
        """
        self._func = func

    def sample(self, sensor_key: str, channel_key: str, channel: Channel) -> float:
        """Call the wrapped function with the sensor and channel keys."""
        return self._func(sensor_key, channel_key)

# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Rate-limit and publish the telemetry change notifications."""

import enum
import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from types import MappingProxyType

from .._internal._constants import DEFAULT_TIME_ADVANCED_INTERVAL
from ._registry import Signal, SignalRegistry, Subscription

_logger = logging.getLogger(__name__)


class SignalKey(enum.StrEnum):
    """The keys of the well-known signals."""

    TIME_ADVANCED = "time-advanced"
    """The shared time cursor moved, the message is the new `datetime`."""

    VALUES_CHANGED = "values-changed"
    """New values were stored, the message maps sensor keys to their newest value."""

    SENSOR_SELECTED = "sensor-selected"
    """A sensor was selected in the UI, the message is the sensor key."""

    SENSOR_HOVERED = "sensor-hovered"
    """The pointer is over a sensor in the UI, the message is the sensor key."""


SIGNAL_TYPES: Mapping[SignalKey, type] = MappingProxyType(
    {
        SignalKey.TIME_ADVANCED: datetime,
        SignalKey.VALUES_CHANGED: Mapping,
        SignalKey.SENSOR_SELECTED: str,
        SignalKey.SENSOR_HOVERED: str,
    }
)
"""The message type of each well-known signal."""


class NotificationCoalescer:
    """Publishes the signals produced by each tick.

    Two signals are published after a tick stored its samples:

    * `time-advanced`, with the tick timestamp, at most once per `min_interval` of
      monotonic time, no matter how often ticks happen.
    * `values-changed`, with the newest value of every sensor, after every tick.

    The rate limit uses a monotonic clock, so wall-clock adjustments can't make the
    time signal skip or fire twice.

    Each emission is due `min_interval` after the previous due time, not after the
    previous emission. A tick arriving late doesn't push the following ones back,
    so a timer ticking at exactly `min_interval` with some delay still advances
    the time on every tick. A tick is never accepted before its due time. When
    ticks fall more than one interval behind, the schedule restarts from the late
    tick.

    The schedule is kept for the whole life of the coalescer, so restarting the
    scheduler doesn't allow an extra emission.
    """

    def __init__(
        self,
        registry: SignalRegistry,
        *,
        min_interval: timedelta = DEFAULT_TIME_ADVANCED_INTERVAL,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize this instance.

        Args:
            registry: The registry holding the signals to publish to.
            min_interval: The minimum time between two `time-advanced` signals.
            monotonic: The clock used for the rate limit, in seconds.

        Raises:
            ValueError: If `min_interval` is not positive.
        """
        if min_interval <= timedelta(0):
            raise ValueError(
                f"The minimum interval must be positive, got {min_interval}"
            )
        self._registry = registry
        self._min_interval = min_interval
        self._min_interval_s = min_interval.total_seconds()
        self._monotonic = monotonic

        self._time_advanced: Signal[datetime] = registry.get_or_create(
            datetime, SignalKey.TIME_ADVANCED
        )
        self._values_changed: Signal[Mapping[str, float]] = registry.get_or_create(
            Mapping, SignalKey.VALUES_CHANGED  # type: ignore[type-abstract]
        )

        self._next_due: float | None = None
        self._last_time_advanced: datetime | None = None

    @property
    def registry(self) -> SignalRegistry:
        """The registry holding the published signals."""
        return self._registry

    @property
    def min_interval(self) -> timedelta:
        """The minimum time between two `time-advanced` signals."""
        return self._min_interval

    @property
    def last_time_advanced(self) -> datetime | None:
        """The timestamp sent with the last `time-advanced` signal, if any."""
        return self._last_time_advanced

    def on_time_advanced(
        self, callback: Callable[[datetime], object]
    ) -> Subscription[datetime]:
        """Subscribe to the `time-advanced` signal.

        Args:
            callback: Called with the new time.

        Returns:
            The subscription handle.
        """
        return self._time_advanced.subscribe(callback)

    def on_values_changed(
        self, callback: Callable[[Mapping[str, float]], object]
    ) -> Subscription[Mapping[str, float]]:
        """Subscribe to the `values-changed` signal.

        Args:
            callback: Called with the newest value of every sensor.

        Returns:
            The subscription handle.
        """
        return self._values_changed.subscribe(callback)

    def publish(self, timestamp: datetime, latest_values: Mapping[str, float]) -> bool:
        """Publish the signals for a completed tick.

        Args:
            timestamp: The timestamp of the tick.
            latest_values: The value stored for each sensor during the tick.

        Returns:
            Whether the `time-advanced` signal was published.
        """
        advanced = self._take_due_slot(self._monotonic())
        if advanced:
            self._last_time_advanced = timestamp
            _logger.debug("Time advanced to %s", timestamp)
            self._time_advanced.emit(timestamp)

        self._values_changed.emit(MappingProxyType(dict(latest_values)))
        return advanced

    def _take_due_slot(self, now: float) -> bool:
        if self._next_due is None:
            self._next_due = now + self._min_interval_s
            return True
        if now < self._next_due:
            return False
        if now - self._next_due >= self._min_interval_s:
            _logger.debug(
                "Ticks fell %.3fs behind, restarting the time signal schedule",
                now - self._next_due,
            )
            self._next_due = now + self._min_interval_s
        else:
            self._next_due += self._min_interval_s
        return True

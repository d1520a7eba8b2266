# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""The in-memory store of recent samples of every sensor channel."""

import logging
from collections.abc import Iterator
from datetime import datetime, timezone

from ..catalog import EntityCatalog
from ._base_types import Sample, TimeRange, WindowSnapshot
from ._window import SampleWindow

_logger = logging.getLogger(__name__)


class SampleWindowStore:
    """Keeps one sample window per sensor channel.

    The windows are created up front, one for every `(sensor, channel)` pair the
    catalog defines, so no window is ever created or removed afterwards.

    Consumers only ever get snapshots of the windows, which stay unchanged when
    new samples are appended. Appending is reserved for the tick scheduler.

    Problems with single calls (unknown keys, samples out of order) are logged
    and reported through the return value, never raised: a bad sensor must not
    stop the tick for the others.
    """

    def __init__(self, catalog: EntityCatalog, capacity: int) -> None:
        """Create the store with empty windows.

        Args:
            catalog: The catalog defining the sensors and channels.
            capacity: The number of samples to keep per window.
        """
        self._catalog = catalog
        self._capacity = capacity
        self._windows: dict[tuple[str, str], SampleWindow] = {
            pair: SampleWindow(capacity) for pair in catalog.pairs()
        }
        _logger.debug(
            "Created %d sample windows with capacity %d", len(self._windows), capacity
        )

    @property
    def catalog(self) -> EntityCatalog:
        """The catalog this store was created from."""
        return self._catalog

    @property
    def capacity(self) -> int:
        """The number of samples kept per window."""
        return self._capacity

    def append(
        self, sensor_key: str, channel_key: str, timestamp: datetime, value: float
    ) -> bool:
        """Append a sample to the window of a sensor channel.

        When the window is full, its oldest sample is evicted.

        Args:
            sensor_key: The sensor the sample belongs to.
            channel_key: The channel the sample belongs to.
            timestamp: When the sample was taken.
            value: The sample value.

        Returns:
            Whether the sample was stored.
        """
        window = self._windows.get((sensor_key, channel_key))
        if window is None:
            _logger.warning(
                "Ignoring sample for unknown sensor channel %r/%r",
                sensor_key,
                channel_key,
            )
            return False
        try:
            window.append(timestamp, value)
        except (TypeError, ValueError) as err:
            _logger.warning(
                "Ignoring sample for %r/%r: %s", sensor_key, channel_key, err
            )
            return False
        return True

    def read(self, sensor_key: str, channel_key: str) -> WindowSnapshot | None:
        """Get a snapshot of the window of a sensor channel.

        Args:
            sensor_key: The sensor to read.
            channel_key: The channel to read.

        Returns:
            The snapshot, or `None` if no sample was recorded for the pair yet or
                the pair is unknown.
        """
        window = self._windows.get((sensor_key, channel_key))
        if window is None:
            _logger.warning(
                "Read of unknown sensor channel %r/%r", sensor_key, channel_key
            )
            return None
        return window.snapshot()

    def latest(self, sensor_key: str, channel_key: str) -> Sample | None:
        """Get the newest sample of a sensor channel.

        Args:
            sensor_key: The sensor to read.
            channel_key: The channel to read.

        Returns:
            The newest sample, or `None` if there is none.
        """
        snapshot = self.read(sensor_key, channel_key)
        if snapshot is None:
            return None
        return snapshot.latest

    def time_range(self, now: datetime | None = None) -> TimeRange:
        """Get the time span covered by all windows.

        Args:
            now: The anchor of the range returned when there are no samples at
                all. Defaults to the current time.

        Returns:
            The earliest and latest timestamp across all windows, or a range
                starting and ending at `now` if no window holds samples.
        """
        filled = [window for window in self._windows.values() if not window.is_empty]
        if not filled:
            anchor = now if now is not None else datetime.now(tz=timezone.utc)
            return TimeRange(anchor, anchor)
        return TimeRange(
            min(window.oldest_timestamp for window in filled),  # type: ignore[type-var]
            max(window.newest_timestamp for window in filled),  # type: ignore[type-var]
        )

    def total_count(self) -> int:
        """Count all samples ever appended to the store.

        Returns:
            The sum of the running counts of all windows.
        """
        return sum(window.count for window in self._windows.values())

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """Iterate over the `(sensor_key, channel_key)` pairs of the store.

        Returns:
            An iterator over the pairs, in catalog order.
        """
        return iter(self._windows)

    def __len__(self) -> int:
        """Return the number of windows."""
        return len(self._windows)

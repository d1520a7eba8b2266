# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Bounded, time-ordered buffer of recent samples."""

from datetime import datetime

import numpy as np
import numpy.typing as npt

from ._base_types import WindowSnapshot


class SampleWindow:
    """A ring buffer keeping the most recent `capacity` samples, oldest first.

    Appending to a full window evicts the oldest sample. The window keeps a
    running count of all appended samples, which is not reset by evictions.

    Values are stored in a preallocated numpy array so appending is O(1) and
    never reallocates.
    """

    def __init__(self, capacity: int) -> None:
        """Create an empty window.

        Args:
            capacity: The maximum number of samples to keep.

        Raises:
            ValueError: If the capacity is lower than 1.
        """
        if capacity < 1:
            raise ValueError(f"The window capacity must be at least 1, got {capacity}")
        self._values: npt.NDArray[np.float64] = np.zeros(capacity, dtype=np.float64)
        self._timestamps: list[datetime | None] = [None] * capacity
        self._head: int = 0
        self._len: int = 0
        self._count: int = 0

    @property
    def capacity(self) -> int:
        """The maximum number of samples this window holds."""
        return len(self._values)

    @property
    def count(self) -> int:
        """The number of samples ever appended."""
        return self._count

    @property
    def is_empty(self) -> bool:
        """Whether nothing was appended yet."""
        return self._len == 0

    @property
    def oldest_timestamp(self) -> datetime | None:
        """The timestamp of the oldest retained sample, `None` if empty."""
        if self._len == 0:
            return None
        return self._timestamps[self._head]

    @property
    def newest_timestamp(self) -> datetime | None:
        """The timestamp of the newest sample, `None` if empty."""
        if self._len == 0:
            return None
        return self._timestamps[self._wrap(self._head + self._len - 1)]

    def append(self, timestamp: datetime, value: float) -> None:
        """Append a sample, evicting the oldest one if the window is full.

        Args:
            timestamp: The sample timestamp. Must not be older than the newest
                sample in the window.
            value: The sample value.

        Raises:
            ValueError: If the timestamp is older than the newest sample.
        """
        newest = self.newest_timestamp
        if newest is not None and timestamp < newest:
            raise ValueError(
                f"Timestamp {timestamp} is older than the newest sample ({newest})"
            )

        if self._len < self.capacity:
            index = self._wrap(self._head + self._len)
            self._len += 1
        else:
            # Full: overwrite the oldest entry and move the head past it
            index = self._head
            self._head = self._wrap(self._head + 1)

        self._timestamps[index] = timestamp
        self._values[index] = value
        self._count += 1

    def snapshot(self) -> WindowSnapshot | None:
        """Take a copy of the current window content.

        Returns:
            The snapshot, oldest sample first, or `None` if nothing was appended
                yet.
        """
        if self._len == 0:
            return None

        end = self._head + self._len
        if end <= self.capacity:
            values = self._values[self._head : end].copy()
            timestamps = self._timestamps[self._head : end]
        else:
            # The window wraps around the end of the buffer
            end = self._wrap(end)
            values = np.concatenate((self._values[self._head :], self._values[:end]))
            timestamps = self._timestamps[self._head :] + self._timestamps[:end]

        values.flags.writeable = False
        return WindowSnapshot(
            timestamps=tuple(ts for ts in timestamps if ts is not None),
            values=values,
            count=self._count,
        )

    def _wrap(self, index: int) -> int:
        return index % self.capacity

    def __len__(self) -> int:
        """Return the number of retained samples."""
        return self._len

    def __repr__(self) -> str:
        """Return a string representation of this window."""
        return (
            f"{type(self).__name__}(capacity={self.capacity}, len={self._len}, "
            f"count={self._count})"
        )

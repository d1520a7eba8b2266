# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Timeseries basic types."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime

import numpy as np
import numpy.typing as npt


@dataclass(frozen=True, order=True)
class Sample:
    """A measurement taken at a particular point in time."""

    timestamp: datetime
    """The time when this sample was generated."""

    value: float
    """The value of this sample."""


@dataclass(frozen=True)
class TimeRange:
    """A closed time interval."""

    start: datetime
    """The earliest timestamp, inclusive."""

    end: datetime
    """The latest timestamp, inclusive."""

    def __post_init__(self) -> None:
        """Check the range is not reversed.

        Raises:
            ValueError: If `start` is after `end`.
        """
        if self.start > self.end:
            raise ValueError(f"Time range start {self.start} is after end {self.end}")

    @property
    def is_degenerate(self) -> bool:
        """Whether the range is a single point in time."""
        return self.start == self.end

    def __contains__(self, timestamp: datetime) -> bool:
        """Check whether a timestamp falls inside this range."""
        return self.start <= timestamp <= self.end


@dataclass(frozen=True, eq=False)
class WindowSnapshot:
    """A point-in-time copy of a sample window.

    Timestamps and values are index-aligned and sorted by ascending timestamp.
    The snapshot never changes after it was taken, the `values` array is marked
    read-only.
    """

    timestamps: tuple[datetime, ...]
    """The sample timestamps, oldest first."""

    values: npt.NDArray[np.float64]
    """The sample values, aligned with `timestamps`."""

    count: int
    """The number of samples ever appended to the window, including evicted ones."""

    def __post_init__(self) -> None:
        """Check the snapshot is consistent.

        Raises:
            ValueError: If timestamps and values have different lengths.
        """
        if len(self.timestamps) != len(self.values):
            raise ValueError(
                f"Got {len(self.timestamps)} timestamps but {len(self.values)} values"
            )

    @property
    def latest(self) -> Sample | None:
        """The newest sample, or `None` if the snapshot is empty."""
        if not self.timestamps:
            return None
        return Sample(self.timestamps[-1], float(self.values[-1]))

    @property
    def oldest_timestamp(self) -> datetime | None:
        """The timestamp of the oldest sample, or `None` if empty."""
        return self.timestamps[0] if self.timestamps else None

    @property
    def newest_timestamp(self) -> datetime | None:
        """The timestamp of the newest sample, or `None` if empty."""
        return self.timestamps[-1] if self.timestamps else None

    def __len__(self) -> int:
        """Return the number of samples in the snapshot."""
        return len(self.timestamps)

    def __iter__(self) -> Iterator[Sample]:
        """Iterate over the samples, oldest first.

        Yields:
            The samples.
        """
        for timestamp, value in zip(self.timestamps, self.values):
            yield Sample(timestamp, float(value))

    def __eq__(self, other: object) -> bool:
        """Compare two snapshots by content."""
        if not isinstance(other, WindowSnapshot):
            return NotImplemented
        return (
            self.count == other.count
            and self.timestamps == other.timestamps
            and bool(np.array_equal(self.values, other.values))
        )

    __hash__ = None  # type: ignore[assignment]

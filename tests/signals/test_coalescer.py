# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Tests for the NotificationCoalescer."""

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timedelta

import pytest

from machinetwin.signals import NotificationCoalescer, SignalKey, SignalRegistry

from ..utils import FakeMonotonic, at


@pytest.fixture
def coalescer(monotonic: FakeMonotonic) -> NotificationCoalescer:
    """Get a coalescer with the default interval and a manual clock."""
    return NotificationCoalescer(SignalRegistry(name="test"), monotonic=monotonic)


def test_signals_registered(coalescer: NotificationCoalescer) -> None:
    """The published signals are created in the registry with their types."""
    assert coalescer.registry.message_type(SignalKey.TIME_ADVANCED) is datetime
    assert coalescer.registry.message_type(SignalKey.VALUES_CHANGED) is Mapping
    assert coalescer.min_interval == timedelta(seconds=1)
    assert coalescer.last_time_advanced is None


def test_first_publish_advances_time(coalescer: NotificationCoalescer) -> None:
    """The first tick always advances the time."""
    times: list[datetime] = []
    values: list[Mapping[str, float]] = []
    coalescer.on_time_advanced(times.append)
    coalescer.on_values_changed(values.append)

    assert coalescer.publish(at(0), {"sensor_1": 21.0})

    assert times == [at(0)]
    assert values == [{"sensor_1": 21.0}]
    assert coalescer.last_time_advanced == at(0)


def test_rate_limit(
    coalescer: NotificationCoalescer, monotonic: FakeMonotonic
) -> None:
    """Time advances at most once per interval, values change on every tick."""
    times: list[datetime] = []
    values: list[Mapping[str, float]] = []
    coalescer.on_time_advanced(times.append)
    coalescer.on_values_changed(values.append)

    # Ticks every 250 ms for 3 seconds
    for tick in range(13):
        coalescer.publish(at(tick * 0.25), {"sensor_1": float(tick)})
        monotonic.advance(0.25)

    assert times == [at(0), at(1), at(2), at(3)]
    assert len(values) == 13
    assert values[-1] == {"sensor_1": 12.0}


def test_early_ticks_wait_for_the_next_interval(
    coalescer: NotificationCoalescer, monotonic: FakeMonotonic
) -> None:
    """Ticks slightly faster than the interval don't advance the time on each tick.

    With ticks every 0.96 s, the second tick comes before a full interval passed,
    so it doesn't advance the time. The following ones are due on the 1 s grid.
    """
    times: list[datetime] = []
    coalescer.on_time_advanced(times.append)

    # 6 ticks covering 4.8 seconds
    for tick in range(6):
        coalescer.publish(at(tick * 0.96), {})
        monotonic.advance(0.96)

    assert len(times) <= 5
    assert times == [at(0), at(2 * 0.96), at(3 * 0.96), at(4 * 0.96), at(5 * 0.96)]


def test_never_before_the_interval(
    coalescer: NotificationCoalescer, monotonic: FakeMonotonic
) -> None:
    """No tick before the full interval advances the time."""
    times: list[datetime] = []
    coalescer.on_time_advanced(times.append)

    assert coalescer.publish(at(0), {})
    monotonic.advance(0.999)
    assert not coalescer.publish(at(0.999), {})
    monotonic.advance(0.001)
    assert coalescer.publish(at(1), {})

    assert times == [at(0), at(1)]


@pytest.mark.parametrize("period", [0.1, 0.25, 0.5, 0.9, 0.96, 0.99, 1.0, 1.5])
def test_emissions_bounded_by_elapsed_time(
    coalescer: NotificationCoalescer, monotonic: FakeMonotonic, period: float
) -> None:
    """Over any run of ticks, time advances at most once per elapsed interval."""
    fired = 0
    start = monotonic()
    last = start
    for _ in range(int(6 / period) + 1):
        last = monotonic()
        fired += coalescer.publish(at(last - start), {})
        monotonic.advance(period)

    assert fired <= math.floor(last - start) + 1


def test_late_ticks_keep_the_schedule(
    coalescer: NotificationCoalescer, monotonic: FakeMonotonic
) -> None:
    """A late tick doesn't delay the following ones."""
    times: list[datetime] = []
    coalescer.on_time_advanced(times.append)
    start = monotonic()

    offsets = [0.0, 1.02, 2.0, 3.05, 4.0, 5.01]
    for offset in offsets:
        monotonic.now = start + offset
        coalescer.publish(at(offset), {})

    assert times == [at(offset) for offset in offsets]


def test_schedule_restarts_after_a_gap(
    coalescer: NotificationCoalescer,
    monotonic: FakeMonotonic,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """After a long gap the interval is counted from the late tick."""
    caplog.set_level(logging.DEBUG, logger="machinetwin.signals._coalescer")
    start = monotonic()

    assert coalescer.publish(at(0), {})
    monotonic.now = start + 5.5
    assert coalescer.publish(at(5.5), {})
    monotonic.now = start + 6.0
    assert not coalescer.publish(at(6.0), {})
    monotonic.now = start + 6.5
    assert coalescer.publish(at(6.5), {})

    assert "restarting the time signal schedule" in caplog.text



def test_values_are_read_only(coalescer: NotificationCoalescer) -> None:
    """Subscribers can't change the values seen by the others."""
    values: list[Mapping[str, float]] = []
    coalescer.on_values_changed(values.append)
    latest = {"sensor_1": 21.0}

    coalescer.publish(at(0), latest)
    latest["sensor_1"] = 30.0

    assert values[0] == {"sensor_1": 21.0}
    with pytest.raises(TypeError):
        values[0]["sensor_1"] = 0.0  # type: ignore[index]


def test_schedule_kept_between_runs(
    coalescer: NotificationCoalescer, monotonic: FakeMonotonic
) -> None:
    """Pausing the ticks doesn't allow an extra time signal."""
    times: list[datetime] = []
    coalescer.on_time_advanced(times.append)

    coalescer.publish(at(0), {})
    # No ticks for a while, then a new run starts
    monotonic.advance(0.1)
    coalescer.publish(at(0.1), {})
    monotonic.advance(0.9)
    coalescer.publish(at(1), {})

    assert times == [at(0), at(1)]


@pytest.mark.parametrize(
    "min_interval", [timedelta(0), timedelta(seconds=-1)], ids=["zero", "negative"]
)
def test_invalid_min_interval(min_interval: timedelta) -> None:
    """The interval must be positive."""
    with pytest.raises(ValueError, match="must be positive"):
        NotificationCoalescer(SignalRegistry(name="test"), min_interval=min_interval)


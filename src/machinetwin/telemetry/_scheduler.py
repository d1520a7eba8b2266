# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""The periodic driver producing the telemetry samples."""

import asyncio
import logging
import math
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from types import TracebackType
from typing import Any, Self

from frequenz.channels.timer import SkipMissedAndDrift, Timer

from .._internal._asyncio import cancel_and_await
from .._internal._constants import DEFAULT_TICK_PERIOD
from ..catalog import EntityCatalog
from ..signals import NotificationCoalescer
from ..timeseries import SampleWindowStore
from ._sources import ValueSource

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class TickScheduler:
    """Produces one value per sensor channel every `period` and stores it.

    Each [`tick()`][machinetwin.telemetry.TickScheduler.tick] runs to completion
    without yielding to the event loop: all samples of the tick are stored before
    the tick's signals are published, so consumers reacting to a signal always
    read that tick's data.

    The scheduler is the only writer of the store.

    Ticks can be driven manually by calling `tick()`, or periodically by starting
    the scheduler:

    ```python
    async with TickScheduler(catalog, store, coalescer, source) as scheduler:
        await asyncio.sleep(10)
    ```
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        catalog: EntityCatalog,
        store: SampleWindowStore,
        coalescer: NotificationCoalescer,
        source: ValueSource,
        *,
        period: timedelta = DEFAULT_TICK_PERIOD,
        clock: Callable[[], datetime] = _utc_now,
        name: str | None = None,
    ) -> None:
        """Initialize this scheduler.

        Args:
            catalog: The sensors and channels to produce values for.
            store: The store to append the values to.
            coalescer: The publisher of the tick signals.
            source: Where the values come from.
            period: The time between two ticks.
            clock: Gives the timestamp of each tick.
            name: The name of this scheduler, used in the logs. If `None`,
                `str(id(self))` will be used.

        Raises:
            ValueError: If the period is not positive.
        """
        if period <= timedelta(0):
            raise ValueError(f"The tick period must be positive, got {period}")
        self._catalog = catalog
        self._store = store
        self._coalescer = coalescer
        self._source = source
        self._period = period
        self._clock = clock
        self._name: str = str(id(self)) if name is None else name

        self._driver: asyncio.Task[None] | None = None
        self._retired: set[asyncio.Task[Any]] = set()
        self._tick_count: int = 0

    @property
    def name(self) -> str:
        """The name of this scheduler."""
        return self._name

    @property
    def period(self) -> timedelta:
        """The time between two ticks."""
        return self._period

    @property
    def tick_count(self) -> int:
        """The number of completed ticks."""
        return self._tick_count

    @property
    def is_running(self) -> bool:
        """Whether the periodic driver is running."""
        return self._driver is not None and not self._driver.done()

    def tick(self, now: datetime | None = None) -> Mapping[str, float]:
        """Produce and store one value for every sensor channel, then notify.

        A sensor whose value can't be produced is logged and skipped, the other
        sensors are not affected.

        Args:
            now: The timestamp of the tick, the clock's current time if `None`.

        Returns:
            The value stored for each sensor. For sensors with several channels
                this is the value of the first one.
        """
        timestamp = now if now is not None else self._clock()
        latest: dict[str, float] = {}

        for sensor_key, _ in self._catalog.list_sensors():
            for channel_key in self._catalog.channels_for(sensor_key):
                value = self._produce(sensor_key, channel_key)
                if value is None:
                    continue
                if self._store.append(sensor_key, channel_key, timestamp, value):
                    latest.setdefault(sensor_key, value)

        self._tick_count += 1
        _logger.debug(
            "%s: tick %d at %s stored %d sensors",
            self,
            self._tick_count,
            timestamp,
            len(latest),
        )
        self._coalescer.publish(timestamp, latest)
        return latest

    def _produce(self, sensor_key: str, channel_key: str) -> float | None:
        channel = self._catalog.get_channel(channel_key)
        if channel is None:
            _logger.warning(
                "%s: channel %r of sensor %r is not in the catalog, skipping it",
                self,
                channel_key,
                sensor_key,
            )
            return None
        try:
            value = float(self._source.sample(sensor_key, channel_key, channel))
        except Exception:  # pylint: disable=broad-except
            _logger.exception(
                "%s: can't produce a value for %r/%r", self, sensor_key, channel_key
            )
            return None
        if not math.isfinite(value):
            _logger.warning(
                "%s: ignoring non-finite value %s for %r/%r",
                self,
                value,
                sensor_key,
                channel_key,
            )
            return None
        return value

    def start(self) -> None:
        """Start ticking periodically.

        If the scheduler is already running, the current driver is cancelled and
        replaced by a new one, so there is never more than one driver.
        """
        if self._driver is not None and not self._driver.done():
            _logger.info("%s: already running, replacing the driver", self)
            self._driver.cancel()
            self._retired.add(self._driver)
        self._retired = {task for task in self._retired if not task.done()}
        self._driver = asyncio.create_task(self._run(), name=f"{self._name}-ticks")
        _logger.info("%s: started with a period of %s", self, self._period)

    def cancel(self) -> None:
        """Cancel the periodic driver without waiting for it.

        No tick runs after this method returns.
        """
        if self._driver is not None:
            self._driver.cancel()
            self._retired.add(self._driver)
            self._driver = None

    async def stop(self) -> None:
        """Stop ticking and wait for the driver to finish.

        Stopping a scheduler that is not running does nothing.
        """
        was_running = self.is_running
        self.cancel()
        retired, self._retired = self._retired, set()
        for task in retired:
            await cancel_and_await(task)
        if was_running:
            _logger.info("%s: stopped after %d ticks", self, self._tick_count)

    async def _run(self) -> None:
        timer = Timer(self._period, SkipMissedAndDrift())
        try:
            async for _ in timer:
                try:
                    self.tick()
                except Exception:  # pylint: disable=broad-except
                    _logger.exception("%s: tick failed, waiting for the next one", self)
        finally:
            timer.stop()

    async def __aenter__(self) -> Self:
        """Enter an async context, starting the scheduler.

        Returns:
            This scheduler.
        """
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit an async context, stopping the scheduler.

        Args:
            exc_type: The type of the exception raised, if any.
            exc_val: The exception raised, if any.
            exc_tb: The traceback of the exception raised, if any.
        """
        await self.stop()

    def __repr__(self) -> str:
        """Return a string representation of this instance."""
        return (
            f"{type(self).__name__}(name={self._name!r}, period={self._period}, "
            f"running={self.is_running})"
        )

    def __str__(self) -> str:
        """Return a string representation of this instance."""
        return f"{type(self).__name__}[{self._name}]"

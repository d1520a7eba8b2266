# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""The handle giving consumers access to the telemetry."""

import logging
import time
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any, Self

from ..catalog import Channel, EntityCatalog, Sensor, stator_catalog
from ..config import TelemetryConfig
from ..signals import (
    SIGNAL_TYPES,
    NotificationCoalescer,
    Signal,
    SignalKey,
    SignalRegistry,
    Subscription,
)
from ..timeseries import Sample, SampleWindowStore, TimeRange, WindowSnapshot
from ._scheduler import TickScheduler
from ._sources import UniformRandomSource, ValueSource

_logger = logging.getLogger(__name__)


class TelemetryContext:
    """Owns the telemetry components of one application.

    A single context is created at start-up and passed to every consumer. It
    exposes the read API of the store and the signal API, but not the append API,
    which is reserved for the scheduler.

    Example:
        ```python
        context = TelemetryContext.from_config(load_config("twin.toml"))

        def show(values: Mapping[str, float]) -> None:
            print(values)

        subscription = context.subscribe(SignalKey.VALUES_CHANGED, show)
        async with context:
            await asyncio.sleep(5)
        subscription.cancel()
        ```
    """

    def __init__(
        self,
        catalog: EntityCatalog,
        store: SampleWindowStore,
        coalescer: NotificationCoalescer,
        scheduler: TickScheduler,
    ) -> None:
        """Initialize this context from already connected components.

        Use [`from_config()`][machinetwin.telemetry.TelemetryContext.from_config]
        to build and connect them.

        Args:
            catalog: The entity catalog.
            store: The sample store.
            coalescer: The signal publisher.
            scheduler: The tick scheduler writing to `store`.
        """
        self._catalog = catalog
        self._store = store
        self._coalescer = coalescer
        self._registry = coalescer.registry
        self._scheduler = scheduler

    @classmethod
    def from_config(
        cls,
        config: TelemetryConfig | None = None,
        *,
        catalog: EntityCatalog | None = None,
        source: ValueSource | None = None,
        monotonic: Callable[[], float] | None = None,
    ) -> Self:
        """Build all telemetry components.

        Args:
            config: The configuration, the defaults if `None`.
            catalog: The catalog to use instead of the configured stator catalog.
            source: The value source to use instead of the configured random
                source.
            monotonic: The clock for the signal rate limit, for testing.

        Returns:
            The context, with the scheduler not started yet.

        Raises:
            CatalogError: If the catalog can't be built.
        """
        if config is None:
            config = TelemetryConfig()
        if catalog is None:
            catalog = stator_catalog(config.catalog)
        if source is None:
            source = UniformRandomSource(
                config.source.low, config.source.high, seed=config.source.seed
            )

        store = SampleWindowStore(catalog, config.window_capacity)
        registry = SignalRegistry(name="telemetry")
        coalescer = NotificationCoalescer(
            registry,
            min_interval=config.time_advanced_interval,
            monotonic=time.monotonic if monotonic is None else monotonic,
        )
        for key, message_type in SIGNAL_TYPES.items():
            registry.get_or_create(message_type, key)

        scheduler = TickScheduler(
            catalog,
            store,
            coalescer,
            source,
            period=config.tick_period,
            name="telemetry",
        )
        _logger.info(
            "Telemetry ready: %d windows of %d samples, ticking every %s",
            len(store),
            store.capacity,
            config.tick_period,
        )
        return cls(catalog, store, coalescer, scheduler)

    @property
    def catalog(self) -> EntityCatalog:
        """The entity catalog."""
        return self._catalog

    @property
    def scheduler(self) -> TickScheduler:
        """The tick scheduler."""
        return self._scheduler

    @property
    def coalescer(self) -> NotificationCoalescer:
        """The signal publisher."""
        return self._coalescer

    def list_sensors(self) -> tuple[tuple[str, Sensor], ...]:
        """List all sensors in registration order."""
        return self._catalog.list_sensors()

    def list_channels(self) -> tuple[tuple[str, Channel], ...]:
        """List all channels in registration order."""
        return self._catalog.list_channels()

    def read(self, sensor_key: str, channel_key: str) -> WindowSnapshot | None:
        """Get a snapshot of a sensor channel, `None` if there is no data."""
        return self._store.read(sensor_key, channel_key)

    def latest(self, sensor_key: str, channel_key: str) -> Sample | None:
        """Get the newest sample of a sensor channel, `None` if there is none."""
        return self._store.latest(sensor_key, channel_key)

    def time_range(self) -> TimeRange:
        """Get the time span covered by the stored samples."""
        return self._store.time_range()

    def latest_values(self, channel_key: str) -> Mapping[str, float]:
        """Get the newest value of every sensor with data for a channel.

        Args:
            channel_key: The channel to read.

        Returns:
            The newest value of each sensor, sensors without data are left out.
        """
        values: dict[str, float] = {}
        for sensor_key, _ in self._catalog.list_sensors():
            if (sensor_key, channel_key) not in self._catalog:
                continue
            sample = self._store.latest(sensor_key, channel_key)
            if sample is not None:
                values[sensor_key] = sample.value
        return values

    def signal(self, key: SignalKey) -> Signal[Any]:
        """Get one of the well-known signals.

        Args:
            key: The signal key.

        Returns:
            The signal.
        """
        return self._registry.get_or_create(SIGNAL_TYPES[key], key)

    def subscribe(
        self, key: SignalKey, callback: Callable[[Any], object]
    ) -> Subscription[Any]:
        """Subscribe a callback to one of the well-known signals.

        Args:
            key: The signal key.
            callback: Called with every message of the signal.

        Returns:
            The subscription handle.
        """
        return self.signal(key).subscribe(callback)

    def emit_sensor_selected(self, sensor_key: str) -> None:
        """Notify that a sensor was selected in the UI.

        Args:
            sensor_key: The selected sensor.
        """
        if not self._catalog.has_sensor(sensor_key):
            _logger.warning("Selected sensor %r is not in the catalog", sensor_key)
        self.signal(SignalKey.SENSOR_SELECTED).emit(sensor_key)

    def emit_sensor_hovered(self, sensor_key: str) -> None:
        """Notify that the pointer is over a sensor in the UI.

        Args:
            sensor_key: The hovered sensor.
        """
        self.signal(SignalKey.SENSOR_HOVERED).emit(sensor_key)

    def start(self) -> None:
        """Start producing telemetry."""
        self._scheduler.start()

    async def stop(self) -> None:
        """Stop producing telemetry."""
        await self._scheduler.stop()

    async def __aenter__(self) -> Self:
        """Enter an async context, starting the telemetry.

        Returns:
            This context.
        """
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit an async context, stopping the telemetry."""
        await self.stop()

    def __repr__(self) -> str:
        """Return a string representation of this context."""
        return (
            f"{type(self).__name__}(catalog={self._catalog!r}, "
            f"scheduler={self._scheduler!r})"
        )

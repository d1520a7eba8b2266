# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Produce the telemetry and give consumers access to it.

The [`TickScheduler`][machinetwin.telemetry.TickScheduler] asks a
[`ValueSource`][machinetwin.telemetry.ValueSource] for a value of every sensor
channel once per period, stores them and publishes the tick signals.

The [`TelemetryContext`][machinetwin.telemetry.TelemetryContext] builds and owns
all components. Create one at start-up and hand it to every consumer:

```python
import asyncio

from machinetwin.config import load_config
from machinetwin.signals import SignalKey
from machinetwin.telemetry import TelemetryContext


async def main() -> None:
    context = TelemetryContext.from_config(load_config("twin.toml"))
    context.subscribe(SignalKey.TIME_ADVANCED, print)
    async with context:
        await asyncio.sleep(10)
    print(context.read("sensor_1", "temperature"))


asyncio.run(main())
```
"""

from ._context import TelemetryContext
from ._heatmap import ColourBand, HeatmapScale
from ._scheduler import TickScheduler
from ._sources import CallableSource, SequenceSource, UniformRandomSource, ValueSource

__all__ = [
    "CallableSource",
    "ColourBand",
    "HeatmapScale",
    "SequenceSource",
    "TelemetryContext",
    "TickScheduler",
    "UniformRandomSource",
    "ValueSource",
]

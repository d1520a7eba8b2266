# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Bounded windows of recent sensor samples.

Every `(sensor, channel)` pair of the catalog gets a
[`SampleWindow`][machinetwin.timeseries.SampleWindow] holding its most recent
samples, oldest first. The
[`SampleWindowStore`][machinetwin.timeseries.SampleWindowStore] owns all windows
and hands out read-only [`WindowSnapshot`][machinetwin.timeseries.WindowSnapshot]s:

```python
snapshot = store.read("sensor_1", "temperature")
if snapshot is None:
    ...  # no data yet
else:
    chart.plot(snapshot.timestamps, snapshot.values)
```
"""

from ._base_types import Sample, TimeRange, WindowSnapshot
from ._store import SampleWindowStore
from ._window import SampleWindow

__all__ = [
    "Sample",
    "SampleWindow",
    "SampleWindowStore",
    "TimeRange",
    "WindowSnapshot",
]

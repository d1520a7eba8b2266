# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Real-time telemetry core of the machine digital twin.

The package keeps a bounded window of recent samples for every sensor channel
of the machine, produces new samples periodically and notifies the consumers
(charts, heatmap, lists, detail panels) when time advances and values change.

* [`machinetwin.catalog`][]: the sensors and channels.
* [`machinetwin.timeseries`][]: the sample windows and their store.
* [`machinetwin.signals`][]: the push notifications.
* [`machinetwin.telemetry`][]: the tick scheduler and the context tying it all
  together.
* [`machinetwin.config`][]: the TOML configuration.
"""

from .telemetry import TelemetryContext

__all__ = ["TelemetryContext"]

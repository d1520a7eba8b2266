# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Defaults shared between the telemetry components.

All of them can be overridden through the configuration.
"""

from datetime import timedelta

DEFAULT_WINDOW_CAPACITY: int = 20
"""Number of samples kept per (sensor, channel) pair."""

DEFAULT_TICK_PERIOD: timedelta = timedelta(seconds=1)
"""Period of the tick scheduler."""

DEFAULT_TIME_ADVANCED_INTERVAL: timedelta = timedelta(seconds=1)
"""Minimum time between two `time-advanced` signals."""

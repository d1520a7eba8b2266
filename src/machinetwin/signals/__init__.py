# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Push notifications for telemetry consumers.

Consumers subscribe callbacks to named [`Signal`][machinetwin.signals.Signal]s held
by a [`SignalRegistry`][machinetwin.signals.SignalRegistry] and keep the returned
[`Subscription`][machinetwin.signals.Subscription] to unsubscribe later.

The [`NotificationCoalescer`][machinetwin.signals.NotificationCoalescer] publishes the
`time-advanced` and `values-changed` signals after every tick. The
`sensor-selected` and `sensor-hovered` signals go through the same registry but
are emitted by the UI layer.
"""

from ._coalescer import SIGNAL_TYPES, NotificationCoalescer, SignalKey
from ._registry import Signal, SignalRegistry, Subscription

__all__ = [
    "NotificationCoalescer",
    "SIGNAL_TYPES",
    "Signal",
    "SignalKey",
    "SignalRegistry",
    "Subscription",
]

# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Script with an example how to run the telemetry of the digital twin.

It produces synthetic stator temperatures for a few seconds, prints the newest
values whenever the time advances and shows the colour of every sensor in the
heatmap at the end.
"""

import argparse
import asyncio
import logging
from datetime import datetime

from machinetwin.config import TelemetryConfig, load_config
from machinetwin.signals import SignalKey
from machinetwin.telemetry import HeatmapScale, TelemetryContext


async def main(config: TelemetryConfig, duration: float) -> None:
    """Run the telemetry and print what the consumers would show.

    Args:
        config: The telemetry configuration.
        duration: How long to run, in seconds.
    """
    context = TelemetryContext.from_config(config)

    def on_time_advanced(now: datetime) -> None:
        values = context.latest_values("temperature")
        print(f"{now:%H:%M:%S} {len(values)} sensors, e.g. {values.get('sensor_1')}")

    with context.subscribe(SignalKey.TIME_ADVANCED, on_time_advanced):
        async with context:
            await asyncio.sleep(duration)

    snapshot = context.read("sensor_1", "temperature")
    if snapshot is not None:
        print(f"sensor_1 window: {list(snapshot.values)} ({snapshot.count} samples)")
    print(f"Covered time: {context.time_range()}")
    for key, colour in HeatmapScale.default().colours(context, "temperature").items():
        print(f"{key}: {colour}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", help="Path to a TOML configuration file")
    parser.add_argument("--duration", type=float, default=5.0)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s:%(message)s"
    )
    asyncio.run(
        main(
            load_config(args.config) if args.config else TelemetryConfig(),
            args.duration,
        )
    )

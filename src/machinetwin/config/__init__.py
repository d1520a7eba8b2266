# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Read the telemetry configuration.

The configuration is a TOML file with optional `telemetry`, `catalog` and
`source` tables. Everything missing falls back to the defaults: 24
stator sensors with a single temperature channel, 20 samples per window and a
one second tick.
"""

from ._config import (
    CatalogConfig,
    ChannelConfig,
    ConfigError,
    SourceConfig,
    TelemetryConfig,
    config_from_mapping,
    load_config,
)

__all__ = [
    "CatalogConfig",
    "ChannelConfig",
    "ConfigError",
    "SourceConfig",
    "TelemetryConfig",
    "config_from_mapping",
    "load_config",
]

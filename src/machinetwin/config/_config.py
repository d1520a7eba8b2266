# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Read the telemetry configuration from TOML files."""

import dataclasses
import logging
import pathlib
import tomllib
from collections.abc import Mapping
from datetime import timedelta
from types import MappingProxyType
from typing import Annotated, Any, Self

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from .._internal._constants import (
    DEFAULT_TICK_PERIOD,
    DEFAULT_TIME_ADVANCED_INTERVAL,
    DEFAULT_WINDOW_CAPACITY,
)

_logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration contains invalid values."""


@dataclasses.dataclass(frozen=True)
class ChannelConfig:
    """Configuration of one channel of the catalog."""

    name: str
    """The display name of the channel."""

    value_type: str = "double"
    """The value kind tag."""

    unit: str = ""
    """The physical unit."""

    min: float = 0.0
    """Lower end of the display range."""

    max: float = 1.0
    """Upper end of the display range."""


def _default_channels() -> Mapping[str, ChannelConfig]:
    return MappingProxyType(
        {
            "temperature": ChannelConfig(
                name="Temperature", value_type="double", unit="°C", min=10.0, max=40.0
            )
        }
    )


@dataclasses.dataclass(frozen=True)
class CatalogConfig:
    """Configuration of the stator sensor catalog.

    The `*_format` strings are formatted with the sensor number as `n`, starting at 1.
    """

    sensor_count: int = 24
    """The number of sensors, one per stator."""

    sensor_key_format: str = "sensor_{n}"
    """The format of the sensor keys."""

    sensor_name_format: str = "Sensor {n}"
    """The format of the sensor display names."""

    group_name_format: str = "Stator {n}"
    """The format of the group names."""

    base_height: float = 2.0
    """Height of the sensor below the first stator."""

    spacing: float = 0.895
    """Vertical distance between two consecutive sensors."""

    object_id_offset: int = 1000
    """Added to the sensor number to get the scene object id."""

    channels: Mapping[str, ChannelConfig] = dataclasses.field(
        default_factory=_default_channels
    )
    """The channels, in registration order."""


@dataclasses.dataclass(frozen=True)
class SourceConfig:
    """Configuration of the synthetic value source."""

    low: float = 20.0
    """Lower end of the generated values."""

    high: float = 30.0
    """Upper end of the generated values (exclusive)."""

    seed: int | None = None
    """Seed of the random generator, `None` for a random seed."""


@dataclasses.dataclass(frozen=True)
class TelemetryConfig:
    """The full telemetry configuration."""

    window_capacity: int = DEFAULT_WINDOW_CAPACITY
    """Number of samples kept per (sensor, channel) pair."""

    tick_period: timedelta = DEFAULT_TICK_PERIOD
    """Period of the tick scheduler."""

    time_advanced_interval: timedelta = DEFAULT_TIME_ADVANCED_INTERVAL
    """Minimum time between two `time-advanced` signals."""

    catalog: CatalogConfig = dataclasses.field(default_factory=CatalogConfig)
    """The catalog configuration."""

    source: SourceConfig = dataclasses.field(default_factory=SourceConfig)
    """The value source configuration."""


_Number = Annotated[float, Strict(), AllowInfNan(False)]
"""A finite number; integers are accepted, booleans and strings are not."""

_Seconds = Annotated[_Number, Field(gt=0)]
"""A positive duration in seconds."""


class _ChannelTable(BaseModel):
    """A `[catalog.channels.<key>]` table."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr | None = None
    value_type: StrictStr = "double"
    unit: StrictStr = ""
    min: _Number = 0.0
    max: _Number = 1.0

    @model_validator(mode="after")
    def _check_range(self) -> Self:
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) is bigger than max ({self.max})")
        return self


class _TelemetryTable(BaseModel):
    """The `[telemetry]` table."""

    model_config = ConfigDict(frozen=True)

    window_capacity: Annotated[StrictInt, Field(ge=1)] = DEFAULT_WINDOW_CAPACITY
    tick_period: _Seconds = DEFAULT_TICK_PERIOD.total_seconds()
    time_advanced_interval: _Seconds = DEFAULT_TIME_ADVANCED_INTERVAL.total_seconds()


class _CatalogTable(BaseModel):
    """The `[catalog]` table."""

    model_config = ConfigDict(frozen=True)

    sensor_count: Annotated[StrictInt, Field(ge=1)] = 24
    sensor_key_format: StrictStr = "sensor_{n}"
    sensor_name_format: StrictStr = "Sensor {n}"
    group_name_format: StrictStr = "Stator {n}"
    base_height: _Number = 2.0
    spacing: _Number = 0.895
    object_id_offset: StrictInt = 1000
    channels: dict[str, _ChannelTable] | None = None

    @model_validator(mode="after")
    def _check_channels(self) -> Self:
        if self.channels is not None and not self.channels:
            raise ValueError("catalog.channels must define at least one channel")
        return self


class _SourceTable(BaseModel):
    """The `[source]` table."""

    model_config = ConfigDict(frozen=True)

    low: _Number = 20.0
    high: _Number = 30.0
    seed: StrictInt | None = None

    @model_validator(mode="after")
    def _check_range(self) -> Self:
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) is bigger than high ({self.high})")
        return self


class _ConfigFile(BaseModel):
    """The whole configuration document."""

    model_config = ConfigDict(frozen=True)

    telemetry: _TelemetryTable = Field(default_factory=_TelemetryTable)
    catalog: _CatalogTable = Field(default_factory=_CatalogTable)
    source: _SourceTable = Field(default_factory=_SourceTable)


def load_config(path: pathlib.Path | str) -> TelemetryConfig:
    """Read a configuration from a TOML file.

    Args:
        path: The path to the TOML file.

    Returns:
        The configuration, with defaults for everything missing in the file.

    Raises:
        ConfigError: If the file content is not valid.
    """
    config_path = path if isinstance(path, pathlib.Path) else pathlib.Path(path)
    try:
        with config_path.open("rb") as toml_file:
            raw = tomllib.load(toml_file)
    except tomllib.TOMLDecodeError as err:
        _logger.error("Can't read config file %s, err: %s", config_path, err)
        raise ConfigError(f"Invalid TOML in {config_path}: {err}") from err
    _logger.info("Read configuration from %s", config_path)
    return config_from_mapping(raw)


def config_from_mapping(raw: Mapping[str, Any]) -> TelemetryConfig:
    """Build a configuration from a parsed TOML document.

    Unknown keys are ignored.

    Args:
        raw: The parsed document, with optional `telemetry`, `catalog` and
            `source` tables.

    Returns:
        The configuration.

    Raises:
        ConfigError: If a value has the wrong type or is out of range.
    """
    try:
        document = _ConfigFile.model_validate(raw)
    except ValidationError as err:
        _logger.error("Invalid configuration: %s", err)
        raise ConfigError(f"Invalid configuration: {err}") from err

    config = TelemetryConfig(
        window_capacity=document.telemetry.window_capacity,
        tick_period=timedelta(seconds=document.telemetry.tick_period),
        time_advanced_interval=timedelta(
            seconds=document.telemetry.time_advanced_interval
        ),
        catalog=_catalog_config(document.catalog),
        source=SourceConfig(
            low=float(document.source.low),
            high=float(document.source.high),
            seed=document.source.seed,
        ),
    )
    _logger.debug("Configuration loaded: %s", config)
    return config


def _catalog_config(table: _CatalogTable) -> CatalogConfig:
    channels = _default_channels()
    if table.channels is not None:
        channels = MappingProxyType(
            {
                key: ChannelConfig(
                    name=key if channel.name is None else channel.name,
                    value_type=channel.value_type,
                    unit=channel.unit,
                    min=float(channel.min),
                    max=float(channel.max),
                )
                for key, channel in table.channels.items()
            }
        )
    return CatalogConfig(
        sensor_count=table.sensor_count,
        sensor_key_format=table.sensor_key_format,
        sensor_name_format=table.sensor_name_format,
        group_name_format=table.group_name_format,
        base_height=float(table.base_height),
        spacing=float(table.spacing),
        object_id_offset=table.object_id_offset,
        channels=channels,
    )

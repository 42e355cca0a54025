"""Parse Linux ``/proc/<pid>/numa_maps`` into typed, ordered records.

Re-exports public symbols so callers can write::

    from numa_maps import parse, NumaMap, NodePages
"""

from numa_maps.config import ConfigError, ReaderConfig
from numa_maps.logging import LogEntry, Logger, LogLevel
from numa_maps.parser import (
    AddressParseError,
    NumaMapsError,
    NumaMapsParseError,
    parse,
    parse_line,
)
from numa_maps.properties import (
    PAGE_COUNT_KEYS,
    Flag,
    KeyValue,
    NodePages,
    Property,
    PropertyKind,
    WellKnownKey,
    parse_property,
)
from numa_maps.reader import NumaMapsReader, NumaMapsReadError, numa_maps_path, read_numa_maps
from numa_maps.region import NumaMap, Region

__all__ = [
    "PAGE_COUNT_KEYS",
    "AddressParseError",
    "ConfigError",
    "Flag",
    "KeyValue",
    "LogEntry",
    "LogLevel",
    "Logger",
    "NodePages",
    "NumaMap",
    "NumaMapsError",
    "NumaMapsParseError",
    "NumaMapsReadError",
    "NumaMapsReader",
    "Property",
    "PropertyKind",
    "ReaderConfig",
    "Region",
    "WellKnownKey",
    "numa_maps_path",
    "parse",
    "parse_line",
    "parse_property",
    "read_numa_maps",
]

"""Reader configuration: where ``/proc`` lives and how to treat a missing file.

Settings come from one of three places:

- **Defaults**: ``ReaderConfig()`` reads the real ``/proc`` and returns
  an empty map when the file is missing.
- **Environment**: ``KEY=VALUE`` pairs, the same way every Unix process
  receives its configuration.
- **JSON file**: an object whose keys are the field names.

Fields not mentioned anywhere keep their defaults.
"""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path

from numa_maps.parser import NumaMapsError

ENV_PROC_ROOT = "NUMA_MAPS_PROC_ROOT"
ENV_EMPTY_WHEN_UNAVAILABLE = "NUMA_MAPS_EMPTY_WHEN_UNAVAILABLE"

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


class ConfigError(NumaMapsError):
    """Raise when reader configuration is invalid."""


def _parse_bool(name: str, raw: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    msg = f"{name} must be a boolean, got {raw!r}"
    raise ConfigError(msg)


@dataclass(frozen=True)
class ReaderConfig:
    """Settings for ``NumaMapsReader``."""

    proc_root: str = "/proc"
    """Directory that holds the per-process ``<pid>/numa_maps`` files."""

    empty_when_unavailable: bool = True
    """Return an empty map instead of raising when the file does not exist.

    Kernels built without NUMA support have no ``numa_maps`` file.
    """

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> "ReaderConfig":
        """Build a config from environment variables.

        Args:
            environ: Variables to read (defaults to ``os.environ``).

        Returns:
            A config with every set variable applied over the defaults.

        Raises:
            ConfigError: If a boolean variable holds an unknown word.

        """
        env = os.environ if environ is None else environ
        defaults = cls()
        proc_root = env.get(ENV_PROC_ROOT, defaults.proc_root)
        raw_empty = env.get(ENV_EMPTY_WHEN_UNAVAILABLE)
        empty_when_unavailable = (
            defaults.empty_when_unavailable
            if raw_empty is None
            else _parse_bool(ENV_EMPTY_WHEN_UNAVAILABLE, raw_empty)
        )
        return cls(proc_root=proc_root, empty_when_unavailable=empty_when_unavailable)

    @classmethod
    def load(cls, path: Path | str) -> "ReaderConfig":
        """Load a config from a JSON file.

        Args:
            path: File holding a JSON object keyed by field name.

        Returns:
            The loaded config; missing fields keep their defaults.

        Raises:
            ConfigError: If the file is unreadable, not a JSON object,
                names an unknown field, or gives a field the wrong type.

        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            msg = f"Cannot load reader config {path}: {e}"
            raise ConfigError(msg) from e

        if not isinstance(data, dict):
            msg = f"Reader config {path} must be a JSON object"
            raise ConfigError(msg)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown reader config fields: {', '.join(unknown)}"
            raise ConfigError(msg)

        proc_root = data.get("proc_root", "/proc")
        if not isinstance(proc_root, str):
            msg = "proc_root must be a string"
            raise ConfigError(msg)
        empty_when_unavailable = data.get("empty_when_unavailable", True)
        if not isinstance(empty_when_unavailable, bool):
            msg = "empty_when_unavailable must be a boolean"
            raise ConfigError(msg)

        return cls(proc_root=proc_root, empty_when_unavailable=empty_when_unavailable)

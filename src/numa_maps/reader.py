"""Reading ``numa_maps`` from ``/proc``.

On Linux every process has a ``/proc/<pid>/numa_maps`` file, and
``/proc/self/numa_maps`` describes whoever is reading it.  Like the rest
of ``/proc`` it is generated by the kernel at read time, so each read is
a fresh snapshot.

Other operating systems have no such file.  There, and on Linux kernels
built without NUMA support, the reader hands back ``NumaMap.empty()``
instead of an error.  That choice is made here, never in the parser.
"""

import sys
from pathlib import Path

from numa_maps.config import ReaderConfig
from numa_maps.logging import Logger, LogLevel
from numa_maps.parser import NumaMapsError, parse
from numa_maps.region import NumaMap

_SOURCE = "reader"
_SELF = "self"


class NumaMapsReadError(NumaMapsError):
    """Raise when a ``numa_maps`` file cannot be read."""


def numa_maps_path(pid: int | str = _SELF, *, proc_root: Path | str = "/proc") -> Path:
    """Return the ``numa_maps`` path for a process.

    Args:
        pid: A process id, or ``"self"`` for the calling process.
        proc_root: Where ``/proc`` is mounted.

    Raises:
        NumaMapsReadError: If *pid* is neither ``"self"`` nor a
            non-negative integer.

    """
    match pid:
        case bool():
            msg = f"Invalid pid: {pid!r}"
            raise NumaMapsReadError(msg)
        case int() if pid >= 0:
            name = str(pid)
        case str() if pid == _SELF or pid.isdigit():
            name = pid
        case _:
            msg = f"Invalid pid: {pid!r}"
            raise NumaMapsReadError(msg)
    return Path(proc_root) / name / "numa_maps"


def read_numa_maps(path: Path | str) -> NumaMap:
    """Read and parse one ``numa_maps`` file.

    Args:
        path: The file to read.

    Returns:
        The parsed map.

    Raises:
        NumaMapsReadError: If the file cannot be opened or decoded.
        AddressParseError: If a line has no valid address.

    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read {path}: {e}"
        raise NumaMapsReadError(msg) from e
    return parse(content)


class NumaMapsReader:
    """Read ``numa_maps`` for a process, falling back to an empty map.

    The reader owns the two decisions the parser refuses to make: is
    this platform supported at all, and what to do when the file is
    missing.
    """

    def __init__(
        self,
        config: ReaderConfig | None = None,
        *,
        logger: Logger | None = None,
        platform: str | None = None,
    ) -> None:
        """Create a reader.

        Args:
            config: Reader settings (defaults to ``ReaderConfig()``).
            logger: Where to record decisions (a private one if omitted).
            platform: Platform name to check (defaults to ``sys.platform``).

        """
        self._config = config if config is not None else ReaderConfig()
        self._logger = logger if logger is not None else Logger()
        self._platform = platform if platform is not None else sys.platform

    @property
    def config(self) -> ReaderConfig:
        """Return the reader settings."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the reader's log."""
        return self._logger

    @property
    def supported(self) -> bool:
        """Return True if this platform can have ``numa_maps`` files."""
        return self._platform.startswith("linux")

    def read(self, pid: int | str = _SELF) -> NumaMap:
        """Read the ``numa_maps`` of *pid*.

        Args:
            pid: A process id, or ``"self"``.

        Returns:
            The parsed map, or an empty map on unsupported platforms and
            (when configured) when the file does not exist.

        Raises:
            NumaMapsReadError: If the file cannot be read.
            AddressParseError: If the file content is malformed.

        """
        if not self.supported:
            self._logger.log(
                LogLevel.INFO,
                f"numa_maps not available on {self._platform}, using empty map",
                source=_SOURCE,
            )
            return NumaMap.empty()

        path = numa_maps_path(pid, proc_root=self._config.proc_root)
        if self._config.empty_when_unavailable and not path.exists():
            self._logger.log(
                LogLevel.WARNING,
                "numa_maps missing, using empty map",
                source=_SOURCE,
                path=str(path),
            )
            return NumaMap.empty()

        try:
            numa_map = read_numa_maps(path)
        except NumaMapsError as e:
            self._logger.log(LogLevel.ERROR, str(e), source=_SOURCE, path=str(path))
            raise

        self._logger.log(
            LogLevel.DEBUG,
            f"parsed {len(numa_map)} regions",
            source=_SOURCE,
            path=str(path),
        )
        return numa_map

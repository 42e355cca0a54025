"""Reader log: a small in-memory record of what the reader did.

The parser itself is silent.  The reader, which decides whether to
parse a real file or fall back to an empty map, keeps a structured
trail of those decisions so callers can inspect them afterwards:

- **LogLevel**: severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry**: a single record (level, message, source, path).
- **Logger**: an append-only buffer with filtering and clearing.

Entries are frozen dataclasses; once written, a record does not change.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries.

    IntEnum, so levels compare with ``<`` / ``>`` and minimum-level
    filtering is a plain comparison.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "reader").
        path: The ``numa_maps`` file involved, if any.

    """

    level: LogLevel
    message: str
    source: str
    path: str | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message (path)``."""
        text = f"[{self.level.name}] {self.source}: {self.message}"
        if self.path is not None:
            text += f" ({self.path})"
        return text


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in the order they were written."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        path: str | None = None,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            path: File the event concerns, if any.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, path=path))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        path: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching every given criterion.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.
            path: If set, only return entries about this file.

        Returns:
            A new list of matching entries.

        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
            and (path is None or e.path == path)
        ]

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of entries."""
        return len(self._entries)

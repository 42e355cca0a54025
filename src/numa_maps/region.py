"""Parsed ``numa_maps`` records: one ``Region`` per line, one ``NumaMap`` per file.

A process's address space is a list of **mappings**: contiguous ranges
of virtual memory with uniform backing and policy.  The kernel reports
each mapping as one line of ``numa_maps``, in address order.  We keep
that order exactly as the file gives it.

Both records are frozen and hold tuples, so a parsed map can be handed
around without anyone mutating it underneath you.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from numa_maps.properties import (
    PAGE_COUNT_KEYS,
    Flag,
    KeyValue,
    NodePages,
    Property,
    WellKnownKey,
)

_BYTES_PER_KB = 1024


@dataclass(frozen=True)
class Region:
    """One memory mapping: base address, policy and properties."""

    address: int
    """Base virtual address of the mapping."""

    policy: str | None
    """NUMA memory policy word (``default``, ``interleave:0-1``...), if any."""

    properties: tuple[Property, ...] = ()
    """Properties in token order; duplicates are kept."""

    @property
    def flags(self) -> tuple[str, ...]:
        """Return every bare flag word in order."""
        return tuple(p.word for p in self.properties if isinstance(p, Flag))

    @property
    def node_pages(self) -> tuple[NodePages, ...]:
        """Return every per-node page count in order."""
        return tuple(p for p in self.properties if isinstance(p, NodePages))

    def has_flag(self, word: str) -> bool:
        """Return True if *word* appears as a bare flag."""
        return word in self.flags

    def values(self, key: str) -> list[str]:
        """Return the values of every ``key=value`` property named *key*."""
        return [p.value for p in self.properties if isinstance(p, KeyValue) and p.key == key]

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the first value for *key*, or *default* if absent."""
        found = self.values(key)
        return found[0] if found else default

    @property
    def file(self) -> str | None:
        """Return the path of the file backing this mapping, if any."""
        return self.get(WellKnownKey.FILE)

    @property
    def is_heap(self) -> bool:
        """Return True for the process heap."""
        return self.has_flag(WellKnownKey.HEAP)

    @property
    def is_stack(self) -> bool:
        """Return True for the main thread's stack."""
        return self.has_flag(WellKnownKey.STACK)

    @property
    def is_huge(self) -> bool:
        """Return True if the mapping is backed by huge pages."""
        return self.has_flag(WellKnownKey.HUGE)

    @property
    def page_size(self) -> int | None:
        """Return the kernel page size in bytes, from ``kernelpagesize_kB``.

        Returns ``None`` when the key is absent or its value is not a
        plain number.
        """
        raw = self.get(WellKnownKey.KERNEL_PAGE_SIZE)
        if raw is None or not raw.isdecimal():
            return None
        return int(raw) * _BYTES_PER_KB

    def count(self, key: str) -> int | None:
        """Return the integer value of a page-count key such as ``anon``.

        Args:
            key: One of ``anon``, ``dirty``, ``mapped``, ``mapmax``,
                ``swapcache``, ``active`` or ``writeback``.

        Returns:
            The count, or ``None`` if the key is absent or not a number.

        Raises:
            KeyError: If *key* is not a page-count key.

        """
        if key not in PAGE_COUNT_KEYS:
            msg = f"Not a page-count key: {key}"
            raise KeyError(msg)
        raw = self.get(key)
        if raw is None or not raw.isdecimal():
            return None
        return int(raw)

    def node_bytes(self) -> list[tuple[int, int]]:
        """Return ``(node, bytes)`` for each per-node count, in order.

        Empty when the page size is unknown.
        """
        page_size = self.page_size
        if page_size is None:
            return []
        return [(entry.node, entry.size_in_bytes(page_size)) for entry in self.node_pages]

    def __str__(self) -> str:
        """Render the region back into ``numa_maps`` line form."""
        head = [f"{self.address:x}"]
        if self.policy is not None:
            head.append(self.policy)
        return " ".join(head + [str(p) for p in self.properties])


@dataclass(frozen=True)
class NumaMap:
    """Every region of one ``numa_maps`` file, in file order."""

    ranges: tuple[Region, ...] = ()
    """Regions as they appear in the file; never re-sorted."""

    @classmethod
    def empty(cls) -> "NumaMap":
        """Return a map with no regions.

        Used on platforms that have no ``numa_maps`` file at all.  The
        result equals what parsing an empty string produces.
        """
        return cls()

    def find(self, address: int) -> Region | None:
        """Return the region starting exactly at *address*, if any."""
        for region in self.ranges:
            if region.address == address:
                return region
        return None

    def __len__(self) -> int:
        """Return the number of regions."""
        return len(self.ranges)

    def __iter__(self) -> Iterator[Region]:
        """Iterate over regions in file order."""
        return iter(self.ranges)

"""Region properties: the tokens that follow an address in ``numa_maps``.

Every line of ``/proc/<pid>/numa_maps`` looks like::

    7f2d2b000000 default file=/lib/libc.so mapped=12 active=0 N0=12

After the address (and the optional policy word) each token is one
**property**.  Tokens come in three shapes:

- **Flag**: a bare word such as ``heap``, ``stack`` or ``huge``.
- **KeyValue**: ``key=value``, where the value is any string: a page
  count, a file path, even an empty string.
- **NodePages**: ``N<node>=<pages>``, the number of pages of this
  mapping that live on one NUMA node.

Classification happens once, at parse time.  Consumers match on the
variant instead of re-inspecting strings.
"""

import re
from dataclasses import dataclass
from enum import StrEnum

_NODE_KEY = re.compile(r"N([0-9]+)")
_UNSIGNED = re.compile(r"[0-9]+")


class PropertyKind(StrEnum):
    """Tag naming which property variant a token became."""

    FLAG = "flag"
    KEY_VALUE = "key_value"
    NODE_PAGES = "node_pages"


class WellKnownKey(StrEnum):
    """Keys and flags documented in ``man 7 numa``.

    The kernel may add new keys at any time, so this list never drives
    classification.  It only gives the region helpers stable names.
    """

    FILE = "file"
    HEAP = "heap"
    STACK = "stack"
    HUGE = "huge"
    ANON = "anon"
    DIRTY = "dirty"
    MAPPED = "mapped"
    MAPMAX = "mapmax"
    SWAPCACHE = "swapcache"
    ACTIVE = "active"
    WRITEBACK = "writeback"
    KERNEL_PAGE_SIZE = "kernelpagesize_kB"


# Keys whose value is a number of pages.
PAGE_COUNT_KEYS: frozenset[str] = frozenset(
    {
        WellKnownKey.ANON,
        WellKnownKey.DIRTY,
        WellKnownKey.MAPPED,
        WellKnownKey.MAPMAX,
        WellKnownKey.SWAPCACHE,
        WellKnownKey.ACTIVE,
        WellKnownKey.WRITEBACK,
    }
)


@dataclass(frozen=True)
class Flag:
    """A bare word with no ``=``."""

    word: str
    """The token, verbatim."""

    @property
    def kind(self) -> PropertyKind:
        """Return ``PropertyKind.FLAG``."""
        return PropertyKind.FLAG

    def __str__(self) -> str:
        """Render the original token."""
        return self.word


@dataclass(frozen=True)
class KeyValue:
    """A ``key=value`` token kept as two literal strings."""

    key: str
    """Text before the first ``=``."""

    value: str
    """Text after the first ``=`` (may be empty or contain ``=``)."""

    @property
    def kind(self) -> PropertyKind:
        """Return ``PropertyKind.KEY_VALUE``."""
        return PropertyKind.KEY_VALUE

    def __str__(self) -> str:
        """Render the original token."""
        return f"{self.key}={self.value}"


@dataclass(frozen=True)
class NodePages:
    """Pages of a mapping resident on one NUMA node (``N<node>=<pages>``)."""

    node: int
    """NUMA node number taken from the key suffix."""

    pages: int
    """Page count on that node."""

    @property
    def kind(self) -> PropertyKind:
        """Return ``PropertyKind.NODE_PAGES``."""
        return PropertyKind.NODE_PAGES

    def size_in_bytes(self, page_size: int) -> int:
        """Return the resident size in bytes for the given page size."""
        return self.pages * page_size

    def __str__(self) -> str:
        """Render the original token."""
        return f"N{self.node}={self.pages}"


Property = Flag | KeyValue | NodePages


def parse_property(token: str) -> Property:
    """Classify one whitespace-free token into a property variant.

    A node-shaped key whose numbers do not parse (``N0=x``, ``Nx=5``,
    ``N=5``) is not an error: it stays a plain ``KeyValue``.

    Args:
        token: A single token from a ``numa_maps`` line.

    Returns:
        The ``Flag``, ``KeyValue`` or ``NodePages`` the token denotes.

    """
    key, sep, value = token.partition("=")
    if not sep:
        return Flag(word=token)

    node_match = _NODE_KEY.fullmatch(key)
    if node_match is not None and _UNSIGNED.fullmatch(value) is not None:
        return NodePages(node=int(node_match.group(1)), pages=int(value))

    return KeyValue(key=key, value=value)

"""Parser for ``/proc/<pid>/numa_maps`` text.

The file has one mapping per line::

    <hex-address> [<policy-word>] <token> <token> ...

Two layers:

- ``parse_line`` turns one line into a ``Region`` (or ``None`` for a
  blank line).
- ``parse`` folds ``parse_line`` over a whole file and stops at the
  first line whose address cannot be read.

The policy word is recognised purely by shape: the token right after
the address is the policy when it has no ``=`` in it.  Policy words
never contain ``=``, while every property that could follow the address
directly (``file=``, ``anon=``, ``N0=``...) does.

Nothing here touches the filesystem or logs anything; callers hand in
text that has already been read.
"""

import re

from numa_maps.properties import parse_property
from numa_maps.region import NumaMap, Region

_HEX_ADDRESS = re.compile(r"[0-9a-fA-F]+")


class NumaMapsError(Exception):
    """Raise for any failure reported by the numa_maps library."""


class NumaMapsParseError(NumaMapsError):
    """Raise when ``numa_maps`` text cannot be parsed."""


class AddressParseError(NumaMapsParseError):
    """Raise when a line does not start with a hexadecimal address."""

    def __init__(self, token: str, line: str, line_number: int | None = None) -> None:
        """Describe the offending line.

        Args:
            token: The first token of the line.
            line: The full line as given.
            line_number: 1-based position in the file, when known.

        """
        self.token = token
        self.line = line
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        msg = f"{where}invalid address {token!r} in {line.strip()!r}"
        super().__init__(msg)


def _parse_address(token: str) -> int | None:
    if _HEX_ADDRESS.fullmatch(token) is None:
        return None
    return int(token, 16)


def parse_line(line: str) -> Region | None:
    """Parse one ``numa_maps`` line.

    Args:
        line: A single line, with or without its line terminator.

    Returns:
        The parsed ``Region``, or ``None`` if the line is blank.

    Raises:
        AddressParseError: If the first token is not a hex address.

    """
    tokens = line.split()
    if not tokens:
        return None

    address = _parse_address(tokens[0])
    if address is None:
        raise AddressParseError(tokens[0], line)

    rest = tokens[1:]
    policy: str | None = None
    if rest and "=" not in rest[0]:
        policy = rest[0]
        rest = rest[1:]

    return Region(
        address=address,
        policy=policy,
        properties=tuple(parse_property(token) for token in rest),
    )


def parse(content: str) -> NumaMap:
    """Parse the full text of a ``numa_maps`` file.

    Blank lines are skipped.  ``\\r\\n`` line endings are accepted.

    Args:
        content: The complete file content, already decoded.

    Returns:
        A ``NumaMap`` with one region per non-blank line, in file order.

    Raises:
        AddressParseError: For the first line without a valid address.
            No partial map is returned.

    """
    regions: list[Region] = []
    for line_number, line in enumerate(content.split("\n"), start=1):
        try:
            region = parse_line(line)
        except AddressParseError as e:
            raise AddressParseError(e.token, line, line_number) from e
        if region is not None:
            regions.append(region)
    return NumaMap(ranges=tuple(regions))

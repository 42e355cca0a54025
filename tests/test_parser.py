"""Tests for the numa_maps line and file parsers.

A line is ``<hex-address> [<policy>] <token>...``.  The file parser
applies the line parser to every non-blank line and stops at the first
line without a valid address.
"""

from pathlib import Path

import pytest

from numa_maps.parser import (
    AddressParseError,
    NumaMapsError,
    NumaMapsParseError,
    parse,
    parse_line,
)
from numa_maps.properties import Flag, KeyValue, NodePages
from numa_maps.region import NumaMap, Region

SAMPLE = Path(__file__).parent / "data" / "numa_maps"
SAMPLE_REGIONS = 23
LIBC_ADDRESS = 0x7F2D2B000000


# ---------------------------------------------------------------------------
# Line parser
# ---------------------------------------------------------------------------


class TestParseLine:
    """Verify single-line parsing."""

    def test_documented_example(self) -> None:
        """A typical line should parse address, policy and every property."""
        line = (
            "7f2d2b000000 default file=/lib/libc.so mapped=12 mapunit=4K "
            "active=0 N0=12 kernelpagesize_kB=4"
        )
        assert parse_line(line) == Region(
            address=LIBC_ADDRESS,
            policy="default",
            properties=(
                KeyValue(key="file", value="/lib/libc.so"),
                KeyValue(key="mapped", value="12"),
                KeyValue(key="mapunit", value="4K"),
                KeyValue(key="active", value="0"),
                NodePages(node=0, pages=12),
                KeyValue(key="kernelpagesize_kB", value="4"),
            ),
        )

    def test_duplicates_preserved_in_order(self) -> None:
        """Repeated keys should stay as separate properties, in order."""
        assert parse_line("1000 N0=4 N0=8") == Region(
            address=0x1000,
            policy=None,
            properties=(NodePages(node=0, pages=4), NodePages(node=0, pages=8)),
        )

    def test_policy_detected(self) -> None:
        """A bare word right after the address should be the policy."""
        region = parse_line("2000 interleave file=/a N1=2")
        assert region is not None
        assert region.policy == "interleave"
        assert region.properties == (
            KeyValue(key="file", value="/a"),
            NodePages(node=1, pages=2),
        )

    def test_no_policy_when_second_token_has_equals(self) -> None:
        """A ``key=value`` second token should be a property, not a policy."""
        region = parse_line("2000 file=/a N1=2")
        assert region is not None
        assert region.policy is None
        assert region.properties[0] == KeyValue(key="file", value="/a")

    def test_policy_with_node_list(self) -> None:
        """Policies such as ``bind:0-1`` are single bare words."""
        region = parse_line("3000 bind:0-1 anon=1")
        assert region is not None
        assert region.policy == "bind:0-1"

    def test_only_second_token_can_be_policy(self) -> None:
        """Later bare words should be flags, even if they look like policies."""
        region = parse_line("3000 default heap stack")
        assert region is not None
        assert region.policy == "default"
        assert region.properties == (Flag(word="heap"), Flag(word="stack"))

    def test_address_only(self) -> None:
        """A line with just an address should have no policy or properties."""
        assert parse_line("7fffbaf86000") == Region(address=0x7FFFBAF86000, policy=None)

    def test_address_and_policy_only(self) -> None:
        """A line with address and policy should have no properties."""
        assert parse_line("7fffbaf86000 default") == Region(
            address=0x7FFFBAF86000, policy="default"
        )

    def test_surrounding_whitespace_ignored(self) -> None:
        """Leading, trailing and repeated whitespace should not matter."""
        assert parse_line("  1000\tdefault   N0=1 \r\n") == parse_line("1000 default N0=1")

    def test_uppercase_hex(self) -> None:
        """Upper-case hex digits should be accepted."""
        region = parse_line("DEADBEEF default")
        assert region is not None
        assert region.address == 0xDEADBEEF

    @pytest.mark.parametrize("line", ["", "   ", "\t", "\r"])
    def test_blank_line_yields_none(self, line: str) -> None:
        """Blank lines should produce no region and no error."""
        assert parse_line(line) is None

    @pytest.mark.parametrize("token", ["zzzz", "0x1000", "-1000", "+1000", "10_00", "N0=1"])
    def test_bad_address_raises(self, token: str) -> None:
        """A first token that is not bare hex should raise AddressParseError."""
        with pytest.raises(AddressParseError, match="invalid address") as exc_info:
            parse_line(f"{token} default anon=1")
        assert exc_info.value.token == token
        assert exc_info.value.line_number is None

    def test_deterministic(self) -> None:
        """Parsing the same line twice should give equal regions."""
        line = "1000 default heap anon=2 N0=2 N1=3"
        assert parse_line(line) == parse_line(line)


# ---------------------------------------------------------------------------
# File parser
# ---------------------------------------------------------------------------


class TestParse:
    """Verify whole-file parsing."""

    def test_empty_content(self) -> None:
        """Empty text should give an empty map."""
        result = parse("")
        assert result.ranges == ()
        assert len(result) == 0

    def test_empty_matches_fallback(self) -> None:
        """Parsing empty text should equal the platform fallback."""
        assert parse("") == NumaMap.empty()

    def test_blank_lines_skipped(self) -> None:
        """Blank lines anywhere should contribute nothing."""
        result = parse("\n\n1000 default\n   \n2000 default\n\n")
        assert [r.address for r in result] == [0x1000, 0x2000]

    def test_crlf_line_endings(self) -> None:
        """Windows line endings should parse like Unix ones."""
        assert parse("1000 default N0=1\r\n2000 default\r\n") == parse(
            "1000 default N0=1\n2000 default\n"
        )

    def test_order_preserved(self) -> None:
        """Regions should keep file order, not be sorted by address."""
        result = parse("3000 default\n1000 default\n2000 default\n")
        assert [r.address for r in result] == [0x3000, 0x1000, 0x2000]

    def test_first_bad_line_aborts(self) -> None:
        """A malformed line should raise with its 1-based line number."""
        content = "1000 default\n\nnothex default\n2000 default\n"
        with pytest.raises(AddressParseError) as exc_info:
            parse(content)
        err = exc_info.value
        assert err.line_number == 3  # noqa: PLR2004
        assert err.token == "nothex"
        assert "line 3" in str(err)

    def test_error_hierarchy(self) -> None:
        """AddressParseError should be catchable as the library base error."""
        with pytest.raises(NumaMapsParseError):
            parse("xyz\n")
        with pytest.raises(NumaMapsError):
            parse("xyz\n")

    def test_sample_file(self) -> None:
        """A real numa_maps dump should parse every region."""
        result = parse(SAMPLE.read_text())
        assert len(result) == SAMPLE_REGIONS
        assert all(r.policy == "default" for r in result)

        first = result.ranges[0]
        assert first == Region(
            address=0x55655C223000,
            policy="default",
            properties=(
                KeyValue(key="file", value="/usr/bin/cat"),
                KeyValue(key="mapped", value="2"),
                KeyValue(key="mapmax", value="3"),
                KeyValue(key="active", value="0"),
                NodePages(node=0, pages=2),
                KeyValue(key="kernelpagesize_kB", value="4"),
            ),
        )

        heap = result.ranges[5]
        assert heap.properties[0] == Flag(word="heap")

        stack = result.ranges[20]
        assert stack.address == 0x7FFFBADE0000
        assert stack.properties[0] == Flag(word="stack")

        assert result.ranges[-1] == Region(address=0x7FFFBAF8A000, policy="default")

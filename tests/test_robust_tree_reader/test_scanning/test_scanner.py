"""Tests for the single-pass listing scanner."""

import logging
from typing import List

import pytest

from robust_tree_reader.scanning import CharacterClass, ListingScanner, ScanEvent
from robust_tree_reader.shared import InvalidCharacterError, ScannerConfig

SCENARIO_LISTING = (
    "a\n"
    "|- b\n"
    "|- c\n"
    "`- d\n"
    "   |- e\n"
    "   |  `- f\n"
    "   `- g\n"
)


def scan_all(text: str, config: ScannerConfig = None) -> List[ScanEvent]:
    return list(ListingScanner(config).scan(text))


class TestCharacterClasses:
    """Test classification of the input at the cursor."""

    def test_newline(self) -> None:
        """Test LF and CRLF terminators."""
        scanner = ListingScanner()

        assert scanner.classify("\n", 0) == (CharacterClass.NEWLINE, 1)
        assert scanner.classify("\r\n", 0) == (CharacterClass.NEWLINE, 2)

    def test_branch_glyph_is_consumed_atomically(self) -> None:
        """Test that |- is one branch, not a blank followed by a dash."""
        scanner = ListingScanner()

        assert scanner.classify("|- b", 0) == (CharacterClass.BRANCH, 2)
        assert scanner.classify("`- b", 0) == (CharacterClass.BRANCH, 2)

    def test_blank_glyphs(self) -> None:
        """Test spaces, tabs and lone bars."""
        scanner = ListingScanner()

        for char in (" ", "\t", "|"):
            assert scanner.classify(char + " x", 0) == (CharacterClass.BLANK, 1)

    def test_node_tokens(self) -> None:
        """Test identifiers and the null token."""
        scanner = ListingScanner()

        assert scanner.classify("FunctionDecl 0x1", 0) == (CharacterClass.NODE, 12)
        assert scanner.classify("_x1 rest", 0) == (CharacterClass.NODE, 3)
        assert scanner.classify("<<<NULL>>>", 0) == (CharacterClass.NODE, 10)

    def test_end_and_invalid(self) -> None:
        """Test end of input and unclassifiable characters."""
        scanner = ListingScanner()

        assert scanner.classify("a", 1) == (CharacterClass.END, 0)
        assert scanner.classify("-", 0) == (CharacterClass.INVALID, 1)
        assert scanner.classify("`", 0) == (CharacterClass.INVALID, 1)
        assert scanner.classify("9abc", 0) == (CharacterClass.INVALID, 1)


class TestScanEvents:
    """Test the events produced for whole listings."""

    def test_scenario_columns(self) -> None:
        """Test columns, names and lines for the reference listing."""
        events = scan_all(SCENARIO_LISTING)

        assert [(e.column, e.name) for e in events] == [
            (0, "a"), (3, "b"), (3, "c"), (3, "d"),
            (6, "e"), (9, "f"), (6, "g"),
        ]
        assert [e.line for e in events] == [1, 2, 3, 4, 5, 6, 7]

    def test_attribute_is_verbatim_remainder(self) -> None:
        """Test that attribute text is copied without interpretation."""
        events = scan_all(
            "TranslationUnitDecl 0x7f <<invalid sloc>> <invalid sloc>\n"
            "`-FunctionDecl 0x80 <a.c:1:1, line:3:1> line:1:5 main 'int ()'\n"
        )

        assert events[0].name == "TranslationUnitDecl"
        assert events[0].attribute == " 0x7f <<invalid sloc>> <invalid sloc>"
        assert events[1].column == 2
        assert events[1].name == "FunctionDecl"
        assert events[1].attribute == " 0x80 <a.c:1:1, line:3:1> line:1:5 main 'int ()'"

    def test_attribute_is_not_rescanned(self) -> None:
        """Test that characters invalid as markup are fine inside attributes."""
        events = scan_all("a -> \x01 {}\n")

        assert events == [ScanEvent(0, "a", " -> \x01 {}", 1)]

    def test_null_token(self) -> None:
        """Test that the null token is an ordinary node name."""
        events = scan_all("IfStmt\n|-<<<NULL>>>\n`-CompoundStmt\n")

        assert [e.name for e in events] == ["IfStmt", "<<<NULL>>>", "CompoundStmt"]
        assert events[1].column == 2

    def test_custom_null_token(self) -> None:
        """Test a configured null token."""
        events = scan_all("a\n`- <nil>\n", ScannerConfig(null_token="<nil>"))

        assert events[1].name == "<nil>"

    def test_tabs_count_one_column(self) -> None:
        """Test that a tab advances one column."""
        events = scan_all("a\n\tb\n")

        assert events[1].column == 1

    def test_markup_only_lines_produce_no_event(self) -> None:
        """Test that continuation lines only affect column accounting."""
        events = scan_all("a\n|  \n\n`- b\n")

        assert [e.name for e in events] == ["a", "b"]
        assert events[1].line == 4

    def test_crlf_line_endings(self) -> None:
        """Test that CRLF terminators are not part of the attribute."""
        events = scan_all("a x\r\n`- b\r\n")

        assert events[0].attribute == " x"
        assert events[1] == ScanEvent(3, "b", "", 2)

    def test_crlf_rejected_in_strict_mode(self) -> None:
        """Test that a bare CR in markup is invalid when CRLF is not accepted."""
        with pytest.raises(InvalidCharacterError) as exc_info:
            scan_all("a\r\n\r\n", ScannerConfig(accept_crlf=False))

        assert exc_info.value.line == 2
        assert exc_info.value.column == 0

    def test_unterminated_last_line(self) -> None:
        """Test that a node on the last line without newline is emitted."""
        events = scan_all("a\n`- b attr")

        assert events[-1] == ScanEvent(3, "b", " attr", 2)

    def test_empty_input(self) -> None:
        """Test that empty input produces no events."""
        scanner = ListingScanner()

        assert list(scanner.scan("")) == []
        assert scanner.lines_processed == 0

    def test_unicode_glyphs_with_configuration(self) -> None:
        """Test box-drawing markup with a matching configuration."""
        config = ScannerConfig(
            blank_glyphs=(" ", "│"),
            branch_glyphs=("├─", "└─"),
        )
        events = scan_all("a\n├─ b\n│  └─ c\n└─ d\n", config)

        assert [(e.column, e.name) for e in events] == [
            (0, "a"), (3, "b"), (6, "c"), (3, "d"),
        ]


class TestScannerErrors:
    """Test fatal scanning conditions."""

    def test_control_character_reports_line_and_column(self) -> None:
        """Test that an invalid character cites its line and column."""
        listing = "a\n|- b\n|  \x07- c\n"

        with pytest.raises(InvalidCharacterError) as exc_info:
            scan_all(listing)

        assert exc_info.value.line == 3
        assert exc_info.value.column == 3
        assert exc_info.value.character == "\x07"

    def test_events_before_error_are_yielded(self) -> None:
        """Test that scanning stops exactly at the failure point."""
        scanner = ListingScanner()
        events = []

        with pytest.raises(InvalidCharacterError):
            for event in scanner.scan("a\n|- b\n$ c\n"):
                events.append(event)

        assert [e.name for e in events] == ["a", "b"]
        assert scanner.characters_consumed == len("a\n|- b\n")

    def test_unicode_glyphs_invalid_by_default(self) -> None:
        """Test that box-drawing glyphs need the unicode configuration."""
        with pytest.raises(InvalidCharacterError) as exc_info:
            scan_all("a\n├─ b\n")

        assert exc_info.value.line == 2
        assert exc_info.value.column == 0

    def test_scanner_state_resets_between_scans(self) -> None:
        """Test that line counting restarts for every scan."""
        scanner = ListingScanner()
        list(scanner.scan("a\n|- b\n"))
        events = list(scanner.scan("x\n"))

        assert events == [ScanEvent(0, "x", "", 1)]
        assert scanner.events_emitted == 1
        assert scanner.lines_processed == 1


class TestScannerLogging:
    """Test per-node debug records."""

    def test_node_tokens_traced_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that each node token is logged when debug logging is on."""
        with caplog.at_level(logging.DEBUG, logger="robust_tree_reader.scanning.scanner"):
            scan_all("a\n`- b\n")

        traced = [r for r in caplog.records if r.getMessage() == "Node token"]
        assert [(r.line, r.column, r.node) for r in traced] == [(1, 0, "a"), (2, 3, "b")]
        assert all(r.component == "listing_scanner" for r in traced)

    def test_node_tokens_not_traced_above_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that no per-node records are built at info level."""
        with caplog.at_level(logging.INFO, logger="robust_tree_reader.scanning.scanner"):
            scan_all("a\n`- b\n")

        assert not [r for r in caplog.records if r.getMessage() == "Node token"]

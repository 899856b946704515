"""Single-pass listing scanner.

The scanner walks a listing once, character by character, and turns every line
that carries a node token into a :class:`ScanEvent` holding the column the token
starts at. Markup glyphs only advance the column; their shape never matters, so
listings from producers that draw branches differently scan the same way as long
as the columns agree.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Tuple

from robust_tree_reader.shared import (
    InvalidCharacterError,
    ScannerConfig,
    get_logger,
)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class CharacterClass(Enum):
    """Classes the scanner sorts the character at the cursor into."""

    NEWLINE = auto()    # Line terminator: column back to 0
    BLANK = auto()      # Space, tab or generic glyph: one column
    BRANCH = auto()     # Multi-column branch glyph, consumed atomically
    NODE = auto()       # Identifier or null token: rest of line is the attribute
    END = auto()        # End of input
    INVALID = auto()    # Anything else


@dataclass(frozen=True)
class ScanEvent:
    """A recognised node token.

    Attributes:
        column: Zero-based column of the first character of ``name``
        name: Identifier or null token
        attribute: Verbatim remainder of the line after ``name``
        line: 1-based line number the token was found on
    """

    column: int
    name: str
    attribute: str
    line: int


class ListingScanner:
    """Scanner turning listing text into node events.

    The cursor state (line, column) is held on the instance and reset at the start
    of every :meth:`scan`, so one scanner can be reused but not shared between
    concurrent scans.
    """

    def __init__(
        self,
        config: Optional[ScannerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ScannerConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "listing_scanner")

        # Longest glyph first so that a branch is never split into blanks
        self._branch_glyphs = tuple(
            sorted(self.config.branch_glyphs, key=len, reverse=True)
        )
        self._blank_glyphs = frozenset(self.config.blank_glyphs)
        self._reset_state()

    def _reset_state(self) -> None:
        self.line = 1
        self.column = 0
        self.events_emitted = 0
        self.lines_processed = 0
        self.characters_consumed = 0

    def classify(self, text: str, index: int) -> Tuple[CharacterClass, int]:
        """Classify the input at ``index``.

        Returns:
            The character class and the number of characters the match spans
            (for NODE, the length of the token only).
        """
        if index >= len(text):
            return CharacterClass.END, 0

        char = text[index]
        if char == "\n":
            return CharacterClass.NEWLINE, 1
        if char == "\r" and self.config.accept_crlf and text.startswith("\n", index + 1):
            return CharacterClass.NEWLINE, 2

        for glyph in self._branch_glyphs:
            if text.startswith(glyph, index):
                return CharacterClass.BRANCH, len(glyph)

        if text.startswith(self.config.null_token, index):
            return CharacterClass.NODE, len(self.config.null_token)
        match = _IDENTIFIER.match(text, index)
        if match:
            return CharacterClass.NODE, match.end() - index

        if char in self._blank_glyphs:
            return CharacterClass.BLANK, 1
        return CharacterClass.INVALID, 1

    def scan(self, text: str) -> Iterator[ScanEvent]:
        """Scan ``text`` and yield one event per node token, in input order.

        Raises:
            InvalidCharacterError: on a character no class accepts; nothing past
                that point is scanned
        """
        self._reset_state()
        self.logger.debug("Starting scan", extra={"char_count": len(text)})
        trace_nodes = self.logger.is_enabled_for(logging.DEBUG)

        index = 0
        while True:
            char_class, span = self.classify(text, index)

            if char_class is CharacterClass.END:
                break
            if char_class is CharacterClass.NEWLINE:
                self.line += 1
                self.column = 0
            elif char_class is CharacterClass.BLANK or char_class is CharacterClass.BRANCH:
                self.column += span
            elif char_class is CharacterClass.NODE:
                event, line_end = self._read_node(text, index, span)
                self.events_emitted += 1
                self.column += line_end - index
                index = line_end
                if trace_nodes:
                    self.logger.debug(
                        "Node token",
                        extra={"line": event.line, "column": event.column, "node": event.name}
                    )
                yield event
                continue
            else:
                self.characters_consumed = index
                raise InvalidCharacterError(self.line, self.column, text[index])

            index += span

        self.characters_consumed = len(text)
        self.lines_processed = self.line - 1 if text.endswith("\n") else self.line
        if not text:
            self.lines_processed = 0

        self.logger.debug(
            "Scan completed",
            extra={
                "events": self.events_emitted,
                "lines": self.lines_processed,
            }
        )

    def _read_node(self, text: str, index: int, span: int) -> Tuple[ScanEvent, int]:
        name_end = index + span
        line_end = text.find("\n", name_end)
        if line_end == -1:
            line_end = len(text)
        elif (
            self.config.accept_crlf
            and line_end > name_end
            and text[line_end - 1] == "\r"
        ):
            line_end -= 1

        event = ScanEvent(
            column=self.column,
            name=text[index:name_end],
            attribute=text[name_end:line_end],
            line=self.line,
        )
        return event, line_end

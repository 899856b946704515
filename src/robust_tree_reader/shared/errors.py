"""Error taxonomy for robust tree reading.

Every condition that aborts a read derives from :class:`TreeReaderError`. Markup
irregularities are never errors; only characters the scanner cannot classify and
lattice paths that break the Dyck property are.
"""

from typing import Dict, Optional


class TreeReaderError(Exception):
    """Base exception for all fatal tree reading conditions."""


class UsageError(TreeReaderError):
    """Raised when the process-level driver receives the wrong arguments."""


class SourceNotFoundError(TreeReaderError, FileNotFoundError):
    """Raised when a listing path does not exist or cannot be opened."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason
        message = f"File {path} does not exist."
        if reason:
            message = f"File {path} cannot be opened: {reason}"
        super().__init__(message)


class SourceTooLargeError(TreeReaderError):
    """Raised when a listing is larger than the configured input size limit."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"Listing is {size} bytes, larger than the configured limit of {limit} bytes"
        )


class InvalidCharacterError(TreeReaderError):
    """Raised when the scanner meets a character outside every recognised class.

    Attributes:
        line: 1-based line number of the offending character
        column: zero-based column of the offending character
        character: the offending character itself
    """

    def __init__(self, line: int, column: int, character: str) -> None:
        self.line = line
        self.column = column
        self.character = character
        super().__init__(
            f"Invalid character {character!r} at line {line}, column {column}"
        )

    @property
    def position(self) -> Dict[str, int]:
        """Position of the failure as a diagnostic-style dictionary."""
        return {"line": self.line, "column": self.column}


class MalformedPathError(TreeReaderError):
    """Raised when a lattice path violates the Dyck property.

    Attributes:
        reason: short description of the violation
        step: zero-based index of the offending step in head-first order, if known
    """

    def __init__(self, reason: str, step: Optional[int] = None) -> None:
        self.reason = reason
        self.step = step
        message = f"Malformed lattice path: {reason}"
        if step is not None:
            message += f" (step {step})"
        super().__init__(message)


class EmptyListingError(MalformedPathError):
    """Raised when a listing contains no node token, so there is no root."""

    def __init__(self) -> None:
        super().__init__("listing contains no node, there is no root to reconstruct")

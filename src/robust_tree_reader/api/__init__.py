"""Public API for robust tree reading."""

from .reader import ReadResult, TreeReader, parse, parse_file, parse_string

__all__ = [
    "ReadResult",
    "TreeReader",
    "parse",
    "parse_file",
    "parse_string",
]

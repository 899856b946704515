"""Character layer for robust tree reading.

Loads listings from strings, bytes, paths or file objects and decodes them into
text for the scanner.
"""

from .source import InputType, ListingSource, SourceText

__all__ = [
    "InputType",
    "ListingSource",
    "SourceText",
]

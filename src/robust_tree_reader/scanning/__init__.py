"""Scanning layer for robust tree reading.

Key Components:
    ListingScanner: Single-pass scanner turning listing text into node events
    ScanEvent: A recognised node token with its column and attribute text
    CharacterClass: Classes of input the scanner distinguishes
"""

from .scanner import CharacterClass, ListingScanner, ScanEvent

__all__ = [
    "CharacterClass",
    "ListingScanner",
    "ScanEvent",
]

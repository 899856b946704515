"""Robust Tree Reader.

Reads indentation-based tree listings, such as the node listing printed by a
compiler's AST dumper, into immutable trees. Only the column each node token
starts at decides the structure, so listings whose branch glyphs or attribute
text vary between producer versions still read into the same tree.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured reader - TreeReader class returning a ReadResult
"""

__version__ = "0.1.0"
__author__ = "Robust Tree Reader Team"

from .api import ReadResult, TreeReader, parse, parse_file, parse_string
from .lattice import LatticePath, Payload
from .shared.config import ReaderConfig, ScannerConfig, SourceConfig
from .shared.errors import (
    EmptyListingError,
    InvalidCharacterError,
    MalformedPathError,
    SourceNotFoundError,
    SourceTooLargeError,
    TreeReaderError,
    UsageError,
)
from .tree import EMPTY_TREE, Node, render_listing

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: Configured reader
    "TreeReader",
    "ReadResult",

    # Data structures
    "EMPTY_TREE",
    "LatticePath",
    "Node",
    "Payload",
    "render_listing",

    # Configuration
    "ReaderConfig",
    "ScannerConfig",
    "SourceConfig",

    # Errors
    "EmptyListingError",
    "InvalidCharacterError",
    "MalformedPathError",
    "SourceNotFoundError",
    "SourceTooLargeError",
    "TreeReaderError",
    "UsageError",
]

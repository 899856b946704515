"""Shared utilities for robust tree reading.

This module provides the configuration objects, error taxonomy, diagnostic and
metric types, and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ReaderConfig,
    ScannerConfig,
    SourceConfig,
)
from .errors import (
    EmptyListingError,
    InvalidCharacterError,
    MalformedPathError,
    SourceNotFoundError,
    SourceTooLargeError,
    TreeReaderError,
    UsageError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ReaderConfig",
    "ScannerConfig",
    "SourceConfig",
    "EmptyListingError",
    "InvalidCharacterError",
    "MalformedPathError",
    "SourceNotFoundError",
    "SourceTooLargeError",
    "TreeReaderError",
    "UsageError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]

"""Diagnostic and metric types for robust tree reading.

This module defines the diagnostic entries and performance metrics that a read
attaches to its result.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Tolerated irregularities in the listing
    ERROR = auto()      # Conditions that aborted the read


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to a JSON-friendly dictionary."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "position": self.position,
            "details": self.details,
        }


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single read."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    characters_processed: int = 0
    lines_processed: int = 0
    nodes_recognized: int = 0
    path_steps: int = 0
    realignments: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def nodes_per_second(self) -> float:
        """Calculate nodes recognised per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.nodes_recognized * 1000.0) / self.processing_time_ms

    @property
    def memory_per_node(self) -> float:
        """Calculate memory usage per recognised node."""
        if self.nodes_recognized == 0:
            return 0.0
        return self.memory_used_bytes / self.nodes_recognized

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics, including derived rates, to a dictionary."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "memory_used_bytes": self.memory_used_bytes,
            "characters_processed": self.characters_processed,
            "lines_processed": self.lines_processed,
            "nodes_recognized": self.nodes_recognized,
            "path_steps": self.path_steps,
            "realignments": self.realignments,
            "characters_per_second": self.characters_per_second,
            "nodes_per_second": self.nodes_per_second,
        }

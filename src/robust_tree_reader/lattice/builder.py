"""Path builder: scan events to a lattice path.

Every node first climbs out of the levels the column delta says it has left
(falls), then descends one level into itself (a rise). Steps are prepended, so
the finished path is in reversed preorder.
"""

from typing import List, Optional

from robust_tree_reader.scanning import ScanEvent
from robust_tree_reader.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    EmptyListingError,
    get_logger,
)

from .path import EMPTY_PATH, LatticePath, Payload, Rise, pad_falls
from .thread import AncestorColumnStack


class PathBuilder:
    """Accumulates scan events into a reversed-preorder lattice path."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "path_builder")
        self.diagnostics: List[DiagnosticEntry] = []

        self._path: LatticePath = EMPTY_PATH
        self._thread = AncestorColumnStack()
        self._closed = False
        self.node_count = 0
        self.step_count = 0

    @property
    def depth(self) -> int:
        """Number of nodes currently open (the thread's height)."""
        return len(self._thread)

    @property
    def realignments(self) -> int:
        return self._thread.realignments

    @property
    def path(self) -> LatticePath:
        """Path built so far."""
        return self._path

    def add(self, event: ScanEvent) -> None:
        """Extend the path with the node described by ``event``."""
        if self._closed:
            raise RuntimeError("Cannot add events to a closed path builder")

        realigned_before = self._thread.realignments
        delta = self._thread.place(event.column)

        self._path = Rise(
            Payload(event.name, event.attribute),
            pad_falls(self._path, delta + 1),
        )
        self.node_count += 1
        self.step_count += delta + 2

        if self._thread.realignments != realigned_before:
            self._record_realignment(event)

    def close(self) -> LatticePath:
        """Close every node still open and return the finished path.

        Raises:
            EmptyListingError: if no event was ever added
        """
        if self._closed:
            raise RuntimeError("Path builder is already closed")
        self._closed = True

        if self.node_count == 0:
            raise EmptyListingError()

        open_nodes = len(self._thread)
        self._path = pad_falls(self._path, open_nodes)
        self.step_count += open_nodes

        self.logger.debug(
            "Lattice path closed",
            extra={
                "node_count": self.node_count,
                "step_count": self.step_count,
                "closing_falls": open_nodes,
            }
        )
        return self._path

    def _record_realignment(self, event: ScanEvent) -> None:
        self.diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=(
                f"Node {event.name!r} at column {event.column} does not line up "
                "with any ancestor; treated as a child of the nearest shallower one"
            ),
            component="path_builder",
            position={"line": event.line, "column": event.column},
            correlation_id=self.correlation_id,
        ))
        self.logger.debug(
            "Column realigned",
            extra={"line": event.line, "column": event.column}
        )

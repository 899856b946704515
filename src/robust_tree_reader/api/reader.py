"""Reader API with progressive disclosure.

Level 1 functions (:func:`parse`, :func:`parse_string`, :func:`parse_file`)
return the reconstructed root node. Level 2, :class:`TreeReader`, returns a
:class:`ReadResult` with the lattice path, diagnostics and metrics as well.

A read is one sequential pipeline: the source is loaded, the scanner feeds the
path builder one event per node, and the finished path is reconstructed once.
Every fatal condition propagates as a :class:`TreeReaderError` subclass; there
are no partial results.
"""

import contextlib
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ContextManager, Dict, List, Optional, Union

from robust_tree_reader.character import InputType, ListingSource
from robust_tree_reader.lattice import LatticePath, PathBuilder
from robust_tree_reader.scanning import ListingScanner
from robust_tree_reader.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    ReaderConfig,
    TreeReaderError,
    get_logger,
)
from robust_tree_reader.tools.profiling import PerformanceProfiler, ProfilingSession
from robust_tree_reader.tree import Node, TreeReconstructor

MS_PER_SECOND = 1000


@dataclass
class ReadResult:
    """Outcome of a successful read."""

    tree: Node
    path: LatticePath
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None
    origin: Optional[str] = None
    profile: Optional[ProfilingSession] = None

    @property
    def node_count(self) -> int:
        return self.performance.nodes_recognized

    @property
    def has_warnings(self) -> bool:
        return any(
            diag.severity == DiagnosticSeverity.WARNING for diag in self.diagnostics
        )

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics filtered by severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Summary of the read suitable for JSON output."""
        return {
            "origin": self.origin,
            "root": self.tree.name,
            "node_count": self.node_count,
            "height": self.tree.height,
            "path_steps": self.performance.path_steps,
            "performance": self.performance.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "correlation_id": self.correlation_id,
        }


class TreeReader:
    """Configured reader for indentation listings.

    Examples:
        >>> reader = TreeReader(ReaderConfig.unicode())
        >>> result = reader.read(Path("ast.txt"))
        >>> result.tree.name
        'TranslationUnitDecl'
    """

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ReaderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_reader")
        self.profiler: Optional[PerformanceProfiler] = None
        if self.config.global_.enable_profiling:
            self.profiler = PerformanceProfiler()

        self._reads = 0
        self._failures = 0
        self._nodes = 0

    def read(self, input_data: InputType) -> ReadResult:
        """Read one listing and reconstruct its tree.

        Args:
            input_data: Listing text, bytes, a Path, or an open file object

        Raises:
            SourceNotFoundError: if a path input does not exist
            InvalidCharacterError: if the scanner meets an unclassifiable character
            MalformedPathError: if the listing does not describe a single tree
                (including EmptyListingError for a listing with no node)
        """
        start_time = time.time()
        self.logger.info(
            "Starting tree read",
            extra={"input_type": type(input_data).__name__}
        )

        scanner = ListingScanner(self.config.scanner, self.correlation_id)
        builder = PathBuilder(self.correlation_id)
        reconstructor = TreeReconstructor(self.correlation_id)
        session = None
        if self.profiler is not None:
            session = self.profiler.start_session(f"read-{self._reads + 1}")

        try:
            with ListingSource(input_data, self.config.source, self.correlation_id) as source:
                with self._layer(session, "loading"):
                    source_text = source.read()
                if session is not None:
                    session.input_size = len(source_text.text)

                with self._layer(session, "scanning") as layer:
                    for event in scanner.scan(source_text.text):
                        builder.add(event)
                    path = builder.close()
                    if layer is not None:
                        layer.operations_count = builder.node_count

            with self._layer(session, "reconstruction") as layer:
                tree = reconstructor.build(path)
                if layer is not None:
                    layer.operations_count = builder.step_count
        except TreeReaderError as e:
            self._failures += 1
            self.logger.error(
                "Tree read failed",
                extra={"error": str(e), "error_type": type(e).__name__},
                exc_info=False
            )
            raise
        finally:
            if session is not None and self.profiler is not None:
                self.profiler.end_session(session)

        performance = PerformanceMetrics(
            processing_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            memory_used_bytes=max(session.memory_delta, 0) if session else 0,
            characters_processed=scanner.characters_consumed,
            lines_processed=scanner.lines_processed,
            nodes_recognized=builder.node_count,
            path_steps=builder.step_count,
            realignments=builder.realignments,
        )

        diagnostics: List[DiagnosticEntry] = []
        if self.config.global_.enable_diagnostics:
            diagnostics.extend(source_text.diagnostics)
            diagnostics.extend(builder.diagnostics)

        self._reads += 1
        self._nodes += builder.node_count
        self.logger.info(
            "Tree read completed",
            extra={
                "node_count": builder.node_count,
                "path_steps": builder.step_count,
                "realignments": builder.realignments,
                "processing_time_ms": performance.processing_time_ms,
            }
        )

        return ReadResult(
            tree=tree,
            path=path,
            performance=performance,
            diagnostics=diagnostics,
            correlation_id=self.correlation_id,
            origin=source_text.origin,
            profile=session,
        )

    def _layer(self, session: Optional[ProfilingSession], name: str) -> ContextManager[Any]:
        if session is None or self.profiler is None:
            return contextlib.nullcontext()
        return self.profiler.profile_layer(session, name)

    def reconfigure(self, config: ReaderConfig) -> None:
        """Replace the configuration used for subsequent reads."""
        self.config = config
        if config.global_.enable_profiling and self.profiler is None:
            self.profiler = PerformanceProfiler()
        elif not config.global_.enable_profiling:
            self.profiler = None

    @property
    def statistics(self) -> Dict[str, Any]:
        """Counts accumulated across reads."""
        return {
            "reads": self._reads,
            "failures": self._failures,
            "nodes": self._nodes,
            "average_nodes_per_read": self._nodes / self._reads if self._reads else 0.0,
        }

    def reset_statistics(self) -> None:
        """Reset accumulated counts."""
        self._reads = 0
        self._failures = 0
        self._nodes = 0


def parse(
    input_data: InputType,
    config: Optional[ReaderConfig] = None,
    correlation_id: Optional[str] = None
) -> Node:
    """Read a listing from any supported input and return its root node.

    A ``str`` is taken as listing text; pass a :class:`~pathlib.Path` to read a
    file.

    Examples:
        >>> root = parse("a\\n|- b\\n`- c\\n")
        >>> [child.name for child in root.children]
        ['b', 'c']
    """
    return TreeReader(config, correlation_id).read(input_data).tree


def parse_string(
    text: str,
    config: Optional[ReaderConfig] = None,
    correlation_id: Optional[str] = None
) -> Node:
    """Read listing text and return its root node."""
    if not isinstance(text, str):
        raise TypeError(f"parse_string expects str, got {type(text).__name__}")
    return parse(text, config, correlation_id)


def parse_file(
    path: Union[str, Path],
    config: Optional[ReaderConfig] = None,
    correlation_id: Optional[str] = None
) -> Node:
    """Read the listing stored at ``path`` and return its root node."""
    return parse(Path(path), config, correlation_id)

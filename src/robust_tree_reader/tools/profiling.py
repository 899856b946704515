"""Layer profiling for tree reads.

Times each processing layer of a read (loading, scanning and path building,
reconstruction) and tracks the process's resident memory around it.
"""

import os
import time
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Dict, List, Optional, Type

import psutil

from robust_tree_reader.shared.logging import get_logger


@dataclass
class LayerPerformance:
    """Performance metrics for a specific processing layer."""

    layer_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def ops_per_second(self) -> float:
        """Operations per second rate."""
        duration_s = self.end_time - self.start_time
        return self.operations_count / duration_s if duration_s > 0 else 0.0


@dataclass
class ProfilingSession:
    """Container for one profiled read."""

    session_id: str
    start_time: float
    end_time: float
    input_size: int  # characters
    layers: List[LayerPerformance] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Net memory change over all layers, in bytes."""
        return sum(layer.memory_delta for layer in self.layers)

    def layer(self, name: str) -> Optional[LayerPerformance]:
        """Look up a layer by name."""
        for layer in self.layers:
            if layer.layer_name == name:
                return layer
        return None

    def format_report(self) -> str:
        """Human-readable per-layer breakdown."""
        lines = [f"Session {self.session_id}: {self.total_duration_ms:.2f}ms"]
        for layer in self.layers:
            lines.append(
                f"  {layer.layer_name:<16} {layer.duration_ms:9.2f}ms "
                f"{layer.memory_delta / 1024:+10.1f}KiB "
                f"{layer.operations_count:>8} ops"
            )
        return "\n".join(lines)


class PerformanceProfiler:
    """Profiler collecting :class:`ProfilingSession` objects.

    Examples:
        >>> profiler = PerformanceProfiler()
        >>> session = profiler.start_session("read-1", input_size=len(text))
        >>> with profiler.profile_layer(session, "scanning") as layer:
        ...     layer.operations_count = count_nodes(text)
        >>> profiler.end_session(session)
    """

    def __init__(self, enable_memory_tracking: bool = True) -> None:
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.current_session: Optional[ProfilingSession] = None
        self.logger = get_logger(__name__, None, "performance_profiler")
        self._process = psutil.Process(os.getpid()) if enable_memory_tracking else None

    def memory_usage(self) -> int:
        """Resident set size of this process in bytes, 0 when not tracking."""
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def start_session(self, session_id: str, input_size: int = 0) -> ProfilingSession:
        """Start a new profiling session."""
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            input_size=input_size
        )
        self.current_session = session
        self.logger.debug(
            "Started profiling session",
            extra={"session_id": session_id, "input_size": input_size}
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.time()
        self.sessions.append(session)
        if self.current_session is session:
            self.current_session = None

        self.logger.debug(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "layer_count": len(session.layers)
            }
        )

    def profile_layer(self, session: ProfilingSession, layer_name: str) -> "LayerProfiler":
        """Context manager that records one layer into ``session``."""
        return LayerProfiler(self, session, layer_name)


class LayerProfiler:
    """Context manager recording timing and memory for a single layer."""

    def __init__(
        self,
        profiler: PerformanceProfiler,
        session: ProfilingSession,
        layer_name: str
    ) -> None:
        self.profiler = profiler
        self.session = session
        self.layer = LayerPerformance(
            layer_name=layer_name,
            start_time=0.0,
            end_time=0.0,
            memory_start=0,
            memory_end=0,
        )

    def __enter__(self) -> LayerPerformance:
        self.layer.memory_start = self.profiler.memory_usage()
        self.layer.start_time = time.time()
        return self.layer

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.layer.end_time = time.time()
        self.layer.memory_end = self.profiler.memory_usage()
        self.session.layers.append(self.layer)

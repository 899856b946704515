"""Developer tools for robust tree reading."""

from .profiling import (
    LayerPerformance,
    LayerProfiler,
    PerformanceProfiler,
    ProfilingSession,
)

__all__ = [
    "LayerPerformance",
    "LayerProfiler",
    "PerformanceProfiler",
    "ProfilingSession",
]

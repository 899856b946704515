"""Lattice path layer for robust tree reading.

Key Components:
    PathBuilder: Turns scan events into a reversed-preorder lattice path
    AncestorColumnStack / compute_delta: Column-to-depth-delta computation
    LatticePath, Rise, Fall, EMPTY_PATH: Persistent path steps
    Payload: Name and attribute text carried by a rise
"""

from .builder import PathBuilder
from .path import (
    EMPTY_PATH,
    EmptyPath,
    Fall,
    LatticePath,
    Payload,
    Rise,
    pad_falls,
    path_from_forward,
)
from .thread import AncestorColumnStack, compute_delta

__all__ = [
    "AncestorColumnStack",
    "EMPTY_PATH",
    "EmptyPath",
    "Fall",
    "LatticePath",
    "PathBuilder",
    "Payload",
    "Rise",
    "compute_delta",
    "pad_falls",
    "path_from_forward",
]

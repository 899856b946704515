"""Tree layer for robust tree reading.

Key Components:
    Node: Immutable tree node with payload and ordered children
    EMPTY_TREE: Sentinel for "no tree" used during reconstruction
    reconstruct / TreeReconstructor: Single-pass rebuild from a lattice path
    render_listing: Draws a tree back as an indentation listing
"""

from .model import EMPTY_TREE, EmptyTree, Node, Tree
from .reconstructor import (
    TreeReconstructor,
    reconstruct,
    split_forest,
    split_tree,
)
from .render import CLANG_STYLE, UNICODE_STYLE, RenderStyle, render_listing

__all__ = [
    "CLANG_STYLE",
    "EMPTY_TREE",
    "EmptyTree",
    "Node",
    "RenderStyle",
    "Tree",
    "TreeReconstructor",
    "UNICODE_STYLE",
    "reconstruct",
    "render_listing",
    "split_forest",
    "split_tree",
]

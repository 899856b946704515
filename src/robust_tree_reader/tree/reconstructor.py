"""Tree reconstruction from a reversed-preorder lattice path.

Read head first, a finished path starts with the fall that closes the root and
ends with the root's rise. Splitting a tree off the head therefore means: a fall
opens a node whose children follow, and the matching rise, found once every
child has been split off, names it. Children come off last-first and are
reversed when their parent closes.

The decomposition runs as an explicit stack machine over the steps, so each
step is visited exactly once and the depth of the tree never touches the
interpreter's recursion limit.
"""

from typing import List, Optional, Tuple

from robust_tree_reader.lattice import EmptyPath, Fall, LatticePath, Rise
from robust_tree_reader.shared import MalformedPathError, get_logger

from .model import EMPTY_TREE, Node, Tree


def split_tree(path: LatticePath) -> Tuple[Tree, LatticePath]:
    """Split the first tree off the head of ``path``.

    Returns:
        ``(tree, remainder)``; ``(EMPTY_TREE, path)`` when ``path`` does not
        start with a fall

    Raises:
        MalformedPathError: if the path ends before the opening fall is matched
    """
    if not isinstance(path, Fall):
        return EMPTY_TREE, path

    frames: List[List[Node]] = []
    step: LatticePath = path
    index = 0
    while not isinstance(step, EmptyPath):
        if isinstance(step, Fall):
            frames.append([])
        elif isinstance(step, Rise):
            children = frames.pop()
            children.reverse()
            node = Node(step.payload, tuple(children))
            if not frames:
                return node, step.rest
            frames[-1].append(node)
        else:
            raise MalformedPathError(f"unknown step type {type(step).__name__}", index)
        step = step.rest  # type: ignore[attr-defined]
        index += 1

    raise MalformedPathError(
        f"path ended with {len(frames)} fall(s) still unmatched by a rise", index
    )


def split_forest(path: LatticePath) -> Tuple[List[Node], LatticePath]:
    """Split consecutive trees off the head of ``path``.

    Returns:
        The trees in forward order and the remainder after the last one
    """
    forest: List[Node] = []
    remainder = path
    while True:
        tree, remainder = split_tree(remainder)
        if tree.is_empty:
            break
        forest.append(tree)  # type: ignore[arg-type]
    forest.reverse()
    return forest, remainder


def reconstruct(path: LatticePath) -> Node:
    """Reconstruct the single tree a finished path describes.

    Raises:
        MalformedPathError: if the path is empty, does not start with a fall,
            leaves a fall unmatched, or holds more than one top-level tree
    """
    tree, remainder = split_tree(path)
    if tree.is_empty:
        if path.is_empty:
            raise MalformedPathError("path is empty, there is no tree to reconstruct")
        raise MalformedPathError("path starts with a rise that no fall opened", 0)
    if not remainder.is_empty:
        raise MalformedPathError(
            f"{len(remainder)} step(s) left after the top-level tree"
        )
    return tree  # type: ignore[return-value]


class TreeReconstructor:
    """Reconstructs trees from finished paths and keeps simple statistics."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_reconstructor")
        self.trees_built = 0

    def build(self, path: LatticePath) -> Node:
        """Reconstruct the tree for ``path``, logging the outcome."""
        try:
            tree = reconstruct(path)
        except MalformedPathError:
            self.logger.exception("Lattice path violates the Dyck property")
            raise

        self.trees_built += 1
        self.logger.debug(
            "Tree reconstructed",
            extra={"root": tree.name, "children": len(tree.children)}
        )
        return tree

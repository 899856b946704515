"""Tree model for robust tree reading.

A reconstructed tree is made of immutable :class:`Node` values, one per node
token of the listing, with children in the order they appear. :data:`EMPTY_TREE`
marks "no further sibling" inside the reconstructor and is never a child of a
returned node.

Traversals here are iterative so that very deep, narrow trees (long chains of
single children are common in expression dumps) do not hit the recursion limit.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from robust_tree_reader.lattice import Payload
from robust_tree_reader.shared.config import DEFAULT_NULL_TOKEN


class Tree:
    """Base of the tree variant."""

    @property
    def is_empty(self) -> bool:
        return isinstance(self, EmptyTree)


class EmptyTree(Tree):
    """Sentinel for the absence of a tree."""

    _instance = None

    def __new__(cls) -> "EmptyTree":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EMPTY_TREE"

    def __reduce__(self) -> Any:
        return (EmptyTree, ())


EMPTY_TREE = EmptyTree()


@dataclass(frozen=True, eq=False)
class Node(Tree):
    """A node with its payload and ordered children."""

    payload: Payload
    children: Tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        """Validate children and normalise them to a tuple."""
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Node):
                raise TypeError("Children must be Node instances")
        object.__setattr__(self, "children", children)

    @classmethod
    def of(cls, name: str, *children: "Node", attribute: str = "") -> "Node":
        """Shorthand constructor: ``Node.of("a", Node.of("b"))``."""
        return cls(Payload(name, attribute), children)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if left.payload != right.payload or len(left.children) != len(right.children):
                return False
            pending.extend(zip(left.children, right.children))
        return True

    def __hash__(self) -> int:
        return hash(tuple((node.payload, len(node.children)) for node in self.iter_nodes()))

    def __repr__(self) -> str:
        return f"Node({self.name!r}, children={len(self.children)})"

    @property
    def name(self) -> str:
        return self.payload.name

    @property
    def attribute(self) -> str:
        return self.payload.attribute

    def is_null(self, null_token: str = DEFAULT_NULL_TOKEN) -> bool:
        """Check whether this node stands for an absent child."""
        return self.payload.name == null_token

    def iter_nodes(self) -> Iterator["Node"]:
        """Yield this node and all descendants in preorder."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def size(self) -> int:
        """Number of nodes in this subtree."""
        return sum(1 for _ in self.iter_nodes())

    @property
    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest

    def find(self, name: str) -> Optional["Node"]:
        """Find the first node named ``name`` in preorder, including this one."""
        for node in self.iter_nodes():
            if node.name == name:
                return node
        return None

    def find_all(self, name: str) -> List["Node"]:
        """Find every node named ``name`` in preorder."""
        return [node for node in self.iter_nodes() if node.name == name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to nested dictionaries."""
        root: Dict[str, Any] = {}
        stack = [(self, root)]
        while stack:
            node, target = stack.pop()
            target["name"] = node.name
            target["attribute"] = node.attribute
            target["children"] = [{} for _ in node.children]
            stack.extend(zip(node.children, target["children"]))
        return root

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """Rebuild a subtree from :meth:`to_dict` output."""
        # Postorder over the dictionaries so children exist before parents
        order: List[Dict[str, Any]] = []
        stack = [data]
        while stack:
            item = stack.pop()
            order.append(item)
            stack.extend(item.get("children", []))

        built: Dict[int, Node] = {}
        for item in reversed(order):
            children = tuple(built.pop(id(child)) for child in item.get("children", []))
            built[id(item)] = cls(Payload(item["name"], item.get("attribute", "")), children)
        return built[id(data)]

"""Ancestor column stack and depth deltas.

The stack ("thread") records the columns of the nodes on the way from the root
to the most recently emitted node. Comparing a new node's column with it yields
how many levels to climb before the node can be entered:

* ``-1``: the node is one level deeper than the previous one (a push)
* ``0``: the node is a sibling of the previous one
* ``k > 0``: ``k`` ancestors are left first (``k`` pops, possibly followed by a
  push when the column falls between two recorded ancestors)
"""

from typing import Iterable, List, Sequence, Tuple


class AncestorColumnStack:
    """Mutable ancestor column stack used while a listing is scanned."""

    def __init__(self, columns: Iterable[int] = ()) -> None:
        """Create a stack from ``columns``, given nearest ancestor first."""
        # Top of the stack is the end of the list
        self._columns: List[int] = list(columns)[::-1]
        self.realignments = 0

    def __len__(self) -> int:
        return len(self._columns)

    @property
    def columns(self) -> Tuple[int, ...]:
        """Recorded columns, nearest ancestor first."""
        return tuple(reversed(self._columns))

    @property
    def top(self) -> int:
        if not self._columns:
            raise IndexError("ancestor column stack is empty")
        return self._columns[-1]

    def place(self, column: int) -> int:
        """Place a node at ``column`` and return the depth delta.

        Ascending pops every ancestor deeper than ``column``. If that ends on an
        ancestor at exactly ``column`` the node is its sibling; otherwise the
        column is pushed and the node becomes a child one level below the
        remaining top.
        """
        pops = 0
        while self._columns and self._columns[-1] > column:
            self._columns.pop()
            pops += 1

        if self._columns and self._columns[-1] == column:
            return pops

        self._columns.append(column)
        if pops:
            self.realignments += 1
        return pops - 1


def compute_delta(column: int, stack: Sequence[int]) -> Tuple[int, Tuple[int, ...]]:
    """Compute the depth delta of a node at ``column``.

    Args:
        column: Column of the new node
        stack: Ancestor columns, nearest ancestor first

    Returns:
        ``(delta, stack')`` with ``stack'`` also nearest ancestor first
    """
    thread = AncestorColumnStack(stack)
    delta = thread.place(column)
    return delta, thread.columns

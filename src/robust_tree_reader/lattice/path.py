"""Persistent lattice paths.

A lattice path is a singly linked sequence of steps, each a rise (carrying the
payload of one node) or a fall. Paths are immutable and are only ever extended
by prepending, so a path built while scanning holds its steps in reversed
preorder: the head is the step discovered last.

Read forward (tail to head), a path describing a tree is a Dyck path: it never
drops below its starting level and ends on it.
"""

from dataclasses import dataclass
from typing import Any, Iterator, List


@dataclass(frozen=True)
class Payload:
    """Name and verbatim attribute text of one node."""

    name: str
    attribute: str = ""


class LatticePath:
    """Base of the path variant; iterate it to walk steps head first."""

    def __iter__(self) -> Iterator["LatticePath"]:
        step = self
        while not isinstance(step, EmptyPath):
            yield step
            step = step.rest  # type: ignore[attr-defined]

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, LatticePath):
            return NotImplemented
        left, right = self, other
        while True:
            if left is right:
                return True
            if type(left) is not type(right):
                return False
            if isinstance(left, EmptyPath):
                return True
            if isinstance(left, Rise) and left.payload != right.payload:  # type: ignore[attr-defined]
                return False
            left, right = left.rest, right.rest  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(tuple(_step_key(step) for step in self))

    def __repr__(self) -> str:
        steps = ", ".join(_step_repr(step) for step in self)
        return f"LatticePath([{steps}])"

    @property
    def is_empty(self) -> bool:
        return isinstance(self, EmptyPath)

    @property
    def rise_count(self) -> int:
        return sum(1 for step in self if isinstance(step, Rise))

    @property
    def fall_count(self) -> int:
        return sum(1 for step in self if isinstance(step, Fall))

    def forward_steps(self) -> List["LatticePath"]:
        """Steps in discovery order (tail first)."""
        steps = list(self)
        steps.reverse()
        return steps

    def is_dyck(self) -> bool:
        """Check the Dyck property on the forward reading of the path."""
        level = 0
        for step in self.forward_steps():
            level += 1 if isinstance(step, Rise) else -1
            if level < 0:
                return False
        return level == 0


class EmptyPath(LatticePath):
    """The empty path; also terminates every non-empty path."""

    _instance = None

    def __new__(cls) -> "EmptyPath":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __reduce__(self) -> Any:
        return (EmptyPath, ())


EMPTY_PATH = EmptyPath()


@dataclass(frozen=True, eq=False, repr=False)
class Rise(LatticePath):
    """Up step carrying the payload of the node it enters."""

    payload: Payload
    rest: LatticePath = EMPTY_PATH


@dataclass(frozen=True, eq=False, repr=False)
class Fall(LatticePath):
    """Down step leaving a node."""

    rest: LatticePath = EMPTY_PATH


def pad_falls(path: LatticePath, count: int) -> LatticePath:
    """Prepend ``count`` falls onto ``path``."""
    if count < 0:
        raise ValueError(f"Cannot prepend a negative number of falls: {count}")
    for _ in range(count):
        path = Fall(path)
    return path


def path_from_forward(steps: List[Any]) -> LatticePath:
    """Build a path from a forward description.

    Each item is either a :class:`Payload` (a rise) or ``None`` (a fall), listed
    in discovery order.
    """
    path: LatticePath = EMPTY_PATH
    for item in steps:
        path = Fall(path) if item is None else Rise(item, path)
    return path


def _step_key(step: LatticePath) -> Any:
    if isinstance(step, Rise):
        return ("rise", step.payload)
    return ("fall",)


def _step_repr(step: LatticePath) -> str:
    if isinstance(step, Rise):
        return f"Rise({step.payload.name!r})"
    return "Fall"

"""Rendering trees back into indentation listings."""

from dataclasses import dataclass
from typing import List

from .model import Node


@dataclass(frozen=True)
class RenderStyle:
    """Markup used when drawing a listing.

    All four pieces must be equally wide so every child starts at the same
    column as its siblings.
    """

    branch: str = "|- "
    last_branch: str = "`- "
    pipe: str = "|  "
    gap: str = "   "

    def __post_init__(self) -> None:
        """Validate that the markup pieces line up."""
        widths = {len(self.branch), len(self.last_branch), len(self.pipe), len(self.gap)}
        if len(widths) != 1:
            raise ValueError("branch, last_branch, pipe and gap must be equally wide")
        if not self.branch:
            raise ValueError("markup pieces cannot be empty")


CLANG_STYLE = RenderStyle(branch="|-", last_branch="`-", pipe="| ", gap="  ")
UNICODE_STYLE = RenderStyle(branch="├─ ", last_branch="└─ ", pipe="│  ", gap="   ")


def render_listing(tree: Node, style: RenderStyle = RenderStyle()) -> str:
    """Draw ``tree`` as a listing, one node per line, newline terminated."""
    lines: List[str] = [tree.name + tree.attribute]
    stack = [
        (child, "", index == len(tree.children) - 1)
        for index, child in enumerate(tree.children)
    ]
    stack.reverse()

    while stack:
        node, prefix, is_last = stack.pop()
        glyph = style.last_branch if is_last else style.branch
        lines.append(prefix + glyph + node.name + node.attribute)

        child_prefix = prefix + (style.gap if is_last else style.pipe)
        last_index = len(node.children) - 1
        for index in range(last_index, -1, -1):
            stack.append((node.children[index], child_prefix, index == last_index))

    return "\n".join(lines) + "\n"

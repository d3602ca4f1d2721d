from typing import Iterator, List, Optional, Type

from .ast import N
from .tree import SyntaxNode


def ancestors_at_offset(root: SyntaxNode, offset: int) -> Iterator[SyntaxNode]:
    """
    Yields every node whose range touches `offset`, innermost first.

    A node touches the offset when the offset lies within its range or on
    one of its boundaries, so at the seam between two adjacent nodes both are
    yielded; the earlier one wins a tie on length.
    """
    touching: List[SyntaxNode] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if not node.text_range.contains_inclusive(offset):
            continue
        touching.append(node)
        stack.extend(node.children())

    touching.sort(key=lambda n: (len(n.text_range), n.text_range.start))
    return iter(touching)


def find_node_at_offset(
    root: SyntaxNode, offset: int, ast_cls: Type[N]
) -> Optional[N]:
    """The smallest node of the given type touching `offset`."""
    for node in ancestors_at_offset(root, offset):
        typed = ast_cls.cast(node)
        if typed is not None:
            return typed
    return None


def find_ancestor(node: SyntaxNode, ast_cls: Type[N], skip: int = 0) -> Optional[N]:
    """First ancestor of the given type, after skipping `skip` nodes of the chain."""
    for index, ancestor in enumerate(node.ancestors()):
        if index < skip:
            continue
        typed = ast_cls.cast(ancestor)
        if typed is not None:
            return typed
    return None

from typing import Dict, Iterator, List, Optional, Tuple

from cratenav.spec.models import FileId, TextRange
from .kinds import SyntaxKind
from .tokens import AttrData


class SyntaxTree:
    """
    An immutable, arena-backed syntax tree for one file.

    Nodes are plain integer indices into parallel arrays of kind, range,
    parent and children. `SyntaxNode` is a lightweight view over one index.
    ATTR nodes additionally carry the `AttrData` recorded by the parser.
    """

    def __init__(
        self,
        file_id: FileId,
        text: str,
        kinds: List[SyntaxKind],
        ranges: List[TextRange],
        parents: List[int],
        children: List[List[int]],
        attrs: Optional[Dict[int, AttrData]] = None,
    ):
        self.file_id = file_id
        self.text = text
        self._kinds: Tuple[SyntaxKind, ...] = tuple(kinds)
        self._ranges: Tuple[TextRange, ...] = tuple(ranges)
        self._parents: Tuple[int, ...] = tuple(parents)
        self._children: Tuple[Tuple[int, ...], ...] = tuple(tuple(c) for c in children)
        self._attrs: Dict[int, AttrData] = dict(attrs or {})

    @property
    def root(self) -> "SyntaxNode":
        return SyntaxNode(self, 0)

    def node(self, index: int) -> "SyntaxNode":
        if not 0 <= index < len(self._kinds):
            raise IndexError(f"No node {index} in tree for file {self.file_id}")
        return SyntaxNode(self, index)

    def attr_data(self, index: int) -> Optional[AttrData]:
        return self._attrs.get(index)

    def __len__(self) -> int:
        return len(self._kinds)


class SyntaxNode:
    __slots__ = ("tree", "index")

    def __init__(self, tree: SyntaxTree, index: int):
        self.tree = tree
        self.index = index

    @property
    def kind(self) -> SyntaxKind:
        return self.tree._kinds[self.index]

    @property
    def text_range(self) -> TextRange:
        return self.tree._ranges[self.index]

    @property
    def text(self) -> str:
        rng = self.text_range
        return self.tree.text[rng.start : rng.end]

    @property
    def file_id(self) -> FileId:
        return self.tree.file_id

    @property
    def parent(self) -> Optional["SyntaxNode"]:
        parent = self.tree._parents[self.index]
        return None if parent < 0 else SyntaxNode(self.tree, parent)

    def children(self) -> Iterator["SyntaxNode"]:
        for child in self.tree._children[self.index]:
            yield SyntaxNode(self.tree, child)

    def ancestors(self) -> Iterator["SyntaxNode"]:
        """Yields this node, then its parent, up to the root."""
        node: Optional[SyntaxNode] = self
        while node is not None:
            yield node
            node = node.parent

    def descendants(self) -> Iterator["SyntaxNode"]:
        """Pre-order traversal, starting with this node."""
        stack = [self.index]
        while stack:
            index = stack.pop()
            yield SyntaxNode(self.tree, index)
            stack.extend(reversed(self.tree._children[index]))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        return self.tree is other.tree and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.tree), self.index))

    def __repr__(self) -> str:
        return f"{self.kind.value}@{self.text_range}"


class TreeBuilder:
    """Accumulates nodes in pre-order; ranges are fixed when a node finishes."""

    def __init__(self):
        self._kinds: List[SyntaxKind] = []
        self._starts: List[int] = []
        self._ends: List[int] = []
        self._parents: List[int] = []
        self._children: List[List[int]] = []
        self._attrs: Dict[int, AttrData] = {}

    def start_node(self, kind: SyntaxKind, start: int, parent: int = -1) -> int:
        index = len(self._kinds)
        self._kinds.append(kind)
        self._starts.append(start)
        self._ends.append(start)
        self._parents.append(parent)
        self._children.append([])
        if parent >= 0:
            self._children[parent].append(index)
        return index

    def finish_node(self, index: int, end: int) -> None:
        self._ends[index] = max(end, self._starts[index])

    def leaf(self, kind: SyntaxKind, rng: TextRange, parent: int) -> int:
        index = self.start_node(kind, rng.start, parent)
        self.finish_node(index, rng.end)
        return index

    def attr(self, rng: TextRange, parent: int, data: AttrData) -> int:
        index = self.leaf(SyntaxKind.ATTR, rng, parent)
        self._attrs[index] = data
        return index

    def finish(self, file_id: FileId, text: str) -> SyntaxTree:
        ranges = [TextRange(s, e) for s, e in zip(self._starts, self._ends)]
        return SyntaxTree(
            file_id,
            text,
            self._kinds,
            ranges,
            self._parents,
            self._children,
            self._attrs,
        )

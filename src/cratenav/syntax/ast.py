from typing import Dict, Iterator, Optional, Tuple, Type, TypeVar

from .kinds import SyntaxKind
from .tokens import AttrData, Token
from .tree import SyntaxNode

N = TypeVar("N", bound="AstNode")


class AstNode:
    """Typed view over a `SyntaxNode` of one specific kind."""

    KIND: SyntaxKind

    def __init__(self, syntax: SyntaxNode):
        self.syntax = syntax

    @classmethod
    def cast(cls: Type[N], node: SyntaxNode) -> Optional[N]:
        if node.kind != cls.KIND:
            return None
        return cls(node)

    def _child(self, ast_cls: Type[N]) -> Optional[N]:
        return next(self._children(ast_cls), None)

    def _children(self, ast_cls: Type[N]) -> Iterator[N]:
        for child in self.syntax.children():
            typed = ast_cls.cast(child)
            if typed is not None:
                yield typed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AstNode):
            return NotImplemented
        return self.syntax == other.syntax

    def __hash__(self) -> int:
        return hash(self.syntax)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.syntax!r})"


class Name(AstNode):
    KIND = SyntaxKind.NAME

    @property
    def text(self) -> str:
        raw = self.syntax.text
        return raw[2:] if raw.startswith("r#") else raw


class Visibility(AstNode):
    KIND = SyntaxKind.VISIBILITY


class Attr(AstNode):
    """
    An attribute, `#[path(args)]`, `#[path = "value"]` or `#![...]`.

    The parser records the parts of each attribute when it builds the tree.
    """

    KIND = SyntaxKind.ATTR

    def _data(self) -> AttrData:
        data = self.syntax.tree.attr_data(self.syntax.index)
        return data if data is not None else AttrData(is_inner=False, path="")

    @property
    def is_inner(self) -> bool:
        return self._data().is_inner

    @property
    def path(self) -> str:
        return self._data().path

    def token_tree(self) -> Optional[Tuple[Token, ...]]:
        """Tokens between the parentheses of `#[path(...)]`, if any."""
        return self._data().args

    def string_value(self) -> Optional[str]:
        """The literal of `#[path = "value"]`, unescaped."""
        return self._data().value


class HasAttrs:
    syntax: SyntaxNode

    def attrs(self) -> Iterator[Attr]:
        for child in self.syntax.children():
            attr = Attr.cast(child)
            if attr is not None:
                yield attr


class ItemList(AstNode, HasAttrs):
    KIND = SyntaxKind.ITEM_LIST

    def items(self) -> Iterator[SyntaxNode]:
        for child in self.syntax.children():
            if child.kind != SyntaxKind.ATTR:
                yield child

    def modules(self) -> Iterator["Module"]:
        return self._children(Module)


class Module(AstNode, HasAttrs):
    KIND = SyntaxKind.MODULE

    def name(self) -> Optional[Name]:
        return self._child(Name)

    def visibility(self) -> Optional[Visibility]:
        return self._child(Visibility)

    def item_list(self) -> Optional[ItemList]:
        return self._child(ItemList)

    @property
    def is_inline(self) -> bool:
        return self.item_list() is not None


class SourceFile(AstNode, HasAttrs):
    KIND = SyntaxKind.SOURCE_FILE

    def items(self) -> Iterator[SyntaxNode]:
        for child in self.syntax.children():
            if child.kind != SyntaxKind.ATTR:
                yield child

    def modules(self) -> Iterator[Module]:
        return self._children(Module)


_AST_BY_KIND: Dict[SyntaxKind, Type[AstNode]] = {
    SyntaxKind.SOURCE_FILE: SourceFile,
    SyntaxKind.MODULE: Module,
    SyntaxKind.ITEM_LIST: ItemList,
    SyntaxKind.NAME: Name,
    SyntaxKind.ATTR: Attr,
    SyntaxKind.VISIBILITY: Visibility,
}


def to_ast(node: SyntaxNode) -> Optional[AstNode]:
    """Wraps a node in the typed view matching its kind, if there is one."""
    ast_cls = _AST_BY_KIND.get(node.kind)
    return ast_cls(node) if ast_cls is not None else None

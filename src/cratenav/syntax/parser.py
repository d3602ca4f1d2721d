from typing import List, Optional, Tuple

import tree_sitter
import tree_sitter_rust

from cratenav.spec.models import FileId, TextRange
from .kinds import SyntaxKind, TokenKind
from .tokens import AttrData, Token
from .tree import SyntaxTree, TreeBuilder

RUST = tree_sitter.Language(tree_sitter_rust.language())

_COMMENTS = {"line_comment", "block_comment"}
# Siblings directly above an item that belong to it.
_ATTACHED = _COMMENTS | {"attribute_item"}
_STRINGS = {"string_literal", "raw_string_literal"}
_ESCAPES = {
    "\\n": "\n",
    "\\r": "\r",
    "\\t": "\t",
    "\\0": "\0",
    "\\\\": "\\",
    '\\"': '"',
    "\\'": "'",
}


class Parser:
    """
    Lowers the tree-sitter parse of a Rust file into a `SyntaxTree`.

    Only module declarations are kept in detail. Every other item becomes an
    opaque ITEM node. Modules declared in blocks inside an item (a `mod` in a
    function body, say) become children of that ITEM, so they never count as
    items of the enclosing list but the cursor can still be inside them.
    """

    def __init__(self, file_id: FileId, text: str):
        self.file_id = file_id
        self.text = text
        self.data = text.encode("utf-8", errors="surrogatepass")
        self.builder = TreeBuilder()
        self._char_at = _char_offsets(text, self.data)

    def parse(self) -> SyntaxTree:
        ts_parser = tree_sitter.Parser()
        ts_parser.language = RUST
        ts_tree = ts_parser.parse(self.data)

        root = self.builder.start_node(SyntaxKind.SOURCE_FILE, 0)
        self._items(ts_tree.root_node.children, root)
        self.builder.finish_node(root, len(self.text))
        return self.builder.finish(self.file_id, self.text)

    # --- Positions ---

    def _offset(self, byte: int) -> int:
        return byte if self._char_at is None else self._char_at[byte]

    def _range(self, node: tree_sitter.Node) -> TextRange:
        return TextRange(self._offset(node.start_byte), self._offset(node.end_byte))

    def _node_text(self, node: tree_sitter.Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode(
            "utf-8", errors="surrogatepass"
        )

    def _attached(self, node: tree_sitter.Node) -> List[tree_sitter.Node]:
        """
        Attributes and comments directly above an item belong to it. A blank
        line between a comment and what follows it ends the run.
        """
        attached: List[tree_sitter.Node] = []
        following = node
        sibling = node.prev_sibling
        while sibling is not None and sibling.type in _ATTACHED:
            if sibling.type in _COMMENTS and self._blank_line_between(
                sibling, following
            ):
                break
            attached.append(sibling)
            following = sibling
            sibling = sibling.prev_sibling
        attached.reverse()
        return attached

    def _blank_line_between(
        self, first: tree_sitter.Node, second: tree_sitter.Node
    ) -> bool:
        gap = self.data[first.end_byte : second.start_byte]
        # Line comments may or may not own their newline.
        if self.data[first.end_byte - 1 : first.end_byte] == b"\n":
            gap = b"\n" + gap
        return gap.count(b"\n") > 1

    # --- Items ---

    def _items(self, nodes: List[tree_sitter.Node], parent: int) -> None:
        for node in nodes:
            if node.type == "inner_attribute_item":
                self._attr(node, parent)
            elif node.type == "mod_item":
                self._module(node, parent)
            elif node.is_named and node.type not in _ATTACHED:
                self._item(node, parent)

    def _item(self, node: tree_sitter.Node, parent: int) -> None:
        attached = self._attached(node)
        start = attached[0] if attached else node
        index = self.builder.start_node(
            SyntaxKind.ITEM, self._offset(start.start_byte), parent
        )
        self._block_modules(node, index)
        self.builder.finish_node(index, self._offset(node.end_byte))

    def _block_modules(self, node: tree_sitter.Node, parent: int) -> None:
        """Adds the modules declared anywhere inside `node` to `parent`."""
        stack = list(reversed(node.children))
        while stack:
            child = stack.pop()
            if child.type == "mod_item":
                self._module(child, parent)
            elif child.named_child_count:
                stack.extend(reversed(child.children))

    def _module(self, node: tree_sitter.Node, parent: int) -> None:
        attached = self._attached(node)
        start = attached[0] if attached else node
        index = self.builder.start_node(
            SyntaxKind.MODULE, self._offset(start.start_byte), parent
        )
        for attr in attached:
            if attr.type == "attribute_item":
                self._attr(attr, index)
        for child in node.children:
            if child.type == "visibility_modifier":
                self.builder.leaf(SyntaxKind.VISIBILITY, self._range(child), index)

        name = node.child_by_field_name("name")
        if name is not None and not name.is_missing and name.end_byte > name.start_byte:
            self.builder.leaf(SyntaxKind.NAME, self._range(name), index)

        body = node.child_by_field_name("body")
        if body is not None:
            list_index = self.builder.start_node(
                SyntaxKind.ITEM_LIST, self._offset(body.start_byte), index
            )
            self._items(body.children, list_index)
            self.builder.finish_node(list_index, self._offset(body.end_byte))

        self.builder.finish_node(index, self._offset(node.end_byte))

    # --- Attributes ---

    def _attr(self, node: tree_sitter.Node, parent: int) -> None:
        attribute = next((c for c in node.named_children if c.type == "attribute"), None)
        path = ""
        args: Optional[Tuple[Token, ...]] = None
        value: Optional[str] = None
        if attribute is not None and attribute.child_count:
            path = "".join(self._node_text(attribute.children[0]).split())
            arguments = attribute.child_by_field_name("arguments")
            if arguments is not None:
                args = self._arguments(arguments)
            literal = attribute.child_by_field_name("value")
            if literal is not None and literal.type in _STRINGS:
                value = self._string_value(literal)

        data = AttrData(
            is_inner=node.type == "inner_attribute_item",
            path=path,
            args=args,
            value=value,
        )
        self.builder.attr(self._range(node), parent, data)

    def _arguments(self, token_tree: tree_sitter.Node) -> Optional[Tuple[Token, ...]]:
        """Flattens `(...)` into its tokens, without the outer parentheses."""
        tokens: List[Token] = []
        stack = [token_tree]
        while stack:
            node = stack.pop()
            if node.type == "token_tree":
                stack.extend(reversed(node.children))
            elif node.type not in _COMMENTS:
                tokens.append(self._token(node))

        if len(tokens) < 2 or not (tokens[0].is_punct("(") and tokens[-1].is_punct(")")):
            return None
        return tuple(tokens[1:-1])

    def _token(self, node: tree_sitter.Node) -> Token:
        text = self._node_text(node)
        if node.type in _STRINGS:
            return Token(TokenKind.STRING, text, self._string_value(node))
        if text.isidentifier() or text.startswith("r#"):
            # Keywords inside token trees are anonymous nodes.
            return Token(TokenKind.IDENT, text)
        if node.is_named:
            return Token(TokenKind.LITERAL, text)
        return Token(TokenKind.PUNCT, text)

    def _string_value(self, node: tree_sitter.Node) -> str:
        parts = []
        for child in node.named_children:
            if child.type == "string_content":
                parts.append(self._node_text(child))
            elif child.type == "escape_sequence":
                escape = self._node_text(child)
                parts.append(_ESCAPES.get(escape, escape))
        return "".join(parts)


def _char_offsets(text: str, data: bytes) -> Optional[List[int]]:
    """Maps UTF-8 byte offsets to `str` indices; None when they coincide."""
    if len(data) == len(text):
        return None
    offsets: List[int] = []
    for index, char in enumerate(text):
        offsets.extend([index] * len(char.encode("utf-8", errors="surrogatepass")))
    offsets.append(len(text))
    return offsets


def parse(text: str, file_id: FileId = 0) -> SyntaxTree:
    return Parser(file_id, text).parse()

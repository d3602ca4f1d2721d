from . import ast
from .algo import ancestors_at_offset, find_ancestor, find_node_at_offset
from .kinds import SyntaxKind, TokenKind
from .line_index import LineCol, LineIndex
from .parser import parse
from .tokens import AttrData, Token
from .tree import SyntaxNode, SyntaxTree

__all__ = [
    "ast",
    "ancestors_at_offset",
    "find_ancestor",
    "find_node_at_offset",
    "SyntaxKind",
    "TokenKind",
    "AttrData",
    "Token",
    "LineCol",
    "LineIndex",
    "parse",
    "SyntaxNode",
    "SyntaxTree",
]

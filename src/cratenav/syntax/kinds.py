from enum import Enum


class TokenKind(Enum):
    """Kinds of the tokens kept from attribute token trees."""

    IDENT = "ident"
    STRING = "string"
    LITERAL = "literal"
    PUNCT = "punct"


class SyntaxKind(Enum):
    SOURCE_FILE = "SOURCE_FILE"
    MODULE = "MODULE"
    ITEM_LIST = "ITEM_LIST"
    NAME = "NAME"
    ATTR = "ATTR"
    VISIBILITY = "VISIBILITY"
    # Any item other than a module; only modules declared in its blocks are kept.
    ITEM = "ITEM"

from dataclasses import dataclass
from typing import Optional, Tuple

from .kinds import TokenKind


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    # Unescaped contents of a string literal.
    value: Optional[str] = None

    def is_punct(self, char: str) -> bool:
        return self.kind == TokenKind.PUNCT and self.text == char

    def is_ident(self, name: str) -> bool:
        return self.kind == TokenKind.IDENT and self.text == name


@dataclass(frozen=True)
class AttrData:
    """The parts of one attribute, recorded by the parser."""

    is_inner: bool
    # `cfg`, `path`, `rustfmt::skip`
    path: str
    # Tokens between the parentheses of `#[path(...)]`.
    args: Optional[Tuple[Token, ...]] = None
    # The literal of `#[path = "value"]`, unescaped.
    value: Optional[str] = None

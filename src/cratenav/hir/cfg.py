from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from cratenav.spec import ConfigError
from cratenav.syntax import Token, TokenKind


def _unquote(value: str) -> str:
    if value.endswith('"') and len(value) >= 2:
        value = value[1:-1]
    return value.replace('\\"', '"').replace("\\\\", "\\")


@dataclass(frozen=True)
class CfgAtom:
    """`test` (value is None) or `feature = "serde"`."""

    key: str
    value: Optional[str] = None

    def __str__(self) -> str:
        return self.key if self.value is None else f'{self.key} = "{self.value}"'


@dataclass(frozen=True)
class CfgAll:
    exprs: Tuple["CfgExpr", ...]


@dataclass(frozen=True)
class CfgAny:
    exprs: Tuple["CfgExpr", ...]


@dataclass(frozen=True)
class CfgNot:
    expr: "CfgExpr"


@dataclass(frozen=True)
class CfgInvalid:
    pass


CfgExpr = Union[CfgAtom, CfgAll, CfgAny, CfgNot, CfgInvalid]


@dataclass(frozen=True)
class CfgOptions:
    atoms: FrozenSet[CfgAtom] = field(default_factory=frozenset)

    @classmethod
    def from_specs(cls, specs: Iterable[str]) -> "CfgOptions":
        """
        Builds options from `name` and `key=value` strings, as given on the
        command line or in configuration. Values may be quoted.
        """
        atoms = set()
        for spec in specs:
            spec = spec.strip()
            if not spec:
                continue
            if "=" in spec:
                key, value = spec.split("=", 1)
                key, value = key.strip(), value.strip()
                if value.startswith('"'):
                    value = _unquote(value)
                if not key or not value:
                    raise ConfigError(f"Invalid cfg option: '{spec}'")
                atoms.add(CfgAtom(key, value))
            else:
                atoms.add(CfgAtom(spec))
        return cls(frozenset(atoms))

    def with_atoms(self, atoms: Iterable[CfgAtom]) -> "CfgOptions":
        return CfgOptions(self.atoms | frozenset(atoms))

    def check(self, expr: CfgExpr) -> Optional[bool]:
        """Evaluates `expr`; None when the expression is malformed."""
        if isinstance(expr, CfgInvalid):
            return None
        if isinstance(expr, CfgAtom):
            return expr in self.atoms
        if isinstance(expr, CfgNot):
            inner = self.check(expr.expr)
            return None if inner is None else not inner
        results = [self.check(e) for e in expr.exprs]
        if None in results:
            return None
        if isinstance(expr, CfgAll):
            return all(results)
        return any(results)

    def is_enabled(self, expr: CfgExpr) -> bool:
        # Malformed predicates do not hide code.
        return self.check(expr) is not False


class _CfgParser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def parse(self) -> CfgExpr:
        expr = self._expr()
        if self.pos != len(self.tokens):
            return CfgInvalid()
        return expr

    def _expr(self) -> CfgExpr:
        token = self._peek()
        if token is None or token.kind != TokenKind.IDENT:
            return CfgInvalid()
        self.pos += 1
        name = token.text

        following = self._peek()
        if following is not None and following.is_punct("="):
            self.pos += 1
            value = self._peek()
            if value is None or value.kind != TokenKind.STRING:
                return CfgInvalid()
            self.pos += 1
            return CfgAtom(name, value.value or "")

        if following is not None and following.is_punct("("):
            self.pos += 1
            exprs = self._list()
            if exprs is None:
                return CfgInvalid()
            if name == "all":
                return CfgAll(tuple(exprs))
            if name == "any":
                return CfgAny(tuple(exprs))
            if name == "not" and len(exprs) == 1:
                return CfgNot(exprs[0])
            return CfgInvalid()

        return CfgAtom(name)

    def _list(self) -> Optional[List[CfgExpr]]:
        """Parses a comma separated list up to `)`; None if it is malformed."""
        exprs: List[CfgExpr] = []
        while True:
            token = self._peek()
            if token is None:
                return None
            if token.is_punct(")"):
                self.pos += 1
                return exprs
            exprs.append(self._expr())
            token = self._peek()
            if token is not None and token.is_punct(","):
                self.pos += 1
            elif token is None or not token.is_punct(")"):
                return None


def parse_cfg(tokens: Sequence[Token]) -> CfgExpr:
    """Parses the token tree of a `#[cfg(...)]` attribute."""
    return _CfgParser(tokens).parse()

import pytest

from cratenav.hir import CfgAll, CfgAny, CfgAtom, CfgInvalid, CfgNot, CfgOptions, parse_cfg
from cratenav.spec import ConfigError
from cratenav.syntax import Token, TokenKind, ast, parse


def _parse(text: str):
    source = ast.SourceFile.cast(parse(f"#[cfg({text})]\nmod m;").root)
    (module,) = source.modules()
    (attr,) = module.attrs()
    return parse_cfg(attr.token_tree())


def test_parses_atoms_and_combinators():
    assert _parse("test") == CfgAtom("test")
    assert _parse('feature = "serde"') == CfgAtom("feature", "serde")
    assert _parse('all(unix, not(feature = "x"))') == CfgAll(
        (CfgAtom("unix"), CfgNot(CfgAtom("feature", "x")))
    )
    assert _parse("any()") == CfgAny(())


@pytest.mark.parametrize(
    "text",
    ["", "not(a, b)", "all(a b)", "feature = serde", "weird(a)", "a b"],
)
def test_malformed_predicates_are_invalid(text):
    assert _parse(text) == CfgInvalid()


def test_unterminated_list_is_invalid():
    tokens = [
        Token(TokenKind.IDENT, "all"),
        Token(TokenKind.PUNCT, "("),
        Token(TokenKind.IDENT, "a"),
    ]

    assert parse_cfg(tokens) == CfgInvalid()


def test_evaluation():
    options = CfgOptions.from_specs(["test", 'feature="serde"'])

    assert options.check(_parse("test")) is True
    assert options.check(_parse("unix")) is False
    assert options.check(_parse('all(test, feature = "serde")')) is True
    assert options.check(_parse("any(unix, windows)")) is False
    assert options.check(_parse("not(unix)")) is True
    assert options.check(_parse("all()")) is True
    assert options.check(_parse("any()")) is False


def test_invalid_predicates_do_not_disable_code():
    options = CfgOptions()

    assert options.check(CfgInvalid()) is None
    assert options.check(CfgAll((CfgAtom("a"), CfgInvalid()))) is None
    assert options.is_enabled(CfgInvalid())
    assert not options.is_enabled(CfgAtom("a"))


def test_from_specs_accepts_quoted_and_bare_values():
    options = CfgOptions.from_specs(["feature=serde", ' feature = "std" ', "", "unix"])

    assert options.atoms == frozenset(
        {CfgAtom("feature", "serde"), CfgAtom("feature", "std"), CfgAtom("unix")}
    )


@pytest.mark.parametrize("spec", ["=x", "feature=", 'feature=""'])
def test_from_specs_rejects_empty_parts(spec):
    with pytest.raises(ConfigError):
        CfgOptions.from_specs([spec])


def test_with_atoms_extends_the_set():
    options = CfgOptions.from_specs(["a"]).with_atoms([CfgAtom("b")])

    assert options.atoms == frozenset({CfgAtom("a"), CfgAtom("b")})

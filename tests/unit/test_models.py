import pytest

from cratenav.spec import NavigationTarget, TextRange


def test_text_range_containment():
    rng = TextRange(2, 5)

    assert rng.contains(2) and not rng.contains(5)
    assert rng.contains_inclusive(5)
    assert rng.contains_range(TextRange(3, 5))
    assert not rng.contains_range(TextRange(1, 3))
    assert rng.cover(TextRange(7, 9)) == TextRange(2, 9)
    assert len(rng) == 3
    assert str(rng) == "2..5"
    assert TextRange.empty(4).is_empty()


def test_text_range_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        TextRange(3, 1)


def test_navigation_target_equality_ignores_description():
    a = NavigationTarget(0, TextRange(0, 8), "foo", description="mod foo")
    b = NavigationTarget(0, TextRange(0, 8), "foo", description="pub mod foo")

    assert a == b
    assert a.focus_or_full_range() == TextRange(0, 8)

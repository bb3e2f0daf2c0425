import pytest

from puppetpy.text import TextRange, slice_text_range


def test_text_range_constructors():
    assert TextRange.at(4, 3) == TextRange(4, 7)
    assert TextRange.empty(5).is_empty()
    assert TextRange(2, 9).length == 7


def test_text_range_rejects_inverted_or_negative_bounds():
    with pytest.raises(ValueError):
        TextRange(5, 4)
    with pytest.raises(ValueError):
        TextRange(-1, 2)


def test_text_range_contains_is_half_open():
    span = TextRange(2, 4)

    assert not span.contains(1)
    assert span.contains(2)
    assert span.contains(3)
    assert not span.contains(4)


def test_text_range_cover_and_slice():
    source = "String $version"
    covered = TextRange(0, 6).cover(TextRange(7, 15))

    assert covered.as_tuple() == (0, 15)
    assert slice_text_range(source, covered) == source
    assert repr(covered) == "TextRange(0, 15)"

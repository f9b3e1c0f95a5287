"""Unit tests for byte to character offset translation."""

import pytest

from piecetok import OffsetError, OffsetMap, Piece, Token, to_char_offsets


def test_ascii_offsets_are_identical():
    """ASCII text maps every byte position to the same character position."""
    offsets = OffsetMap("hello")
    assert offsets.n_bytes == offsets.n_chars == 5
    assert [offsets.to_char(i) for i in range(6)] == list(range(6))
    assert offsets.to_byte(5) == 5


def test_two_byte_character():
    """'é' spans two bytes but one character."""
    offsets = OffsetMap("café")
    assert offsets.n_bytes == 5
    assert offsets.to_byte(3) == 3
    assert offsets.to_byte(4) == 5
    assert offsets.to_char(3) == 3
    assert offsets.to_char(5) == 4


def test_split_character_raises():
    """A byte offset inside a character has no character position."""
    offsets = OffsetMap("café")
    with pytest.raises(OffsetError) as exc_info:
        offsets.to_char(4)
    assert exc_info.value.byte_pos == 4


def test_four_byte_character():
    """Astral characters count as one character."""
    offsets = OffsetMap("a😀b")
    assert offsets.n_bytes == 6
    assert offsets.to_byte(2) == 5
    assert offsets.to_char(5) == 2
    assert offsets.to_char(6) == 3


def test_lone_surrogate_width():
    """Lone surrogates take three bytes, as with surrogatepass encoding."""
    text = "\ud800x"
    offsets = OffsetMap(text)
    assert offsets.n_bytes == len(text.encode("utf-8", "surrogatepass")) == 4
    assert offsets.to_char(3) == 1


def test_out_of_range_raises():
    """Offsets past either end are rejected."""
    offsets = OffsetMap("é")
    with pytest.raises(IndexError):
        offsets.to_char(3)
    with pytest.raises(IndexError):
        offsets.to_byte(-1)


def test_to_char_offsets_rewrites_pieces():
    """Piece byte offsets become token character offsets."""
    pieces = [Piece(1, 0, 3, False), Piece(2, 3, 5, True)]
    assert to_char_offsets("café", pieces) == [Token(1, 0, 3, False), Token(2, 3, 4, True)]


def test_to_char_offsets_reuses_map():
    """An existing map can be shared between calls."""
    text = "naïve café"
    offsets = OffsetMap(text)
    tokens = to_char_offsets(text, [Piece(7, 7, 12, False)], offsets)
    assert tokens == [Token(7, 6, 10, False)]
    assert text[6:10] == "café"


def test_token_aliases():
    """Tokens expose the character span under both names."""
    tok = Token(5, 2, 4, True)
    assert (tok.start_char, tok.end_char) == tok.span == (2, 4)

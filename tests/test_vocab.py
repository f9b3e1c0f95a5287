"""Unit tests for vocabulary construction and queries."""

import pytest

import piecetok as pt
from piecetok import ConstructionError, ConstructionErrorKind, PieceTokError


# Construction validation
# ---------------------------------------------------------------------------


def test_unsorted_input_raises():
    """Entries out of byte order fail with UNSORTED_INPUT."""
    with pytest.raises(ConstructionError) as exc_info:
        pt.build_vocabulary([(b"b", 1), (b"a", 2)], unk_id=0)
    err = exc_info.value
    assert err.kind is ConstructionErrorKind.UNSORTED_INPUT
    assert err.key == b"a"
    assert err.index == 1
    assert "unsorted input" in str(err)


def test_duplicate_key_raises():
    """A key defined twice fails with DUPLICATE_KEY, even with the same id."""
    with pytest.raises(ConstructionError) as exc_info:
        pt.build_vocabulary([(b"a", 1), (b"a", 1)], unk_id=0)
    assert exc_info.value.kind is ConstructionErrorKind.DUPLICATE_KEY


def test_duplicate_continuation_key_raises():
    """Continuation keys are checked before their marker is stripped."""
    with pytest.raises(ConstructionError) as exc_info:
        pt.build_vocabulary([(b"##a", 1), (b"##a", 2)], unk_id=0)
    assert exc_info.value.kind is ConstructionErrorKind.DUPLICATE_KEY


def test_empty_vocabulary_raises():
    """No entries fails with EMPTY_VOCABULARY."""
    with pytest.raises(ConstructionError) as exc_info:
        pt.build_vocabulary([], unk_id=0)
    assert exc_info.value.kind is ConstructionErrorKind.EMPTY_VOCABULARY


def test_negative_ids_raise():
    """Token ids and the unknown id must be non-negative."""
    with pytest.raises(ConstructionError) as exc_info:
        pt.build_vocabulary([(b"a", -1)], unk_id=0)
    assert exc_info.value.kind is ConstructionErrorKind.INVALID_ID

    with pytest.raises(ConstructionError) as exc_info:
        pt.build_vocabulary([(b"a", 1)], unk_id=-5)
    assert exc_info.value.kind is ConstructionErrorKind.INVALID_ID


def test_construction_error_is_library_error():
    """ConstructionError belongs to the piecetok hierarchy."""
    assert issubclass(ConstructionError, PieceTokError)


def test_generator_input_is_accepted():
    """Entries may come from any iterable."""
    vocab = pt.build_vocabulary(((k, i) for i, k in enumerate([b"a", b"b"])), unk_id=9)
    assert vocab.exact_match(b"b") == 1


# Queries
# ---------------------------------------------------------------------------


def test_continuation_keys_are_split(make_vocab):
    """'##' keys are looked up in continuation form only."""
    vocab = make_vocab(["[UNK]", "ab", "##c", "c"])
    assert vocab.exact_match(b"c") == 3
    assert vocab.exact_match(b"c", continuation=True) == 2
    assert vocab.exact_match(b"##c") is None
    assert vocab.exact_match(b"ab", continuation=True) is None
    assert len(vocab.starters) == 3
    assert len(vocab.followers) == 1
    assert len(vocab) == 4


def test_can_continue(make_vocab):
    """Prefix queries against leading and continuation keys."""
    vocab = make_vocab(["[UNK]", "abc", "##de"])
    assert vocab.can_continue(b"ab")
    assert not vocab.can_continue(b"d")
    assert vocab.can_continue(b"d", continuation=True)
    assert not vocab.can_continue(b"a", continuation=True)


def test_bare_marker_is_a_leading_key(make_vocab):
    """A key equal to the marker itself is an ordinary leading key."""
    vocab = make_vocab(["[UNK]", "#", "##"])
    assert vocab.exact_match(b"##") == 2
    assert len(vocab.followers) == 0


def test_token_to_id(make_vocab):
    """Lookup by vocabulary spelling, marker included."""
    vocab = make_vocab(["[UNK]", "un", "##able", "able"])
    assert vocab.token_to_id("un") == 1
    assert vocab.token_to_id("##able") == 2
    assert vocab.token_to_id("able") == 3
    assert vocab.token_to_id("##un") is None


def test_empty_marker_shares_one_automaton(make_vocab):
    """Without a continuation marker every key can continue a word."""
    vocab = make_vocab(["[UNK]", "a", "b"], continuation_prefix=b"")
    assert vocab.followers is vocab.starters
    assert vocab.exact_match(b"b", continuation=True) == 2
    assert len(vocab) == 3


def test_unknown_settings_are_configurable(make_vocab):
    """Unknown id and display form come from the caller."""
    vocab = make_vocab(["a"], unk_id=42, unk_token="<unk>", unk_scope="word")
    assert vocab.unk_id == 42
    assert vocab.unk_token == "<unk>"
    assert vocab.unk_scope is pt.UnknownScope.WORD

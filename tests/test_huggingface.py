"""Adapter tests and differential checks against huggingface's WordPiece model."""

import random

import pytest

pytest.importorskip("tokenizers")

import piecetok as pt
from piecetok.errors import PatternError
from piecetok.huggingface import HuggingFaceModel

from conftest import VOCAB_TOKENS


# pieces that combine into known, partly known and unknown words
FRAGMENTS = ["a", "ab", "abc", "c", "é", "caf", "un", "aff", "able", "ein", "bei", "spiel", "s", "x", "日"]
SEPARATORS = [" ", "  ", "\t", "\n", ",", "."]


@pytest.fixture
def model(tokenizer):
    """Return the adapter over the shared test vocabulary."""
    return HuggingFaceModel(tokenizer)


def _random_text(rng: random.Random) -> str:
    parts = []
    for _ in range(rng.randint(0, 12)):
        parts.append("".join(rng.choice(FRAGMENTS) for _ in range(rng.randint(1, 4))))
        parts.append(rng.choice(SEPARATORS))
    return "".join(parts)


# Model calls
# ---------------------------------------------------------------------------


def test_tokenize_words(model):
    """Pre-tokenized words become tokens with values and text offsets."""
    tokens = model.tokenize([("unaffable", (0, 9)), ("café", (10, 14))])
    assert [t.id for t in tokens] == [11, 12, 13, 14, 15]
    assert [t.value for t in tokens] == ["un", "##aff", "##able", "caf", "##é"]
    assert [t.offsets for t in tokens] == [(0, 2), (2, 5), (5, 9), (10, 13), (13, 14)]


def test_tokenize_unknown_word(model):
    """An unknown word yields the unknown token over the whole word."""
    tokens = model.tokenize([("abx", (4, 7))])
    assert [(t.id, t.value, t.offsets) for t in tokens] == [(2, "[UNK]", (4, 7))]


def test_tokenize_replaces_whole_word_for_any_scope(vocab_path):
    """Unknown words become one token even when the tokenizer keeps matched pieces."""
    tok = pt.WordPieceTokenizer.from_vocab(vocab_path, unk_scope=pt.UnknownScope.REMAINDER)
    assert tok.encode("abx", add_special_tokens=False).ids == [17, 2]

    model = HuggingFaceModel(tok)
    tokens = model.tokenize([("abx", (4, 7))])
    assert [(t.id, t.value, t.offsets) for t in tokens] == [(2, "[UNK]", (4, 7))]
    assert model.to_tokenizer().encode("abx").ids == [2]


def test_lookups(model):
    """Id and token lookups follow the vocabulary file."""
    assert model.token_to_id("##able") == 13
    assert model.token_to_id("missing") is None
    assert model.id_to_token(3) == "[CLS]"
    assert model.id_to_token(999) is None
    assert model.get_vocab_size() == len(VOCAB_TOKENS)
    assert model.get_vocab()["hello"] == 22
    assert "[unused0]" not in model.get_vocab(with_unused=False)


def test_save(model, tmp_path):
    """save writes a vocabulary file, optionally prefixed."""
    (path,) = model.save(tmp_path, "bert")
    assert path.endswith("bert-vocab.txt")
    assert pt.load_vocab(path).tokens == VOCAB_TOKENS


def test_custom_pattern_has_no_pre_tokenizer(vocab_path):
    """Custom split patterns cannot be mirrored by a huggingface pre-tokenizer."""
    tok = pt.WordPieceTokenizer.from_vocab(vocab_path, custom_pattern=r"\w+")
    with pytest.raises(PatternError):
        HuggingFaceModel(tok).to_tokenizer()


# Differential checks
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("pattern", ["whitespace", "bert"])
@pytest.mark.parametrize("seed", range(10))
def test_matches_huggingface_wordpiece(vocab_path, pattern, seed):
    """Ids and offsets agree with huggingface's WordPiece on random text."""
    tok = pt.WordPieceTokenizer.from_vocab(vocab_path, pattern)
    hf = HuggingFaceModel(tok).to_tokenizer()
    rng = random.Random(seed)
    for _ in range(30):
        text = _random_text(rng)
        ours = tok.encode(text, add_special_tokens=False)
        theirs = hf.encode(text)
        assert ours.ids == theirs.ids, text
        assert ours.offsets == [tuple(o) for o in theirs.offsets], text

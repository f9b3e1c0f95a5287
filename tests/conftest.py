"""Shared fixtures for piecetok tests."""

import pytest

import piecetok as pt


# small BERT-style vocabulary; line index is the token id
VOCAB_TOKENS = [
    "[PAD]",  # 0
    "[unused0]",  # 1
    "[UNK]",  # 2
    "[CLS]",  # 3
    "[SEP]",  # 4
    "[MASK]",  # 5
    "ein",  # 6
    "interess",  # 7
    "##antes",  # 8
    "bei",  # 9
    "##spiel",  # 10
    "un",  # 11
    "##aff",  # 12
    "##able",  # 13
    "caf",  # 14
    "##é",  # 15
    "é",  # 16
    "ab",  # 17
    "abc",  # 18
    "##c",  # 19
    ".",  # 20
    ",",  # 21
    "hello",  # 22
    "##s",  # 23
]


def _entries(tokens: list[str]) -> list[tuple[bytes, int]]:
    return sorted((tok.encode("utf-8"), i) for i, tok in enumerate(tokens))


@pytest.fixture
def make_vocab():
    """Return a factory building a Vocabulary from tokens listed in id order."""

    def _make(tokens: list[str], **kwargs) -> pt.Vocabulary:
        if "unk_id" not in kwargs:
            kwargs["unk_id"] = tokens.index("[UNK]") if "[UNK]" in tokens else len(tokens)
        return pt.build_vocabulary(_entries(tokens), **kwargs)

    return _make


@pytest.fixture
def vocab_path(tmp_path):
    """Write VOCAB_TOKENS to a vocab.txt file and return its path."""
    path = tmp_path / "vocab.txt"
    path.write_text("".join(f"{tok}\n" for tok in VOCAB_TOKENS), encoding="utf-8")
    return path


@pytest.fixture
def tokenizer(vocab_path):
    """Return a WordPieceTokenizer over VOCAB_TOKENS."""
    return pt.WordPieceTokenizer.from_vocab(vocab_path)

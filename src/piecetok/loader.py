"""
Reading and writing ``vocab.txt`` files.

A vocabulary file holds one token per line; the line index is the token id.
Tokens written as ``[...]`` are special (``[UNK]``, ``[CLS]``, ``[SEP]``,
``[PAD]``, ...). ``[unused...]`` placeholders keep their id but are never
matched against text.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ._decorators import log_elapsed
from .errors import VocabLoadError, VocabularyError
from .types import Entry, TokenId
from .vocab import UnknownScope, Vocabulary, build_vocabulary

log = logging.getLogger(__name__)

VOCAB_FILENAME: Final[str] = "vocab.txt"
UNUSED_PREFIX: Final[str] = "[unused"


@dataclass(frozen=True)
class VocabFile:
    """A parsed vocabulary file: the id table plus the matching automata."""

    tokens: list[str]
    vocabulary: Vocabulary
    special_ids: frozenset[TokenId]
    unk_id: TokenId
    cls_id: TokenId | None = None
    sep_id: TokenId | None = None
    pad_id: TokenId | None = None


def _is_special(token: str) -> bool:
    return token.startswith("[") and token.endswith("]")


def parse_vocab(
    tokens: Sequence[str],
    *,
    unk_token: str = "[UNK]",
    cls_token: str = "[CLS]",
    sep_token: str = "[SEP]",
    pad_token: str = "[PAD]",
    continuation_prefix: str = "##",
    unk_scope: UnknownScope = UnknownScope.WORD,
) -> VocabFile:
    """
    Build a :class:`VocabFile` from tokens listed in id order.

    Repeated tokens keep their first id; later copies are skipped with a warning.

    :raises VocabularyError: If ``unk_token`` is not part of the vocabulary.
    """
    specials: dict[str, TokenId] = {}
    special_ids: set[TokenId] = set()
    entries: list[Entry] = []
    for tok_id, token in enumerate(tokens):
        if _is_special(token):
            if token.startswith(UNUSED_PREFIX):
                continue
            specials.setdefault(token, tok_id)
            special_ids.add(tok_id)
        entries.append((token.encode("utf-8"), tok_id))

    if unk_token not in specials:
        # unknown tokens need not be bracketed, e.g. "<unk>"
        unk_id = next((i for i, tok in enumerate(tokens) if tok == unk_token), None)
        if unk_id is None:
            raise VocabularyError(
                "unknown token missing from vocabulary",
                vocab_size=len(tokens),
                invalid_tok=unk_token,
            )
        special_ids.add(unk_id)
    else:
        unk_id = specials[unk_token]

    # stable sort, so the first id of a repeated token comes first
    entries.sort(key=lambda e: e[0])
    unique: list[Entry] = []
    for key, tok_id in entries:
        if unique and unique[-1][0] == key:
            log.warning(
                f"skipping repeated vocabulary token {key.decode('utf-8')!r} "
                f"at line {tok_id + 1} (first seen at line {unique[-1][1] + 1})"
            )
            continue
        unique.append((key, tok_id))

    vocabulary = build_vocabulary(
        unique,
        unk_id=unk_id,
        unk_token=unk_token,
        continuation_prefix=continuation_prefix.encode("utf-8"),
        unk_scope=unk_scope,
    )
    return VocabFile(
        tokens=list(tokens),
        vocabulary=vocabulary,
        special_ids=frozenset(special_ids),
        unk_id=unk_id,
        cls_id=specials.get(cls_token),
        sep_id=specials.get(sep_token),
        pad_id=specials.get(pad_token),
    )


def read_vocab_lines(path: str | Path) -> list[str]:
    """
    Read the tokens of a vocabulary file, one per line.

    Only ``\\n`` separates lines (a trailing ``\\r`` is dropped), so tokens may
    contain any other unicode line break.

    :raises VocabLoadError: If the file is missing, unreadable, or not UTF-8.
    """
    path = Path(path)
    if not path.is_file():
        raise VocabLoadError("vocabulary file does not exist", vocab_path=str(path))
    try:
        content = path.read_bytes().decode("utf-8")
    except OSError as e:
        raise VocabLoadError("cannot read vocabulary file", vocab_path=str(path)) from e
    except UnicodeDecodeError as e:
        raise VocabLoadError("vocabulary file is not UTF-8", vocab_path=str(path)) from e

    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


@log_elapsed("loading vocabulary")
def load_vocab(
    path: str | Path,
    *,
    unk_token: str = "[UNK]",
    cls_token: str = "[CLS]",
    sep_token: str = "[SEP]",
    pad_token: str = "[PAD]",
    continuation_prefix: str = "##",
    unk_scope: UnknownScope = UnknownScope.WORD,
) -> VocabFile:
    """
    Load a ``vocab.txt`` file.

    :param path: Path to the vocabulary file.
    :param unk_token: Token emitted for unmatched words; must be in the file.
    :param continuation_prefix: Marker of continuation pieces, ``##`` for BERT.
    :param unk_scope: Unknown tokens replace the whole word by default, as in BERT.
    :raises VocabLoadError: If the file cannot be read.
    :raises VocabularyError: If ``unk_token`` is missing.
    :raises ConstructionError: If the entries cannot be built into a vocabulary.
    """
    tokens = read_vocab_lines(path)
    vocab_file = parse_vocab(
        tokens,
        unk_token=unk_token,
        cls_token=cls_token,
        sep_token=sep_token,
        pad_token=pad_token,
        continuation_prefix=continuation_prefix,
        unk_scope=unk_scope,
    )
    log.info(
        f"vocabulary loaded: {len(tokens)} tokens, "
        f"{len(vocab_file.special_ids)} special tokens"
    )
    return vocab_file


@log_elapsed("saving vocabulary")
def save_vocab(tokens: Sequence[str], path: str | Path) -> Path:
    """
    Write tokens to ``path``, one per line in id order.

    If ``path`` is a directory, ``vocab.txt`` is created inside it.

    :raises VocabLoadError: If the file cannot be written.
    """
    path = Path(path)
    if path.is_dir():
        path = path / VOCAB_FILENAME

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as f:
            for token in tokens:
                f.write(f"{token}\n")
    except OSError as e:
        raise VocabLoadError("cannot write vocabulary file", vocab_path=str(path)) from e
    return path

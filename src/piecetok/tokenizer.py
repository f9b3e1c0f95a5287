"""
Text tokenization: word splitting, subword matching and output assembly.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from math import ceil
from pathlib import Path

from .automaton import MatchStats
from .engine import match_word
from .errors import VocabularyError
from .loader import VocabFile, load_vocab, save_vocab
from .offsets import OffsetMap, encode_text
from .parallel import ParallelMode, ParallelStrategy, resolve_workers
from .pattern import PatternName, WordPattern, WordSplitter
from .types import Span, Token, TokenId
from .vocab import UnknownScope, Vocabulary

log = logging.getLogger(__name__)

_DEFAULT_SPLITTER = WordSplitter(WordPattern.WHITESPACE)


def assemble(words: Iterable[list[Token]]) -> list[Token]:
    """Concatenate per-word token lists in word order."""
    tokens: list[Token] = []
    for word_tokens in words:
        tokens.extend(word_tokens)
    return tokens


def tokenize_words(
    vocab: Vocabulary,
    text: str,
    splitter: WordSplitter | None = None,
    stats: MatchStats | None = None,
) -> list[list[Token]]:
    """Tokenize ``text`` and return the tokens of each word separately."""
    if not text:
        return []
    splitter = splitter or _DEFAULT_SPLITTER
    data = encode_text(text)
    offsets = OffsetMap(text)

    words: list[list[Token]] = []
    for start, end in splitter.spans(text):
        byte_start, byte_end = offsets.to_byte(start), offsets.to_byte(end)
        pieces = match_word(vocab, data[byte_start:byte_end], offset=byte_start, stats=stats)
        words.append(offsets.to_char_offsets(pieces))
    return words


def tokenize(
    vocab: Vocabulary,
    text: str,
    splitter: WordSplitter | None = None,
    stats: MatchStats | None = None,
) -> list[Token]:
    """
    Tokenize ``text`` into subword tokens with character offsets.

    Words are found by ``splitter`` (whitespace by default); characters
    between words produce no tokens. Within a word, tokens are contiguous
    and cover it entirely. Never raises for any input string.
    """
    return assemble(tokenize_words(vocab, text, splitter, stats))


@dataclass(frozen=True)
class Encoding:
    """
    Result of :meth:`WordPieceTokenizer.encode`.

    ``words[i]`` is the range of token indices produced by the i-th word.
    """

    ids: list[TokenId] = field(default_factory=list)
    offsets: list[Span] = field(default_factory=list)
    tokens: list[str] = field(default_factory=list)
    words: list[range] = field(default_factory=list)
    attention_mask: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ids)


class WordPieceTokenizer:
    """
    Wordpiece tokenizer over a ``vocab.txt`` file.

    ``[CLS]`` and ``[SEP]``, when the vocabulary has them, frame every
    encoding. ``[PAD]`` is the id that gets no attention.
    """

    def __init__(
        self,
        vocab_file: VocabFile,
        pattern: PatternName | WordPattern = WordPattern.WHITESPACE,
        *,
        custom_pattern: str | None = None,
    ) -> None:
        self.vocab_file = vocab_file
        self.vocab: Vocabulary = vocab_file.vocabulary
        self.splitter = WordSplitter(pattern, custom_pattern=custom_pattern)

    @classmethod
    def from_vocab(
        cls,
        path: str | Path,
        pattern: PatternName | WordPattern = WordPattern.WHITESPACE,
        *,
        custom_pattern: str | None = None,
        unk_token: str = "[UNK]",
        unk_scope: UnknownScope = UnknownScope.WORD,
    ) -> "WordPieceTokenizer":
        """
        Create a tokenizer from a vocabulary file.

        :raises VocabLoadError: If the file cannot be read.
        :raises VocabularyError: If ``unk_token`` is missing from the file.
        """
        vocab_file = load_vocab(path, unk_token=unk_token, unk_scope=unk_scope)
        return cls(vocab_file, pattern, custom_pattern=custom_pattern)

    def tokenize(self, text: str, stats: MatchStats | None = None) -> list[Token]:
        """Tokenize ``text`` without special tokens."""
        return tokenize(self.vocab, text, self.splitter, stats)

    def encode(self, text: str, add_special_tokens: bool = True) -> Encoding:
        """
        Encode text into ids, character offsets, token texts and word ranges.

        With ``add_special_tokens``, ``[CLS]`` is prepended with span ``(0, 0)``
        and ``[SEP]`` appended with an empty span at the end of the last token.
        """
        ids: list[TokenId] = []
        offsets: list[Span] = []
        words: list[range] = []

        vf = self.vocab_file
        if add_special_tokens and vf.cls_id is not None:
            ids.append(vf.cls_id)
            offsets.append((0, 0))

        for word_tokens in tokenize_words(self.vocab, text, self.splitter):
            first = len(ids)
            for tok in word_tokens:
                ids.append(tok.id)
                offsets.append(tok.span)
            words.append(range(first, len(ids)))

        if add_special_tokens and vf.sep_id is not None:
            pos = offsets[-1][1] if offsets else 0
            ids.append(vf.sep_id)
            offsets.append((pos, pos))

        return Encoding(
            ids=ids,
            offsets=offsets,
            tokens=self.texts_of(ids),
            words=words,
            attention_mask=self.attentions(ids),
        )

    def encode_batch(
        self,
        texts: list[str],
        add_special_tokens: bool = True,
        num_workers: int | None = None,
        parallel_mode: ParallelStrategy | ParallelMode = ParallelMode.AUTO,
    ) -> list[Encoding]:
        """
        Encode many texts, keeping input order.

        ``off`` encodes serially, ``batch`` spreads groups of texts over a
        thread pool, ``auto`` picks ``batch`` only when there are enough texts
        to keep every worker busy.

        Matching is pure Python and holds the GIL, so threads keep input
        order but do not make CPU-bound encoding faster than ``off``.

        :raises ModeError: If ``parallel_mode`` is unknown.
        """
        mode = ParallelMode.get(parallel_mode)
        if not texts:
            return []
        workers = resolve_workers(num_workers)

        def encode_group(group: list[str]) -> list[Encoding]:
            return [self.encode(text, add_special_tokens) for text in group]

        if mode is ParallelMode.AUTO:
            mode = ParallelMode.BATCH if len(texts) >= workers * 2 else ParallelMode.OFF
        if mode is ParallelMode.OFF or workers == 1 or len(texts) <= 1:
            return encode_group(texts)

        # group texts to reduce task-scheduling overhead
        target_tasks = min(len(texts), workers * 2)
        group_size = max(1, ceil(len(texts) / target_tasks))
        text_groups = [texts[idx : idx + group_size] for idx in range(0, len(texts), group_size)]
        log.debug(f"encoding {len(texts)} texts in {len(text_groups)} groups on {workers} workers")

        with ThreadPoolExecutor(max_workers=workers) as pool:
            encoded_groups = list(pool.map(encode_group, text_groups))
        return [encoded for group in encoded_groups for encoded in group]

    def text_of(self, token_id: TokenId) -> str:
        """
        Return the vocabulary text of ``token_id``.

        :raises VocabularyError: If the id is not in the vocabulary.
        """
        tokens = self.vocab_file.tokens
        if not 0 <= token_id < len(tokens):
            raise VocabularyError(
                "token not found in vocabulary", vocab_size=len(tokens), invalid_tok=token_id
            )
        return tokens[token_id]

    def texts_of(self, token_ids: Iterable[TokenId]) -> list[str]:
        return [self.text_of(tok) for tok in token_ids]

    def token_to_id(self, token: str) -> TokenId | None:
        return self.vocab.token_to_id(token)

    def is_special(self, token_id: TokenId) -> bool:
        """Return whether the id belongs to a special token such as ``[CLS]`` or ``[UNK]``."""
        return token_id in self.vocab_file.special_ids

    def attention(self, token_id: TokenId) -> int:
        """Return 0 for padding and 1 for every other token."""
        pad_id = self.vocab_file.pad_id
        if pad_id is None:
            pad_id = 0
        return 0 if token_id == pad_id else 1

    def attentions(self, token_ids: Iterable[TokenId]) -> list[int]:
        return [self.attention(tok) for tok in token_ids]

    def vocab_size(self) -> int:
        """Return the number of ids in the vocabulary file."""
        return len(self.vocab_file.tokens)

    def save_vocab(self, path: str | Path) -> Path:
        """Write the vocabulary back to ``path`` (a file or a directory)."""
        return save_vocab(self.vocab_file.tokens, path)

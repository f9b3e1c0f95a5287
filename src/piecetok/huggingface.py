"""
Interoperability with huggingface ``tokenizers``.

Requires the ``huggingface`` extra (``pip install piecetok[huggingface]``).
The core package never imports this module.

:class:`HuggingFaceModel` answers the calls of a ``tokenizers`` model
(``tokenize`` over pre-tokenized words, id/token lookups, ``save``) using
the piecetok engine. :meth:`HuggingFaceModel.to_tokenizer` builds a native
``tokenizers.Tokenizer`` whose ``WordPiece`` model segments exactly like
piecetok with ``UnknownScope.WORD``.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from tokenizers import Token as HfToken
from tokenizers import Tokenizer as HfTokenizer
from tokenizers.models import WordPiece
from tokenizers.pre_tokenizers import BertPreTokenizer, WhitespaceSplit

from .engine import match_word
from .errors import PatternError
from .loader import UNUSED_PREFIX, save_vocab
from .offsets import OffsetMap, encode_text
from .pattern import WordPattern
from .tokenizer import WordPieceTokenizer
from .types import Span, TokenId
from .vocab import UnknownScope

log = logging.getLogger(__name__)


class HuggingFaceModel:
    """Expose a :class:`WordPieceTokenizer` through the ``tokenizers`` model calls."""

    def __init__(self, tokenizer: WordPieceTokenizer) -> None:
        self.tokenizer = tokenizer
        self.vocab = tokenizer.vocab
        self._prefix = self.vocab.continuation_prefix.decode("utf-8")

    def tokenize(self, words: Sequence[tuple[str, Span]]) -> list[HfToken]:
        """
        Tokenize pre-tokenized words given with their character offsets.

        Continuation values carry the ``##`` prefix. A word with any unmatched
        part becomes a single unknown token, whatever the vocabulary's
        ``unk_scope``, as huggingface's ``WordPiece`` does.
        """
        result: list[HfToken] = []
        vocab = self.vocab
        for word, (word_start, _) in words:
            offsets = OffsetMap(word)
            pieces = match_word(vocab, encode_text(word), unk_scope=UnknownScope.WORD)
            for tok in offsets.to_char_offsets(pieces):
                if tok.id == vocab.unk_id:
                    value = vocab.unk_token
                elif tok.is_continuation:
                    value = self._prefix + word[tok.start : tok.end]
                else:
                    value = word[tok.start : tok.end]
                result.append(
                    HfToken(tok.id, value, (word_start + tok.start, word_start + tok.end))
                )
        return result

    def token_to_id(self, token: str) -> TokenId | None:
        return self.vocab.token_to_id(token)

    def id_to_token(self, token_id: TokenId) -> str | None:
        tokens = self.tokenizer.vocab_file.tokens
        if 0 <= token_id < len(tokens):
            return tokens[token_id]
        return None

    def get_vocab_size(self) -> int:
        return self.tokenizer.vocab_size()

    def get_vocab(self, with_unused: bool = True) -> dict[str, TokenId]:
        """Return token text to id; a repeated token keeps its first id."""
        vocab: dict[str, TokenId] = {}
        for tok_id, token in enumerate(self.tokenizer.vocab_file.tokens):
            if not with_unused and token.startswith(UNUSED_PREFIX) and token.endswith("]"):
                continue
            vocab.setdefault(token, tok_id)
        return vocab

    def save(self, folder: str | Path, prefix: str | None = None) -> list[str]:
        """Write ``vocab.txt`` (or ``<prefix>-vocab.txt``) into ``folder``."""
        name = f"{prefix}-vocab.txt" if prefix else "vocab.txt"
        path = save_vocab(self.tokenizer.vocab_file.tokens, Path(folder) / name)
        return [str(path)]

    def to_wordpiece(self, max_input_chars_per_word: int = 1_000_000) -> WordPiece:
        """
        Build the equivalent ``tokenizers.models.WordPiece``.

        ``[unused...]`` placeholders are left out since piecetok never
        matches them. The word length limit defaults to a value no real
        word reaches, as piecetok has none.
        """
        return WordPiece(
            self.get_vocab(with_unused=False),
            unk_token=self.vocab.unk_token,
            max_input_chars_per_word=max_input_chars_per_word,
            continuing_subword_prefix=self._prefix,
        )

    def to_tokenizer(self) -> HfTokenizer:
        """
        Build a ``tokenizers.Tokenizer`` with the matching pre-tokenizer.

        :raises PatternError: If the tokenizer splits words with a custom pattern.
        """
        pat = self.tokenizer.splitter.pat
        if pat == WordPattern.WHITESPACE.value:
            pre_tokenizer = WhitespaceSplit()
        elif pat == WordPattern.BERT.value:
            pre_tokenizer = BertPreTokenizer()
        else:
            raise PatternError("no huggingface pre-tokenizer for custom pattern", pattern=pat)

        hf_tokenizer = HfTokenizer(self.to_wordpiece())
        hf_tokenizer.pre_tokenizer = pre_tokenizer
        log.debug(f"built huggingface tokenizer with {type(pre_tokenizer).__name__}")
        return hf_tokenizer

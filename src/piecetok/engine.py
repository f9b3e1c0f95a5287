"""
Greedy longest-match segmentation of a single word.

The engine works on UTF-8 bytes. Offsets in the pieces it returns are byte
offsets; ``piecetok.offsets`` turns them into character offsets.
"""

from dataclasses import dataclass

from .automaton import MatchStats
from .types import TokenId
from .vocab import UnknownScope, Vocabulary


@dataclass(frozen=True, slots=True)
class Piece:
    """A matched piece with half-open byte offsets."""

    id: TokenId
    start: int
    end: int
    is_continuation: bool


def match_word(
    vocab: Vocabulary,
    word: bytes,
    is_first_piece_of_word: bool = True,
    *,
    offset: int = 0,
    stats: MatchStats | None = None,
    unk_scope: UnknownScope | None = None,
) -> list[Piece]:
    """
    Split ``word`` into the longest vocabulary pieces, left to right.

    The first piece is looked up among leading keys and every later piece
    among continuation keys. Each lookup walks the automaton from the
    current position until no transition is left and commits the longest
    key seen on the way, so no position is ever scanned twice from the
    start of the word and the work is bounded by ``len(word)`` times the
    longest key.

    Piece boundaries never fall before a UTF-8 continuation byte, so keys
    holding a partial character cannot split one.

    When nothing matches, a single unknown piece is emitted: over the
    unmatched remainder, or over the whole word when the vocabulary's
    ``unk_scope`` (or the ``unk_scope`` argument, when given) is
    ``UnknownScope.WORD``.

    :param vocab: Vocabulary to match against.
    :param word: UTF-8 bytes of one word; arbitrary bytes are accepted.
    :param is_first_piece_of_word: ``False`` starts in continuation form.
    :param offset: Added to every offset, e.g. the word's position in its text.
    :param stats: Optional transition counters.
    :param unk_scope: Overrides the vocabulary's unknown scope for this call.
    :returns: Pieces covering ``word`` without gaps; empty for an empty word.
    """
    if unk_scope is None:
        unk_scope = vocab.unk_scope
    end = len(word)
    pieces: list[Piece] = []
    continuation = not is_first_piece_of_word
    pos = 0
    while pos < end:
        automaton = vocab.followers if continuation else vocab.starters
        found = automaton.find_longest_prefix(word, pos, end, stats, char_aligned=True)
        if found is None:
            if unk_scope is UnknownScope.WORD:
                pieces.clear()
                pieces.append(
                    Piece(vocab.unk_id, offset, offset + end, not is_first_piece_of_word)
                )
            else:
                pieces.append(Piece(vocab.unk_id, offset + pos, offset + end, continuation))
            break
        length, token_id = found
        pieces.append(Piece(token_id, offset + pos, offset + pos + length, continuation))
        pos += length
        continuation = True
    return pieces

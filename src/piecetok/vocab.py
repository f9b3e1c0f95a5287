"""
Immutable vocabulary store shared by every tokenize call.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Final

from .automaton import FstMap
from .errors import ConstructionError, ConstructionErrorKind
from .types import Entry, Key, TokenId

log = logging.getLogger(__name__)

DEFAULT_UNK_TOKEN: Final[str] = "[UNK]"
DEFAULT_CONTINUATION_PREFIX: Final[bytes] = b"##"


class UnknownScope(str, Enum):
    """How much of a word the unknown token replaces when matching fails."""

    # only the part of the word that could not be matched
    REMAINDER = "remainder"
    # the whole word, dropping pieces already matched (BERT wordpiece)
    WORD = "word"


class Vocabulary:
    """
    Leading and continuation automata plus the unknown-token settings.

    Keys carrying the continuation prefix are stored without it in a second
    automaton, so continuation lookups never have to match the prefix bytes.
    Instances are never mutated after construction.
    """

    __slots__ = (
        "starters",
        "followers",
        "unk_id",
        "unk_token",
        "continuation_prefix",
        "unk_scope",
    )

    def __init__(
        self,
        starters: FstMap,
        followers: FstMap,
        *,
        unk_id: TokenId,
        unk_token: str = DEFAULT_UNK_TOKEN,
        continuation_prefix: bytes = DEFAULT_CONTINUATION_PREFIX,
        unk_scope: UnknownScope = UnknownScope.REMAINDER,
    ) -> None:
        self.starters = starters
        self.followers = followers
        self.unk_id = unk_id
        self.unk_token = unk_token
        self.continuation_prefix = continuation_prefix
        self.unk_scope = UnknownScope(unk_scope)

    def automaton(self, continuation: bool = False) -> FstMap:
        return self.followers if continuation else self.starters

    def can_continue(self, prefix: bytes, continuation: bool = False) -> bool:
        """Return whether extending a match over ``prefix`` can still succeed."""
        return self.automaton(continuation).can_continue(prefix)

    def exact_match(self, key: bytes, continuation: bool = False) -> TokenId | None:
        """
        Return the id of ``key`` if it is a vocabulary entry.

        With ``continuation`` the key is looked up in its continuation-marked
        form, i.e. ``continuation_prefix + key``.
        """
        return self.automaton(continuation).exact_match(key)

    def token_to_id(self, token: str) -> TokenId | None:
        """Look up a token by its vocabulary spelling, prefix included."""
        key = token.encode("utf-8", "surrogatepass")
        prefix = self.continuation_prefix
        if _is_continuation_key(key, prefix):
            return self.followers.exact_match(key[len(prefix) :])
        return self.starters.exact_match(key)

    def __len__(self) -> int:
        if self.followers is self.starters:
            return len(self.starters)
        return len(self.starters) + len(self.followers)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(starters={len(self.starters)}, "
            f"followers={len(self.followers)}, unk_id={self.unk_id})"
        )


def _is_continuation_key(key: Key, prefix: bytes) -> bool:
    # the bare prefix on its own is an ordinary leading key
    return bool(prefix) and len(key) > len(prefix) and key.startswith(prefix)


def build_vocabulary(
    entries: Iterable[Entry],
    *,
    unk_id: TokenId,
    unk_token: str = DEFAULT_UNK_TOKEN,
    continuation_prefix: bytes = DEFAULT_CONTINUATION_PREFIX,
    unk_scope: UnknownScope = UnknownScope.REMAINDER,
) -> Vocabulary:
    """
    Build a vocabulary from ``(key, id)`` pairs sorted by key bytes.

    Keys starting with ``continuation_prefix`` become continuation entries.
    Since they all share that prefix, stripping it keeps them sorted.

    :param entries: Pairs sorted lexicographically by key, without duplicates.
    :param unk_id: Id emitted for spans no entry matches.
    :param unk_token: Display form of the unknown token.
    :param continuation_prefix: Marker of continuation keys; when empty, every
        key may be used at any position of a word.
    :param unk_scope: Whether unknown tokens replace the rest of a word or all of it.
    :raises ConstructionError: If entries are unsorted, repeated, empty, or carry a negative id.
    """
    if unk_id < 0:
        raise ConstructionError(
            "unknown token id must be non-negative", kind=ConstructionErrorKind.INVALID_ID
        )

    starters: list[Entry] = []
    followers: list[Entry] = []
    prev: Key | None = None
    count = 0
    for index, (key, token_id) in enumerate(entries):
        if prev is not None:
            if key == prev:
                raise ConstructionError(
                    "duplicate vocabulary key",
                    kind=ConstructionErrorKind.DUPLICATE_KEY,
                    key=key,
                    index=index,
                )
            if key < prev:
                raise ConstructionError(
                    "vocabulary keys must be sorted",
                    kind=ConstructionErrorKind.UNSORTED_INPUT,
                    key=key,
                    index=index,
                )
        if token_id < 0:
            raise ConstructionError(
                "token ids must be non-negative",
                kind=ConstructionErrorKind.INVALID_ID,
                key=key,
                index=index,
            )
        if _is_continuation_key(key, continuation_prefix):
            followers.append((key[len(continuation_prefix) :], token_id))
        else:
            starters.append((key, token_id))
        prev = key
        count += 1

    if count == 0:
        raise ConstructionError(
            "cannot build a vocabulary without entries",
            kind=ConstructionErrorKind.EMPTY_VOCABULARY,
        )

    starter_map = FstMap.from_sorted(starters)
    # without a marker every key can appear anywhere in a word
    follower_map = FstMap.from_sorted(followers) if continuation_prefix else starter_map
    vocab = Vocabulary(
        starter_map,
        follower_map,
        unk_id=unk_id,
        unk_token=unk_token,
        continuation_prefix=continuation_prefix,
        unk_scope=unk_scope,
    )
    log.debug(f"built vocabulary: {vocab!r}")
    return vocab

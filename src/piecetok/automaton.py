"""
Minimal acyclic automaton mapping byte-string keys to token ids.

The automaton is built incrementally from sorted keys (Daciuk et al., 2000).
Once a key diverges from its predecessor, the states of the predecessor's
tail can no longer change, so each one is merged with an equivalent state
that was already registered. Keys therefore share prefixes and suffixes.

Ids are attached through ranks instead of per-state outputs: every state
knows how many keys it accepts, and each transition carries the number of
keys that sort before it. Summing those along a path yields the key's rank,
which indexes the id table. Two keys with equal suffixes can then share
states even when their ids differ.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TypeAlias

from .errors import ConstructionError, ConstructionErrorKind
from .types import Entry, Key, TokenId

log = logging.getLogger(__name__)

# (target state, rank increment)
Transition: TypeAlias = tuple[int, int]


@dataclass(slots=True)
class MatchStats:
    """Counters filled in by automaton walks."""

    transitions: int = 0
    lookups: int = 0


class _BuildState:
    __slots__ = ("final", "edges", "index")

    def __init__(self) -> None:
        self.final = False
        # byte -> child, inserted in ascending byte order
        self.edges: dict[int, "_BuildState"] = {}
        self.index = -1

    def signature(self) -> tuple:
        # children are always registered before their parent
        return (self.final, tuple((b, child.index) for b, child in self.edges.items()))


def _common_prefix_len(a: bytes, b: bytes) -> int:
    n = min(len(a), len(b))
    i = 0
    while i < n and a[i] == b[i]:
        i += 1
    return i


class _Builder:
    """Incremental minimal automaton construction over sorted keys."""

    def __init__(self) -> None:
        self.root = _BuildState()
        # states along the previously added key, root first
        self.path: list[_BuildState] = [self.root]
        self.prev: Key | None = None
        self.register: dict[tuple, _BuildState] = {}
        self.states: list[_BuildState] = []
        self.ids: list[TokenId] = []
        self.max_key_len = 0

    def add(self, key: Key, token_id: TokenId, index: int) -> None:
        prev = self.prev
        common = 0
        if prev is not None:
            if key == prev:
                raise ConstructionError(
                    "keys must be unique", kind=ConstructionErrorKind.DUPLICATE_KEY, key=key, index=index
                )
            if key < prev:
                raise ConstructionError(
                    "keys must be sorted", kind=ConstructionErrorKind.UNSORTED_INPUT, key=key, index=index
                )
            common = _common_prefix_len(prev, key)

        self._minimize(common)

        node = self.path[common]
        for b in key[common:]:
            child = _BuildState()
            node.edges[b] = child
            self.path.append(child)
            node = child
        node.final = True

        self.ids.append(token_id)
        self.prev = key
        self.max_key_len = max(self.max_key_len, len(key))

    def _minimize(self, depth: int) -> None:
        """Register or merge every state on the previous path below ``depth``."""
        for i in range(len(self.path) - 1, depth, -1):
            child = self.path[i]
            sig = child.signature()
            existing = self.register.get(sig)
            if existing is not None:
                # replacing a key keeps the dict's byte order intact
                self.path[i - 1].edges[self.prev[i - 1]] = existing
            else:
                child.index = len(self.states)
                self.states.append(child)
                self.register[sig] = child
        del self.path[depth + 1 :]

    def finish(self) -> "FstMap":
        self._minimize(0)
        self.root.index = len(self.states)
        self.states.append(self.root)

        n_states = len(self.states)
        counts = [0] * n_states
        finals = [s.final for s in self.states]
        edges: list[dict[int, Transition]] = []
        # registration order is a post-order, so child counts are ready
        for state in self.states:
            total = 1 if state.final else 0
            table: dict[int, Transition] = {}
            for b, child in state.edges.items():
                table[b] = (child.index, total)
                total += counts[child.index]
            counts[state.index] = total
            edges.append(table)

        log.debug(
            f"built automaton: {len(self.ids)} keys, {n_states} states, "
            f"{sum(len(t) for t in edges)} transitions"
        )
        return FstMap(edges, finals, self.ids, self.root.index, self.max_key_len)


class FstMap:
    """
    Immutable map from byte keys to token ids backed by a minimal automaton.

    States are plain integers and transitions are looked up in per-state
    dicts, so stepping one byte is O(1) regardless of the number of keys.
    """

    __slots__ = ("_edges", "_finals", "_ids", "_root", "_max_key_len")

    def __init__(
        self,
        edges: list[dict[int, Transition]],
        finals: list[bool],
        ids: list[TokenId],
        root: int,
        max_key_len: int,
    ) -> None:
        self._edges = edges
        self._finals = finals
        self._ids = ids
        self._root = root
        self._max_key_len = max_key_len

    @classmethod
    def from_sorted(cls, entries: Iterable[Entry]) -> "FstMap":
        """
        Build from ``(key, id)`` pairs sorted by key with no duplicates.

        :raises ConstructionError: If keys are out of order or repeated.
        """
        builder = _Builder()
        for index, (key, token_id) in enumerate(entries):
            builder.add(key, token_id, index)
        return builder.finish()

    @property
    def root(self) -> int:
        return self._root

    @property
    def num_states(self) -> int:
        return len(self._finals)

    @property
    def max_key_len(self) -> int:
        return self._max_key_len

    def step(self, state: int, byte: int) -> Transition | None:
        """Follow the transition for ``byte``; ``None`` if there is none."""
        return self._edges[state].get(byte)

    def is_final(self, state: int) -> bool:
        return self._finals[state]

    def id_at(self, rank: int) -> TokenId:
        """Return the id of the key whose walk accumulated ``rank``."""
        return self._ids[rank]

    def _walk(self, key: bytes) -> tuple[int, int] | None:
        state, rank = self._root, 0
        edges = self._edges
        for b in key:
            t = edges[state].get(b)
            if t is None:
                return None
            state = t[0]
            rank += t[1]
        return state, rank

    def can_continue(self, prefix: bytes) -> bool:
        """Return whether some key starts with ``prefix``."""
        # every state of a minimal automaton leads to a final state,
        # except the root of an empty one
        if not self._ids:
            return False
        return self._walk(prefix) is not None

    def exact_match(self, key: bytes) -> TokenId | None:
        """Return the id of ``key`` if it is a complete key."""
        found = self._walk(key)
        if found is None or not self._finals[found[0]]:
            return None
        return self._ids[found[1]]

    get = exact_match

    def find_longest_prefix(
        self,
        data: bytes,
        start: int = 0,
        end: int | None = None,
        stats: MatchStats | None = None,
        char_aligned: bool = False,
    ) -> tuple[int, TokenId] | None:
        """
        Find the longest key that is a prefix of ``data[start:end]``.

        The walk keeps going after a final state and only stops once no
        transition exists, so a longer key always wins over its own prefix.
        Empty keys are never reported.

        :param char_aligned: Only accept matches that end on a UTF-8
            character boundary, i.e. not followed by a continuation byte.
        :returns: ``(length, id)`` of the longest match, or ``None``.
        """
        if end is None:
            end = len(data)
        edges, finals = self._edges, self._finals
        state, rank = self._root, 0
        best: tuple[int, TokenId] | None = None
        pos = start
        while pos < end:
            t = edges[state].get(data[pos])
            if t is None:
                break
            state = t[0]
            rank += t[1]
            pos += 1
            if finals[state] and (
                not char_aligned or pos == end or data[pos] & 0xC0 != 0x80
            ):
                best = (pos - start, self._ids[rank])
        if stats is not None:
            stats.lookups += 1
            stats.transitions += pos - start
        return best

    def items(self) -> Iterator[Entry]:
        """Yield ``(key, id)`` pairs in sorted key order."""
        stack: list[tuple[int, bytes, int]] = [(self._root, b"", 0)]
        while stack:
            state, prefix, rank = stack.pop()
            if self._finals[state]:
                yield prefix, self._ids[rank]
            # reversed so the smallest byte is popped first
            for b, (target, inc) in reversed(self._edges[state].items()):
                stack.append((target, prefix + bytes((b,)), rank + inc))

    def keys(self) -> Iterator[Key]:
        for key, _ in self.items():
            yield key

    def __contains__(self, key: object) -> bool:
        return isinstance(key, bytes) and self.exact_match(key) is not None

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(keys={len(self)}, states={self.num_states})"

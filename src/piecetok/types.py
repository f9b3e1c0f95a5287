"""
Core types for tokenization.
"""

from dataclasses import dataclass
from typing import TypeAlias

TokenId: TypeAlias = int
Key: TypeAlias = bytes
Entry: TypeAlias = tuple[Key, TokenId]
Span: TypeAlias = tuple[int, int]


@dataclass(frozen=True, slots=True)
class Token:
    """
    One subword of the tokenized text.

    ``start`` and ``end`` are half-open character offsets into the original
    text. ``is_continuation`` is set for every piece that is not the first
    piece of its word.
    """

    id: TokenId
    start: int
    end: int
    is_continuation: bool = False

    @property
    def start_char(self) -> int:
        return self.start

    @property
    def end_char(self) -> int:
        return self.end

    @property
    def span(self) -> Span:
        return (self.start, self.end)

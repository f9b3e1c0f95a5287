"""
Byte offset to character offset translation.

Texts are encoded with ``surrogatepass`` so that any ``str`` can be
tokenized, lone surrogates included; they take three bytes like every
other code point below U+10000.
"""

from collections.abc import Iterable

from .engine import Piece
from .errors import OffsetError
from .types import Token

ENCODING = "utf-8"
ENCODE_ERRORS = "surrogatepass"


def encode_text(text: str) -> bytes:
    """Encode text the way offsets are computed for it."""
    return text.encode(ENCODING, ENCODE_ERRORS)


def _utf8_width(cp: int) -> int:
    if cp < 0x80:
        return 1
    if cp < 0x800:
        return 2
    if cp < 0x10000:
        return 3
    return 4


class OffsetMap:
    """
    Monotonic mapping between byte and character positions of one text.

    Built in a single pass over the text. Pure ASCII text needs no tables
    since both units coincide.
    """

    __slots__ = ("n_chars", "n_bytes", "_char_to_byte", "_byte_to_char")

    def __init__(self, text: str) -> None:
        self.n_chars = len(text)
        if text.isascii():
            self.n_bytes = self.n_chars
            self._char_to_byte: list[int] | None = None
            self._byte_to_char: list[int] | None = None
            return

        char_to_byte: list[int] = []
        # -1 marks bytes inside a multi-byte sequence
        byte_to_char: list[int] = []
        pos = 0
        for i, ch in enumerate(text):
            width = _utf8_width(ord(ch))
            char_to_byte.append(pos)
            byte_to_char.append(i)
            if width > 1:
                byte_to_char.extend([-1] * (width - 1))
            pos += width
        char_to_byte.append(pos)
        byte_to_char.append(self.n_chars)

        self.n_bytes = pos
        self._char_to_byte = char_to_byte
        self._byte_to_char = byte_to_char

    def to_byte(self, char_pos: int) -> int:
        """Return the byte offset where character ``char_pos`` starts."""
        if not 0 <= char_pos <= self.n_chars:
            raise IndexError(f"character offset out of range: {char_pos}")
        if self._char_to_byte is None:
            return char_pos
        return self._char_to_byte[char_pos]

    def to_char(self, byte_pos: int) -> int:
        """
        Return the character offset of byte offset ``byte_pos``.

        :raises OffsetError: If ``byte_pos`` falls inside a multi-byte character.
        """
        if not 0 <= byte_pos <= self.n_bytes:
            raise IndexError(f"byte offset out of range: {byte_pos}")
        if self._byte_to_char is None:
            return byte_pos
        char_pos = self._byte_to_char[byte_pos]
        if char_pos < 0:
            raise OffsetError("offset splits a multi-byte character", byte_pos=byte_pos)
        return char_pos

    def to_char_offsets(self, pieces: Iterable[Piece]) -> list[Token]:
        """Rewrite byte-indexed pieces into character-indexed tokens."""
        if self._byte_to_char is None:
            return [Token(p.id, p.start, p.end, p.is_continuation) for p in pieces]
        to_char = self.to_char
        return [
            Token(p.id, to_char(p.start), to_char(p.end), p.is_continuation) for p in pieces
        ]


def to_char_offsets(
    text: str, pieces: Iterable[Piece], offset_map: OffsetMap | None = None
) -> list[Token]:
    """
    Convert pieces with byte offsets into ``text`` into tokens with character offsets.

    Pass ``offset_map`` to reuse the mapping across several calls on the same text.
    """
    if offset_map is None:
        offset_map = OffsetMap(text)
    return offset_map.to_char_offsets(pieces)

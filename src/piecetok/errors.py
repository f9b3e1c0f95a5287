"""Custom exception hierarchy for piecetok errors."""

import unicodedata
from enum import Enum

import regex as re

# longest key rendered in an error message
_KEY_DISPLAY_LIMIT = 48


def render_key(key: bytes) -> str:
    """
    Render a vocabulary key for error messages.

    Invalid UTF-8 shows as ``\\xNN`` escapes since keys may hold partial
    characters; control characters are escaped and long keys truncated.
    """
    text = key.decode("utf-8", errors="backslashreplace")
    shown = "".join(
        f"\\u{ord(c):04x}" if unicodedata.category(c)[0] == "C" else c for c in text
    )
    if len(shown) > _KEY_DISPLAY_LIMIT:
        shown = shown[: _KEY_DISPLAY_LIMIT - 3] + "..."
    return shown


class PieceTokError(Exception):
    """Base exception for all piecetok errors."""


class ConstructionErrorKind(str, Enum):
    """Reasons a vocabulary automaton cannot be built."""

    UNSORTED_INPUT = "unsorted input"
    DUPLICATE_KEY = "duplicate key"
    EMPTY_VOCABULARY = "empty vocabulary"
    INVALID_ID = "invalid id"


class ConstructionError(PieceTokError):
    """Raised when a vocabulary store cannot be built from its entries."""

    def __init__(
        self,
        message: str,
        *,
        kind: ConstructionErrorKind,
        key: bytes | None = None,
        index: int | None = None,
    ) -> None:
        """Initialize with the failure kind plus the offending key and its position."""
        extra = f" ({kind.value}) "
        if key is not None:
            extra += f"(key: {render_key(key)!r}) "
        if index is not None:
            extra += f"(index: {index}) "
        super().__init__(message + extra)
        self.kind = kind
        self.key = key
        self.index = index


class VocabularyError(PieceTokError):
    """Raised when vocabulary contents or lookups are invalid."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_tok: int | str | None = None,
    ) -> None:
        """Initialize with optional token and vocab_size that get appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok!r}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_tok = invalid_tok


class VocabLoadError(PieceTokError):
    """Raised when reading or writing a vocabulary file fails."""

    def __init__(self, message: str, *, vocab_path: str | None = None) -> None:
        extra = " "
        if vocab_path:
            extra += f"(path: {vocab_path}) "
        super().__init__(message + extra)
        self.vocab_path = vocab_path


class PatternError(PieceTokError):
    """Raised for unknown pattern names and regexes that do not compile."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize with the rejected pattern and the compile error, if any.

        :param message: Error message.
        :param pattern: The word pattern or pattern name that was rejected.
        :param regex_err: The error raised by ``regex.compile``.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err


class ModeError(PieceTokError):
    """Raised when an unknown parallel mode is requested."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available


class OffsetError(PieceTokError):
    """Raised when a byte offset does not fall on a character boundary."""

    def __init__(self, message: str, *, byte_pos: int) -> None:
        super().__init__(f"{message} (byte offset: {byte_pos})")
        self.byte_pos = byte_pos

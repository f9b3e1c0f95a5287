"""Word boundary patterns applied before subword matching."""

from collections.abc import Iterator
from enum import Enum
from typing import Final, Literal

import regex as re

from .errors import PatternError
from .types import Span

# unicode punctuation plus every ASCII symbol, as BERT treats `$`, `+`, `^` alike
_PUNCT: Final[str] = r"\p{P}!-/:-@\[-`{-~"


class WordPattern(str, Enum):
    """
    Pre-defined regex patterns whose matches are the words of a text.

    Sources:
    - WHITESPACE: split on unicode whitespace only
    - BERT: https://github.com/huggingface/tokenizers (BertPreTokenizer)
    """

    WHITESPACE = r"\S+"

    # each punctuation character is a word of its own
    BERT = rf"[^\s{_PUNCT}]+|[{_PUNCT}]"

    @classmethod
    def get(cls, name: str) -> str:
        """Return the regex of a built-in pattern by name, ignoring case."""
        try:
            return cls[name.upper().replace("-", "_")].value
        except KeyError:
            raise PatternError(
                f"Unknown pattern: {name!r}. "
                f"Valid patterns: {', '.join(pat.name for pat in cls)}"
            )


PatternName = Literal["whitespace", "bert"]


def list_patterns() -> list[str]:
    """Return names of all available built-in word patterns."""
    return [pat.name.lower() for pat in WordPattern]


class WordSplitter:
    """Find word spans in text using a built-in or custom regex pattern."""

    def __init__(
        self,
        pattern: PatternName | WordPattern = WordPattern.WHITESPACE,
        *,
        custom_pattern: str | None = None,
    ) -> None:
        """
        :param pattern: Built-in pattern, by name or member. Ignored if
            ``custom_pattern`` is provided.
        :param custom_pattern: Regex whose matches are words.
        :raises PatternError: If the pattern name is unknown or the regex is invalid.
        """
        if custom_pattern is not None:
            self.pat = custom_pattern
        elif isinstance(pattern, WordPattern):
            self.pat = pattern.value
        else:
            self.pat = WordPattern.get(pattern)
        self.compiled_pat: re.Pattern[str] = _compile_pattern(self.pat)

    def spans(self, text: str) -> Iterator[Span]:
        """Yield non-empty ``(start, end)`` character spans of words, in order."""
        for m in self.compiled_pat.finditer(text):
            start, end = m.span()
            if start != end:
                yield start, end

    def split(self, text: str) -> list[str]:
        return [text[start:end] for start, end in self.spans(text)]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.pat!r})"


def _compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile and validate a regex pattern.

    :raises PatternError: If pattern is invalid.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e)

"""piecetok: wordpiece tokenization over a minimal byte automaton."""

from .automaton import FstMap, MatchStats
from .engine import Piece, match_word
from .errors import (
    ConstructionError,
    ConstructionErrorKind,
    ModeError,
    OffsetError,
    PatternError,
    PieceTokError,
    VocabLoadError,
    VocabularyError,
)
from .loader import VocabFile, load_vocab, parse_vocab, save_vocab
from .offsets import OffsetMap, to_char_offsets
from .parallel import ParallelMode, list_parallel_modes
from .pattern import WordPattern, WordSplitter, list_patterns
from .tokenizer import Encoding, WordPieceTokenizer, assemble, tokenize
from .types import Token
from .vocab import UnknownScope, Vocabulary, build_vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("piecetok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "build_vocabulary",
    "tokenize",
    "Vocabulary",
    "UnknownScope",
    "Token",
    "FstMap",
    "MatchStats",
    "Piece",
    "match_word",
    "OffsetMap",
    "to_char_offsets",
    "assemble",
    "WordPattern",
    "WordSplitter",
    "list_patterns",
    "WordPieceTokenizer",
    "Encoding",
    "VocabFile",
    "load_vocab",
    "parse_vocab",
    "save_vocab",
    "ParallelMode",
    "list_parallel_modes",
    "PieceTokError",
    "ConstructionError",
    "ConstructionErrorKind",
    "VocabularyError",
    "VocabLoadError",
    "PatternError",
    "ModeError",
    "OffsetError",
]

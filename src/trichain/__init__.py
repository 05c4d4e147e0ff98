"""TriChain: trigram Markov-chain text generation."""

from .chain import TripletChain
from .codec import deserialize, serialize
from .exceptions import (
    EmptyModelError,
    InvalidTripletError,
    PatternError,
    SnapshotError,
    TokenizationError,
    TriChainError,
)
from .factory import from_pretrained, get_tokenizer, list_patterns, list_tokenizers
from .pattern import TokenPattern
from .sampling import weighted_choice
from .store import BEGIN, END, TripletStore
from .tokenizers import MeCabTokenizer, Morpheme, RegexTokenizer, Tokenizer

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("trichain")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "TripletChain",
    "TripletStore",
    "BEGIN",
    "END",
    "Tokenizer",
    "RegexTokenizer",
    "MeCabTokenizer",
    "Morpheme",
    "TokenPattern",
    "TriChainError",
    "SnapshotError",
    "EmptyModelError",
    "InvalidTripletError",
    "TokenizationError",
    "PatternError",
    "serialize",
    "deserialize",
    "weighted_choice",
    "get_tokenizer",
    "from_pretrained",
    "list_patterns",
    "list_tokenizers",
]

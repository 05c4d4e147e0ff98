from enum import Enum

from .exceptions import PatternError


class TokenPattern(str, Enum):
    """
    Pre-defined regex patterns for splitting a line into tokens.

    Patterns use ``regex`` module syntax (Unicode properties, grapheme clusters).
    """

    # space-delimited languages
    WORDS = (
        r"\p{L}[\p{L}\p{M}\p{N}'’-]*|"
        r"\p{N}+(?:[.,]\p{N}+)*|"
        r"[^\s\p{L}\p{N}]"
    )

    WHITESPACE = r"\S+"

    # unspaced scripts: runs of a single script, punctuation on its own
    SCRIPT_RUNS = (
        r"\p{Han}+|"
        r"\p{Hiragana}+|"
        r"[\p{Katakana}ー]+|"
        r"\p{Hangul}+|"
        r"[\p{Latin}\p{M}]+|"
        r"\p{N}+|"
        r"[^\s\p{L}\p{N}]"
    )

    CHARS = r"\X"

    @property
    def separator(self) -> str:
        """String used to join tokens split by this pattern back into text."""
        if self in (TokenPattern.SCRIPT_RUNS, TokenPattern.CHARS):
            return ""
        return " "

    @classmethod
    def get(cls, name: str) -> "TokenPattern":
        """Get patterns by name (case-insensitive)."""
        try:
            return cls[name.upper().replace("-", "_")]
        except KeyError:
            raise PatternError(
                f"Unknown pattern: {name!r}. "
                f"Valid patterns: {', '.join(pat.name for pat in cls)}"
            )

"""Regex-based tokenizer for languages without an external analyzer."""

from typing import override
import logging

import regex as re

from ..exceptions import PatternError
from ..pattern import TokenPattern
from ..types import Token
from .base import Tokenizer


log = logging.getLogger(__name__)


class RegexTokenizer(Tokenizer):
    """Tokenizer that splits every line with a regex pattern."""

    TOKENIZER_TYPE = "regex"

    def __init__(
        self,
        pattern: TokenPattern | str = TokenPattern.WORDS,
        separator: str | None = None,
    ) -> None:
        """
        :param pattern: A :class:`TokenPattern` or a custom pattern string.
        :param separator: Join string for generated text; defaults to the
            built-in pattern's separator, or a single space for custom patterns.
        :raises PatternError: If a custom pattern does not compile.
        """
        if isinstance(pattern, TokenPattern):
            default_sep = pattern.separator
            pattern = pattern.value
        else:
            default_sep = " "
        super().__init__(default_sep if separator is None else separator)
        self.pat: str = pattern
        self.compiled_pat: re.Pattern[str] = _compile_pattern(pattern)

    @override
    def tokenize(self, text: str) -> list[list[Token]]:
        return [self.compiled_pat.findall(line) for line in text.strip().splitlines()]


def _compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a split pattern, wrapping regex errors in ``PatternError``."""
    if not pattern:
        raise PatternError("pattern must be a non-empty string")
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e) from e
    if compiled.groups:
        # findall would return group tuples instead of whole matches
        raise PatternError("pattern must not contain capturing groups", pattern=pattern)
    log.debug(f"compiled split pattern {pattern!r}")
    return compiled

"""
Base tokenizer interface consumed by the chain.
"""

from abc import ABC, abstractmethod

from ..types import Token


class Tokenizer(ABC):
    """
    Abstract base class for line-oriented tokenizers.

    ``tokenize`` returns one token list per input line. Blank tokens may
    appear in the output; consumers skip them.
    """

    TOKENIZER_TYPE: str = "base"

    def __init__(self, separator: str = " ") -> None:
        super().__init__()
        # joins generated tokens back into a sentence
        self.separator = separator

    @abstractmethod
    def tokenize(self, text: str) -> list[list[Token]]:
        """Split possibly multi-line ``text`` into lines of tokens."""
        ...

    def detokenize(self, tokens: list[Token]) -> str:
        """Join tokens with this tokenizer's separator."""
        return self.separator.join(tokens)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(separator={self.separator!r})"

"""Factory functions for creating tokenizers and chains."""

from typing import Final, Literal, overload

from .chain import TripletChain
from .exceptions import TokenizationError
from .pattern import TokenPattern
from .tokenizers.base import Tokenizer
from .tokenizers.mecab import MeCabTokenizer
from .tokenizers.regex import RegexTokenizer


# Tokenizer factory
# ===================================================================================

TokenizerName = Literal["regex", "mecab"]

Pattern = Literal["words", "whitespace", "script-runs", "chars"]

_TOKENIZER_REGISTRY: Final[dict[str, type[Tokenizer]]] = {
    "regex": RegexTokenizer,
    "mecab": MeCabTokenizer,
}


def list_tokenizers() -> list[str]:
    """Return names of all available tokenizers."""
    return list(_TOKENIZER_REGISTRY.keys())


def list_patterns() -> list[str]:
    """Return names of all available built-in split patterns."""
    return [pat.name.lower().replace("_", "-") for pat in TokenPattern]


@overload
def get_tokenizer(name: Literal["regex"], *, pattern: Pattern = "words") -> Tokenizer: ...


@overload
def get_tokenizer(name: Literal["regex"], *, custom_pattern: str) -> Tokenizer: ...


@overload
def get_tokenizer(name: Literal["mecab"]) -> Tokenizer: ...


def get_tokenizer(
    name: TokenizerName = "regex",
    *,
    pattern: Pattern = "words",
    custom_pattern: str | None = None,
) -> Tokenizer:
    """
    Create a tokenizer by name.

    :param name: "regex" splits lines with a regex pattern, "mecab" runs the
                 MeCab analyzer (configured through ``TRICHAIN_MECAB_COMMAND``
                 and ``TRICHAIN_MECAB_OPTIONS``).
    :param pattern: Built-in pattern for "regex" (e.g. "words", "script-runs").
                    Ignored if custom_pattern is provided.
    :param custom_pattern: Custom regex pattern string. Overrides pattern parameter.
    :return: Configured tokenizer instance.
    :raises TokenizationError: If the tokenizer name is unknown.
    :raises PatternError: If the pattern name is unknown or the custom pattern is invalid.

    .. code-block:: python

        tokenizer = get_tokenizer("regex", pattern="words")
        tokenizer = get_tokenizer("regex", custom_pattern=r"\\w+|[^\\w\\s]")
        tokenizer = get_tokenizer("mecab")
    """
    if name not in _TOKENIZER_REGISTRY:
        raise TokenizationError(
            f"unknown tokenizer: {name!r}. Valid tokenizers: {', '.join(list_tokenizers())}"
        )

    if name == "mecab":
        return MeCabTokenizer()

    # regex class initializer handles invalid custom patterns
    if custom_pattern is not None:
        return RegexTokenizer(custom_pattern)

    # get() handles invalid pattern names
    return RegexTokenizer(TokenPattern.get(pattern))


# ===================================================================================


# Chain factory
# ===================================================================================


def from_pretrained(
    model_path: str,
    tokenizer: Tokenizer | None = None,
    *,
    seed: int | None = None,
) -> TripletChain:
    """
    Load a trained chain from disk.

    :param model_path: Path to the .model file.
    :param tokenizer: Tokenizer for further learning and for joining output;
                      the default word tokenizer when ``None``.
    :param seed: Seed for the chain's random generator.
    :return: Chain holding the saved triplet counts.
    :raises SnapshotError: If the file doesn't exist, has wrong extension, or is malformed.

    .. code-block:: python

        chain = from_pretrained("path/to/chain.model", get_tokenizer("mecab"))
        print(chain.generate(3))
    """
    chain = TripletChain(tokenizer, seed=seed)
    chain.load(model_path)
    return chain


# ===================================================================================

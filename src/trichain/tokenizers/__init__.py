"""Tokenizer implementations feeding the chain."""

from .base import Tokenizer
from .mecab import MeCabTokenizer, Morpheme
from .regex import RegexTokenizer


__all__ = ["Tokenizer", "MeCabTokenizer", "Morpheme", "RegexTokenizer"]
